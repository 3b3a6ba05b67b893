"""
Buffer construction and invariant helpers.
"""

from strbuf import Buffer


def buffer_of(data: bytes | str, allocator=None) -> Buffer:
    """Create a buffer holding ``data`` with exact-fit capacity."""
    buf = Buffer.from_bytes(data, allocator=allocator)
    assert buf.value == (data.encode() if isinstance(data, str) else data)
    return buf


def assert_invariants(buf: Buffer) -> None:
    """
    Check the length/capacity/terminator invariants.

    - With storage: 0 <= length < capacity, storage is exactly capacity
      bytes long and the byte at length is the zero terminator.
    - Without storage: capacity and length are both 0.
    """
    if buf.capacity == 0:
        assert buf.length == 0
        assert buf._storage is None
        return

    assert 0 <= buf.length < buf.capacity
    assert len(buf._storage) == buf.capacity
    text = buf.text
    assert len(text) == buf.length + 1
    assert text[-1] == 0
