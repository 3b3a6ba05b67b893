"""
Buffer - a growable, mutable byte string.

Memory Contract:
- Storage is a single ``bytearray`` of exactly ``capacity`` bytes, obtained
  from the buffer's allocator and owned by this buffer alone.
- ``length < capacity`` and ``storage[length] == 0`` hold after every call,
  including failed ones. The zero byte is the terminator.
- Any mutating call may replace the storage object. ``text`` and ``value``
  return snapshots, never live views.
- Copies and split pieces are deep copies that use the same allocator.

Error Model:
- Runtime conditions (allocation failure, out-of-range arguments) are
  reported as a ``Status``: returned by the call and kept in
  ``last_status``. The buffer content is unchanged when a call fails.
- Argument misuse (wrong types, empty split separator, malformed template)
  raises ``ValidationError``.
- ``raise_for_status()`` converts the last status into an exception for
  callers that prefer unwinding.

Shrink Truncation:
- ``set_size(n)`` with ``n <= length`` silently drops content, keeping the
  first ``n - 1`` bytes. This is the only mutator that loses data.
"""

from __future__ import annotations

from functools import total_ordering
from typing import Any

from . import _capacity, _search
from ._logging import scoped_logger
from ._render import (
    INT64_MAX,
    INT64_MIN,
    INT_MAX_WIDTH,
    UINT64_MAX,
    digit,
    render_fixed,
    render_formatted,
    render_int,
)
from .allocator import Allocator, get_default_allocator
from .config import BufferConfig, get_initial_capacity
from .exceptions import StateError, ValidationError
from .status import Status, check

__all__ = ["Buffer"]

log = scoped_logger("buffer")

# Bytes classified as whitespace by the C locale isspace()
_WHITESPACE = frozenset(b" \t\n\v\f\r")


def _as_bytes(data: Any, name: str) -> bytes:
    """Coerce a payload or needle to bytes."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, Buffer):
        return data.value
    raise ValidationError(
        f"{name} must be bytes-like, str or Buffer, got {type(data).__name__}",
        details={"argument": name, "type": type(data).__name__},
    )


def _require_int(value: Any, name: str) -> int:
    if not isinstance(value, int):
        raise ValidationError(
            f"{name} must be an int, got {type(value).__name__}",
            details={"argument": name, "type": type(value).__name__},
        )
    return value


def _byte_value(value: Any, name: str) -> int | None:
    """Return a single byte value, or None when it does not fit in a byte."""
    if isinstance(value, int):
        return value if 0 <= value <= 0xFF else None
    raw = _as_bytes(value, name)
    if len(raw) != 1:
        return None
    return raw[0]


@total_ordering
class Buffer:
    """
    Growable byte string with explicit capacity and status reporting.

    Args:
        capacity: Starting capacity in bytes, terminator included. Defaults
            to ``STRBUF_INITIAL_CAPACITY`` or 16. A value ``<= 0``, or an
            allocator failure, leaves the buffer released with
            ``last_status == ALLOCATION_FAILURE``.
        allocator: Storage strategy. Defaults to the process-wide default
            allocator at creation time.

    Example:
        >>> buf = Buffer()
        >>> buf.append_bytes(b"id=")
        <Status.OK: 0>
        >>> buf.append_int(42)
        <Status.OK: 0>
        >>> buf.value
        b'id=42'

    Use as a context manager to release storage deterministically::

        with Buffer(64) as buf:
            buf.append_formatted("%s:%d", "port", 8080)
            pieces = buf.split(":")
    """

    def __init__(self, capacity: int | None = None, *, allocator: Allocator | None = None) -> None:
        self._allocator = allocator or get_default_allocator()
        self._storage: bytearray | None = None
        self._length = 0
        self._capacity = 0
        self._status = Status.OK
        self.init(capacity)

    @classmethod
    def from_config(cls, config: BufferConfig) -> Buffer:
        """Create a buffer from a ``BufferConfig``."""
        return cls(config.initial_capacity, allocator=config.allocator)

    @classmethod
    def from_bytes(cls, data: Any, *, allocator: Allocator | None = None) -> Buffer:
        """Create a buffer holding ``data`` with an exact-fit capacity."""
        payload = _as_bytes(data, "data")
        buf = cls(len(payload) + 1, allocator=allocator)
        if buf._status == Status.OK:
            buf._append(payload)
        return buf

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def init(self, capacity: int | None = None) -> Status:
        """(Re)initialize with an empty content and ``capacity`` bytes of storage.

        Any storage currently held is released first.
        """
        capacity = get_initial_capacity() if capacity is None else _require_int(capacity, "capacity")
        self._release_storage()
        self._status = Status.ALLOCATION_FAILURE
        if capacity > 0:
            try:
                storage = self._allocator.allocate(capacity)
            except MemoryError:
                log.warning("Buffer initialization failed", extra={"new_capacity": capacity})
            else:
                storage[0] = 0
                self._storage = storage
                self._capacity = capacity
                self._status = Status.OK
        return self._status

    def _release_storage(self) -> None:
        if self._storage is not None:
            self._allocator.release(self._storage)
        self._storage = None
        self._length = 0
        self._capacity = 0

    def finalize(self) -> None:
        """Release the storage and reset to the empty state. Idempotent."""
        self._release_storage()
        self._status = Status.OK

    def close(self) -> None:
        """Alias of ``finalize()``."""
        self.finalize()

    def __enter__(self) -> Buffer:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            self.close()
        except Exception:
            pass

    def copy(self) -> Buffer:
        """Return an independent deep copy with exact-fit capacity.

        The status is recorded on both buffers. On allocation failure the
        returned buffer is in the released state.
        """
        dest = type(self)(self._length + 1, allocator=self._allocator)
        if dest._status == Status.OK:
            dest._append(self._content())
        self._status = dest._status
        return dest

    def copy_to(self, dest: Buffer) -> Status:
        """Replace ``dest`` with a deep copy of this buffer.

        ``dest`` releases its current storage and adopts this buffer's
        allocator.
        """
        if not isinstance(dest, Buffer):
            raise ValidationError(
                f"dest must be a Buffer, got {type(dest).__name__}",
                details={"argument": "dest", "type": type(dest).__name__},
            )
        if dest is self:
            self._status = Status.OK
            return self._status

        dest._release_storage()
        dest._allocator = self._allocator
        status = dest.init(self._length + 1)
        if status == Status.OK:
            status = dest._append(self._content())
        self._status = status
        return status

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def length(self) -> int:
        """Number of content bytes, terminator excluded."""
        return self._length

    @property
    def capacity(self) -> int:
        """Allocated bytes, terminator slot included. 0 when released."""
        return self._capacity

    @property
    def last_status(self) -> Status:
        """Status of the most recent status-reporting operation."""
        return self._status

    @property
    def allocator(self) -> Allocator:
        """Allocator that owns this buffer's storage."""
        return self._allocator

    @property
    def text(self) -> bytes:
        """Content followed by the zero terminator.

        Raises:
            StateError: If the buffer holds no storage.
        """
        if self._storage is None:
            raise StateError("Buffer has no storage (released or failed init).")
        return bytes(self._storage[: self._length + 1])

    @property
    def value(self) -> bytes:
        """Content bytes, terminator excluded. Empty when released."""
        return self._content()

    def _content(self) -> bytes:
        if self._storage is None:
            return b""
        return bytes(self._storage[: self._length])

    def _haystack(self) -> bytes | bytearray:
        return self._storage if self._storage is not None else b""

    def raise_for_status(self) -> None:
        """Raise the exception matching ``last_status`` unless it is OK."""
        check(
            self._status,
            details={"length": self._length, "capacity": self._capacity},
        )

    def __len__(self) -> int:
        return self._length

    def __bytes__(self) -> bytes:
        return self._content()

    def __repr__(self) -> str:
        if self._storage is None:
            return "Buffer(released)"
        return f"Buffer(length={self._length}, capacity={self._capacity}, value={self._content()!r})"

    # =========================================================================
    # Capacity
    # =========================================================================

    def set_size(self, new_size: int) -> Status:
        """Reallocate storage to exactly ``new_size`` bytes.

        Warning:
            A ``new_size`` not greater than ``length`` truncates the content
            to ``new_size - 1`` bytes.
        """
        return _capacity.set_size(self, _require_int(new_size, "new_size"))

    def set_length(self, new_length: int) -> Status:
        """Grow or shrink the content length.

        Bytes exposed by growing are zero-filled.
        """
        new_length = _require_int(new_length, "new_length")
        if new_length < 0:
            self._status = Status.OUT_OF_RANGE
            return self._status
        if _capacity.ensure(self, new_length) != Status.OK:
            return self._status

        storage = self._storage
        if new_length > self._length:
            storage[self._length : new_length] = bytes(new_length - self._length)
        self._length = new_length
        storage[new_length] = 0
        return self._status

    # =========================================================================
    # Appends
    # =========================================================================

    def _append(self, payload: bytes) -> Status:
        new_length = self._length + len(payload)
        if _capacity.ensure(self, new_length) != Status.OK:
            return self._status

        storage = self._storage
        storage[self._length : new_length] = payload
        self._length = new_length
        storage[new_length] = 0
        return self._status

    def append_bytes(self, data: Any, n: int | None = None) -> Status:
        """Append the first ``n`` bytes of ``data`` (all of it by default).

        ``n`` outside ``0..len(data)`` is ``OUT_OF_RANGE``.
        """
        payload = _as_bytes(data, "data")
        if n is not None:
            n = _require_int(n, "n")
            if n < 0 or n > len(payload):
                self._status = Status.OUT_OF_RANGE
                return self._status
            payload = payload[:n]
        return self._append(payload)

    def append_char(self, c: Any) -> Status:
        """Append one byte given as an int (0-255) or a length-1 bytes/str."""
        byte = _byte_value(c, "c")
        if byte is None:
            self._status = Status.OUT_OF_RANGE
            return self._status
        if _capacity.ensure(self, self._length + 1) != Status.OK:
            return self._status

        storage = self._storage
        storage[self._length] = byte
        self._length += 1
        storage[self._length] = 0
        return self._status

    def append_formatted(self, template: str | bytes, *args: Any) -> Status:
        """Append printf-style interpolated text.

        Example:
            >>> buf.append_formatted("%s=%05.1f", "ratio", 3.14159)
        """
        return self._append(render_formatted(template, args))

    def append_int(self, value: int) -> Status:
        """Append a signed 64-bit integer in decimal."""
        value = _require_int(value, "value")
        if not INT64_MIN <= value <= INT64_MAX:
            self._status = Status.OUT_OF_RANGE
            return self._status
        return self._append_integer(value)

    def append_uint(self, value: int) -> Status:
        """Append an unsigned 64-bit integer in decimal."""
        value = _require_int(value, "value")
        if not 0 <= value <= UINT64_MAX:
            self._status = Status.OUT_OF_RANGE
            return self._status
        return self._append_integer(value)

    def _append_integer(self, value: int) -> Status:
        if 0 <= value <= 9:
            return self.append_char(digit(value))

        # Reserve the widest rendering so digits are written without regrowth
        if _capacity.ensure(self, self._length + INT_MAX_WIDTH) != Status.OK:
            return self._status
        return self._append(render_int(value))

    def append_float(self, value: float, decimals: int) -> Status:
        """Append ``value`` in fixed-point notation with ``decimals`` digits.

        A negative ``decimals`` uses the default precision of 6. An int too
        large for a double, or a precision too large to render, is
        ``OUT_OF_RANGE``.
        """
        if not isinstance(value, (int, float)):
            raise ValidationError(
                f"value must be a number, got {type(value).__name__}",
                details={"argument": "value", "type": type(value).__name__},
            )
        decimals = _require_int(decimals, "decimals")
        try:
            rendered = render_fixed(value, decimals)
        except (OverflowError, ValueError):
            self._status = Status.OUT_OF_RANGE
            return self._status
        return self._append(rendered)

    def concat(self, other: Buffer) -> Status:
        """Append the content of another buffer (or of this one)."""
        if not isinstance(other, Buffer):
            raise ValidationError(
                f"other must be a Buffer, got {type(other).__name__}",
                details={"argument": "other", "type": type(other).__name__},
            )
        return self._append(other._content())

    # =========================================================================
    # In-place transforms
    # =========================================================================

    def repeat(self, times: int) -> Status:
        """Make the content ``times`` consecutive copies of itself.

        ``times == 0`` empties the buffer; a negative count is
        ``OUT_OF_RANGE`` and leaves the content unchanged.
        """
        times = _require_int(times, "times")
        if times < 0:
            self._status = Status.OUT_OF_RANGE
            return self._status

        self._status = Status.OK
        length = self._length
        if length == 0:
            return self._status
        if times == 0:
            self._length = 0
            self._storage[0] = 0
            return self._status

        new_length = length * times
        if _capacity.ensure(self, new_length) != Status.OK:
            return self._status

        storage = self._storage
        # Every block is copied from the untouched original range [0, length)
        original = bytes(storage[:length])
        for dst in range(length, new_length, length):
            storage[dst : dst + length] = original
        self._length = new_length
        storage[new_length] = 0
        return self._status

    def trim(self) -> Status:
        """Strip leading and trailing ASCII whitespace in place."""
        self._status = Status.OK
        length = self._length
        if length == 0:
            return self._status

        storage = self._storage
        start = 0
        while start < length and storage[start] in _WHITESPACE:
            start += 1

        if start == length:
            self._length = 0
            storage[0] = 0
            return self._status

        end = length - 1
        while end >= start and storage[end] in _WHITESPACE:
            end -= 1

        new_length = end - start + 1
        if start > 0:
            # The right-hand slice is materialized first, so overlap is safe
            storage[0:new_length] = storage[start : start + new_length]
        self._length = new_length
        storage[new_length] = 0
        return self._status

    def to_uppercase(self) -> Status:
        """Map ASCII ``a-z`` to ``A-Z`` in place."""
        if self._length:
            self._storage[: self._length] = self._storage[: self._length].upper()
        self._status = Status.OK
        return self._status

    def to_lowercase(self) -> Status:
        """Map ASCII ``A-Z`` to ``a-z`` in place."""
        if self._length:
            self._storage[: self._length] = self._storage[: self._length].lower()
        self._status = Status.OK
        return self._status

    def replace_char(self, search: Any, replace: Any) -> int:
        """Replace every ``search`` byte with ``replace``.

        Returns:
            Number of bytes replaced. A value that is not a single byte sets
            ``OUT_OF_RANGE`` and replaces nothing.
        """
        old = _byte_value(search, "search")
        new = _byte_value(replace, "replace")
        if old is None or new is None:
            self._status = Status.OUT_OF_RANGE
            return 0

        count = 0
        storage = self._storage
        pos = self._haystack().find(old, 0, self._length)
        while pos != _search.NOT_FOUND:
            storage[pos] = new
            count += 1
            pos = storage.find(old, pos + 1, self._length)
        self._status = Status.OK
        return count

    # =========================================================================
    # Search
    # =========================================================================

    def index_of(self, needle: Any) -> int:
        """Offset of the first occurrence of ``needle``, or -1.

        The empty needle is found at offset 0.
        """
        return _search.find(self._haystack(), _as_bytes(needle, "needle"), 0, self._length)

    def contains(self, needle: Any) -> bool:
        """True when ``needle`` occurs in the content."""
        return self.index_of(needle) != _search.NOT_FOUND

    def starts_with(self, prefix: Any) -> bool:
        """True when the content begins with ``prefix``."""
        return _search.starts_with(self._haystack(), self._length, _as_bytes(prefix, "prefix"))

    def ends_with(self, suffix: Any) -> bool:
        """True when the content ends with ``suffix``."""
        return _search.ends_with(self._haystack(), self._length, _as_bytes(suffix, "suffix"))

    def __contains__(self, needle: Any) -> bool:
        return self.contains(needle)

    # =========================================================================
    # Comparison
    # =========================================================================

    def compare(self, other: Buffer) -> int:
        """Lexicographic byte comparison.

        Returns:
            Negative, zero or positive. Equal prefixes compare by length
            difference, so a prefix orders before the longer buffer.
        """
        if other is self:
            return 0
        if not isinstance(other, Buffer):
            raise ValidationError(
                f"other must be a Buffer, got {type(other).__name__}",
                details={"argument": "other", "type": type(other).__name__},
            )
        n = min(self._length, other._length)
        mine = self._haystack()[:n]
        theirs = other._haystack()[:n]
        if mine != theirs:
            return -1 if mine < theirs else 1
        return self._length - other._length

    def equals(self, other: Buffer) -> bool:
        """True when both buffers hold the same bytes."""
        if other is self:
            return True
        if not isinstance(other, Buffer):
            return False
        return self._length == other._length and self._content() == other._content()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Buffer):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Buffer):
            return NotImplemented
        return self.compare(other) < 0

    __hash__ = None  # type: ignore[assignment]

    # =========================================================================
    # Split
    # =========================================================================

    def split(self, separator: Any, max_pieces: int | None = None) -> list[Buffer]:
        """
        Split the content on ``separator`` into independent buffers.

        Args:
            separator: Non-empty bytes-like or str separator.
            max_pieces: Upper bound on the number of pieces. Once
                ``max_pieces - 1`` pieces exist, the last piece takes the
                rest of the content, separators included. ``None`` means
                no limit.

        Returns:
            Pieces in order, each with exact-fit capacity. Empty content or
            ``max_pieces <= 0`` yields ``[]``. If a piece cannot be
            allocated, ``[]`` is returned and ``last_status`` is
            ``ALLOCATION_FAILURE``.

        Raises:
            ValidationError: If ``separator`` is empty.

        Example:
            >>> [p.value for p in Buffer.from_bytes(b"a,b,c,d").split(",", 2)]
            [b'a', b'b,c,d']
        """
        sep = _as_bytes(separator, "separator")
        if not sep:
            raise ValidationError("separator must not be empty", details={"argument": "separator"})
        if max_pieces is None:
            max_pieces = self._length + 1
        else:
            max_pieces = _require_int(max_pieces, "max_pieces")

        pieces: list[Buffer] = []
        self._status = Status.OK
        if self._length == 0 or max_pieces <= 0:
            return pieces

        storage = self._storage
        end = self._length
        start = 0
        current = _search.find(storage, sep, start, end)
        while current != _search.NOT_FOUND and len(pieces) + 1 < max_pieces:
            if not self._emit_piece(pieces, start, current):
                return self._abandon_split(pieces)
            start = current + len(sep)
            current = _search.find(storage, sep, start, end)

        if len(pieces) < max_pieces:
            if not self._emit_piece(pieces, start, end):
                return self._abandon_split(pieces)

        log.debug("Split buffer", extra={"scope": "split", "pieces": len(pieces), "length": end})
        return pieces

    def _emit_piece(self, pieces: list[Buffer], start: int, stop: int) -> bool:
        piece = type(self)(stop - start + 1, allocator=self._allocator)
        if piece._status != Status.OK:
            return False
        piece._append(bytes(self._storage[start:stop]))
        pieces.append(piece)
        return True

    def _abandon_split(self, pieces: list[Buffer]) -> list[Buffer]:
        log.warning("Split aborted, piece allocation failed", extra={"scope": "split", "pieces": len(pieces)})
        for piece in pieces:
            piece.finalize()
        self._status = Status.ALLOCATION_FAILURE
        return []
