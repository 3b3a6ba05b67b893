"""
Capacity management for Buffer storage.

``ensure`` is the only growth path: every mutator asks it for the exact
post-operation length before writing. ``set_size`` is the only place that
talks to the allocator for resizing.

Growth policy: when ``required_length + 1`` exceeds the capacity, the new
capacity is ``max(capacity * 2, required_length + 1)``, which keeps the total
copy work of N appends at O(N).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._logging import scoped_logger
from .status import Status

if TYPE_CHECKING:
    from .buffer import Buffer

log = scoped_logger("capacity")


def grown_capacity(capacity: int, required_length: int) -> int:
    """Capacity to request so that ``required_length`` bytes plus the terminator fit."""
    needed = required_length + 1
    return max(capacity * 2, needed)


def set_size(buf: Buffer, new_size: int) -> Status:
    """
    Reallocate ``buf``'s storage to exactly ``new_size`` bytes.

    Shrinking to ``new_size <= length`` truncates the content to
    ``new_size - 1`` bytes. On allocator failure the buffer is untouched.
    """
    if new_size <= 0:
        buf._status = Status.OUT_OF_RANGE
        return buf._status

    old_capacity = buf._capacity
    try:
        if buf._storage is None:
            storage = buf._allocator.allocate(new_size)
        else:
            storage = buf._allocator.reallocate(buf._storage, new_size)
    except MemoryError:
        log.warning(
            "Reallocation failed",
            extra={"old_capacity": old_capacity, "new_capacity": new_size, "length": buf._length},
        )
        buf._status = Status.ALLOCATION_FAILURE
        return buf._status

    buf._storage = storage
    buf._capacity = new_size
    buf._status = Status.OK
    log.debug("Resized storage", extra={"old_capacity": old_capacity, "new_capacity": new_size})

    if buf._length >= new_size:
        log.warning(
            "Capacity below length, content truncated",
            extra={"length": buf._length, "new_capacity": new_size},
        )
        buf._length = new_size - 1
    storage[buf._length] = 0
    return buf._status


def ensure(buf: Buffer, required_length: int) -> Status:
    """Guarantee room for ``required_length`` bytes plus the terminator."""
    if required_length + 1 <= buf._capacity:
        buf._status = Status.OK
        return buf._status
    return set_size(buf, grown_capacity(buf._capacity, required_length))
