"""
Allocation strategies for Buffer storage.

A Buffer never creates its storage directly. It asks the allocator it was
created with for a block, grows or shrinks that block through the same
allocator, and hands it back on release. Allocators signal failure by
raising ``MemoryError``; the Buffer turns that into an
``ALLOCATION_FAILURE`` status and keeps its previous content.

Memory Contract:
- ``allocate(size)`` returns a new ``bytearray`` of exactly ``size`` bytes.
- ``reallocate(block, size)`` returns a block of exactly ``size`` bytes whose
  first ``min(len(block), size)`` bytes equal ``block``'s. It may resize
  ``block`` in place or return a different object. On failure it raises
  ``MemoryError`` and leaves ``block`` untouched.
- Sizes above ``sys.maxsize`` are refused with ``MemoryError`` before any
  work is done.
- ``release(block)`` ends the block's lifetime. A block must be released by
  the allocator that produced it; every Buffer therefore keeps a reference to
  its own allocator, and copies and split pieces inherit it.

Usage::

    from strbuf import Buffer, LimitedAllocator

    arena = LimitedAllocator(limit=4096)
    buf = Buffer(64, allocator=arena)
"""

from __future__ import annotations

import sys
from collections.abc import Callable

from ._logging import scoped_logger

__all__ = [
    "Allocator",
    "HeapAllocator",
    "FunctionAllocator",
    "TrackingAllocator",
    "LimitedAllocator",
    "get_default_allocator",
    "set_default_allocator",
]

log = scoped_logger("allocator")


def _check_addressable(size: int) -> None:
    """Refuse sizes no bytearray can have with MemoryError."""
    if size > sys.maxsize:
        raise MemoryError(f"allocation of {size} bytes exceeds the address space")


class Allocator:
    """
    Base allocation strategy.

    Subclasses override the three hooks. The base class itself behaves like
    ``HeapAllocator`` so a subclass may override only what it needs.
    """

    def allocate(self, size: int) -> bytearray:
        """Return a zero-filled block of ``size`` bytes."""
        _check_addressable(size)
        return bytearray(size)

    def reallocate(self, block: bytearray, size: int) -> bytearray:
        """Resize ``block`` to ``size`` bytes, preserving its prefix."""
        _check_addressable(size)
        current = len(block)
        if size > current:
            # extend() either succeeds entirely or raises leaving block as-is
            block.extend(bytes(size - current))
        elif size < current:
            del block[size:]
        return block

    def release(self, block: bytearray) -> None:
        """End the lifetime of ``block``."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class HeapAllocator(Allocator):
    """Allocator backed directly by the interpreter heap."""


class FunctionAllocator(Allocator):
    """
    Allocator composed from three plain callables.

    Mirrors the classic allocate / reallocate / free trio so an embedding
    environment can plug in existing functions without subclassing.

    Args:
        allocate: ``(size) -> bytearray``.
        reallocate: ``(block, size) -> bytearray``.
        release: ``(block) -> None``. Optional; defaults to a no-op.

    Example:
        >>> pool = []
        >>> alloc = FunctionAllocator(
        ...     allocate=bytearray,
        ...     reallocate=lambda b, n: b + bytes(n - len(b)) if n > len(b) else b[:n],
        ...     release=pool.append,
        ... )
    """

    def __init__(
        self,
        allocate: Callable[[int], bytearray],
        reallocate: Callable[[bytearray, int], bytearray],
        release: Callable[[bytearray], None] | None = None,
    ) -> None:
        self._allocate = allocate
        self._reallocate = reallocate
        self._release = release

    def allocate(self, size: int) -> bytearray:
        _check_addressable(size)
        return self._allocate(size)

    def reallocate(self, block: bytearray, size: int) -> bytearray:
        _check_addressable(size)
        return self._reallocate(block, size)

    def release(self, block: bytearray) -> None:
        if self._release is not None:
            self._release(block)


class TrackingAllocator(Allocator):
    """
    Allocator that records every request made through it.

    Wraps another allocator (``HeapAllocator`` by default) and counts
    allocations, reallocations and releases together with live and peak
    byte totals. Useful to verify that buffers are released and that growth
    stays amortized.

    Attributes
    ----------
    allocations : int
        Successful ``allocate`` calls.
    reallocations : int
        Successful ``reallocate`` calls.
    releases : int
        ``release`` calls.
    live_bytes : int
        Bytes currently held by unreleased blocks.
    peak_bytes : int
        Highest value ``live_bytes`` has reached.
    """

    def __init__(self, inner: Allocator | None = None) -> None:
        self._inner = inner or HeapAllocator()
        self.allocations = 0
        self.reallocations = 0
        self.releases = 0
        self.live_bytes = 0
        self.peak_bytes = 0

    @property
    def balance(self) -> int:
        """Positive = leaks, negative = double-releases."""
        return self.allocations - self.releases

    def _account(self, delta: int) -> None:
        self.live_bytes += delta
        if self.live_bytes > self.peak_bytes:
            self.peak_bytes = self.live_bytes

    def allocate(self, size: int) -> bytearray:
        block = self._inner.allocate(size)
        self.allocations += 1
        self._account(size)
        return block

    def reallocate(self, block: bytearray, size: int) -> bytearray:
        old_size = len(block)
        new_block = self._inner.reallocate(block, size)
        self.reallocations += 1
        self._account(size - old_size)
        return new_block

    def release(self, block: bytearray) -> None:
        self.releases += 1
        self._account(-len(block))
        self._inner.release(block)

    def __repr__(self) -> str:
        return (
            f"TrackingAllocator(allocations={self.allocations}, "
            f"releases={self.releases}, live_bytes={self.live_bytes})"
        )


class LimitedAllocator(Allocator):
    """
    Allocator with a fixed byte budget.

    Requests that would push the bytes held through this allocator above
    ``limit`` raise ``MemoryError`` without touching the existing block.

    Args:
        limit: Maximum number of bytes held at once.
        inner: Allocator that serves requests within budget.
    """

    def __init__(self, limit: int, inner: Allocator | None = None) -> None:
        self.limit = limit
        self.used = 0
        self._inner = inner or HeapAllocator()

    @property
    def available(self) -> int:
        """Bytes still obtainable before the budget is exhausted."""
        return self.limit - self.used

    def _reserve(self, delta: int) -> None:
        if self.used + delta > self.limit:
            log.warning(
                "Allocation budget exhausted",
                extra={"requested": delta, "used": self.used, "limit": self.limit},
            )
            raise MemoryError(
                f"allocation of {delta} bytes exceeds budget ({self.used}/{self.limit} used)"
            )

    def allocate(self, size: int) -> bytearray:
        self._reserve(size)
        block = self._inner.allocate(size)
        self.used += size
        return block

    def reallocate(self, block: bytearray, size: int) -> bytearray:
        old_size = len(block)
        self._reserve(size - old_size)
        new_block = self._inner.reallocate(block, size)
        self.used += size - old_size
        return new_block

    def release(self, block: bytearray) -> None:
        self.used -= len(block)
        self._inner.release(block)

    def __repr__(self) -> str:
        return f"LimitedAllocator(limit={self.limit}, used={self.used})"


# =============================================================================
# Process-wide default
# =============================================================================

_default_allocator: Allocator = HeapAllocator()


def get_default_allocator() -> Allocator:
    """Return the allocator used by buffers created without one."""
    return _default_allocator


def set_default_allocator(allocator: Allocator) -> None:
    """
    Replace the allocator used by buffers created without one.

    Call once during startup. Buffers keep the allocator they were created
    with, so existing buffers are unaffected by a later change.

    Args:
        allocator: The new default strategy.
    """
    global _default_allocator
    _default_allocator = allocator
    log.debug("Default allocator replaced", extra={"allocator": repr(allocator)})
