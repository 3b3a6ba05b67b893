"""
strbuf - Growable byte strings with explicit capacity and status reporting.

Quick Start
-----------

    >>> from strbuf import Buffer, Status, status_message
    >>>
    >>> buf = Buffer()
    >>> buf.append_bytes(b"  Hello, ")
    <Status.OK: 0>
    >>> buf.append_formatted("%s!  ", "world")
    <Status.OK: 0>
    >>> buf.trim()
    <Status.OK: 0>
    >>> buf.value
    b'Hello, world!'

Every mutating call returns a ``Status`` and records it in
``buf.last_status``. A failed call leaves the content as it was:

    >>> if buf.repeat(-1) != Status.OK:
    ...     print(status_message(buf.last_status))
    OUT_OF_RANGE

Prefer exceptions? Convert the status explicitly:

    >>> buf.raise_for_status()
    Traceback (most recent call last):
    ...
    strbuf.exceptions.exceptions.OutOfRangeError: OUT_OF_RANGE


Allocation Strategies
---------------------

Storage comes from an ``Allocator`` chosen when the buffer is created:

    >>> from strbuf import LimitedAllocator
    >>> budget = LimitedAllocator(limit=1024)
    >>> buf = Buffer(64, allocator=budget)

Copies and split pieces use the allocator of their source buffer.
``set_default_allocator()`` changes the strategy for buffers created
afterwards.


Core Classes
------------

- `Buffer` - The growable byte string
- `Status` - Closed set of operation results
- `BufferConfig` - Creation defaults (capacity, allocator)
- `HeapAllocator`, `TrackingAllocator`, `LimitedAllocator`,
  `FunctionAllocator` - Allocation strategies
"""

from strbuf._logging import setup_logging
from strbuf._version import __version__ as __version__

# Allocators
from strbuf.allocator import (
    Allocator,
    FunctionAllocator,
    HeapAllocator,
    LimitedAllocator,
    TrackingAllocator,
    get_default_allocator,
    set_default_allocator,
)

# Buffer
from strbuf.buffer import Buffer

# Configuration
from strbuf.config import DEFAULT_INITIAL_CAPACITY, BufferConfig

# Exceptions (all via strbuf.exceptions)
from strbuf.exceptions import (
    AllocationError,
    OutOfRangeError,
    StateError,
    StrbufError,
    ValidationError,
)

# Status
from strbuf.status import Status, check, status_message

# =============================================================================
# Public API
# =============================================================================
__all__ = [
    # Buffer
    "Buffer",
    # Status
    "Status",
    "status_message",
    "check",
    # Allocators
    "Allocator",
    "HeapAllocator",
    "FunctionAllocator",
    "TrackingAllocator",
    "LimitedAllocator",
    "get_default_allocator",
    "set_default_allocator",
    # Configuration
    "BufferConfig",
    "DEFAULT_INITIAL_CAPACITY",
    # Logging
    "setup_logging",
    # Exceptions
    "StrbufError",
    "AllocationError",
    "OutOfRangeError",
    "StateError",
    "ValidationError",
]
