"""
strbuf exceptions.

This module defines the exception hierarchy for strbuf:

    StrbufError (base)
    ├── AllocationError - Allocator could not provide storage
    ├── OutOfRangeError - Argument outside the accepted domain
    ├── StateError - Operation needs storage the buffer no longer has
    └── ValidationError - Invalid argument type or value
"""

from .exceptions import (
    AllocationError,
    OutOfRangeError,
    StateError,
    StrbufError,
    ValidationError,
)

__all__ = [
    # Base
    "StrbufError",
    # Status-backed
    "AllocationError",
    "OutOfRangeError",
    # State
    "StateError",
    # Validation
    "ValidationError",
]
