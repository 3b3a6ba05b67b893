"""
strbuf exceptions.

This module defines the exception hierarchy for strbuf:

    StrbufError (base)
    ├── AllocationError - Allocator could not provide storage
    ├── OutOfRangeError - Argument outside the accepted domain
    ├── StateError - Operation needs storage the buffer no longer has
    └── ValidationError - Invalid argument type or value

Buffer operations report runtime conditions through ``Buffer.last_status``
and never raise for them. These exceptions exist for callers that prefer
unwinding: ``buffer.raise_for_status()`` or ``strbuf.check(status)`` convert a
non-OK status into the matching exception.

Usage:
    buf = Buffer()
    buf.append_bytes(payload)
    try:
        buf.raise_for_status()
    except strbuf.AllocationError as e:
        print(f"Error {e.code}: {e}")
        print(f"Details: {e.details}")

See Also
--------
    StrbufError : Base exception for all strbuf errors.
"""

from typing import Any

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


class StrbufError(Exception):
    """
    Base exception for all strbuf errors.

    Attributes
    ----------
    message : str
        Human-readable error description.
    code : str
        Stable, string-based error code (e.g., "ALLOCATION_FAILURE").
        Use this for programmatic error handling.
    details : dict[str, Any]
        Structured context (e.g., {"requested": 64, "capacity": 32}).
    original_code : int | None
        The numeric ``Status`` value, when the error came from a status.

    Example
    -------
    >>> try:
    ...     check(Status.OUT_OF_RANGE)
    ... except StrbufError as e:
    ...     print(f"Error code: {e.code}")
    Error code: OUT_OF_RANGE
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_code = original_code

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, code={self.code!r})"


# =============================================================================
# Status-backed Errors
# =============================================================================


class AllocationError(StrbufError, MemoryError):
    """
    The allocator could not provide the requested storage.

    Raised from an ``ALLOCATION_FAILURE`` status. The buffer that reported it
    still holds exactly the content it had before the failed call, so the
    caller may retry with a smaller request or release other buffers first.
    """

    def __init__(
        self,
        message: str,
        code: str = "ALLOCATION_FAILURE",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code or 1)


class OutOfRangeError(StrbufError, IndexError):
    """
    An argument was outside the accepted domain.

    Raised from an ``OUT_OF_RANGE`` status, e.g. a negative repeat count or an
    integer that does not fit in 64 bits. The buffer is unchanged.
    """

    def __init__(
        self,
        message: str,
        code: str = "OUT_OF_RANGE",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code or 2)


# =============================================================================
# State Errors
# =============================================================================


class StateError(StrbufError, RuntimeError):
    """
    Invalid object state error.

    Raised when an operation needs storage that is absent:
    - Viewing the text of a finalized buffer
    - Viewing the text of a buffer whose initialization failed
    """

    def __init__(
        self,
        message: str,
        code: str = "STATE_ERROR",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(StrbufError, ValueError):
    """
    Invalid argument type or value.

    Raised for programming errors that no status code describes:
    - A needle or payload that is not bytes-like or str
    - An empty split separator
    - A printf-style template that does not match its arguments
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_ARGUMENT",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)
