"""Status codes attached to a Buffer after each operation."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from .exceptions import AllocationError, OutOfRangeError, StrbufError

__all__ = ["Status", "status_message", "check"]


class Status(IntEnum):
    """
    Closed set of operation results.

    A Buffer keeps the status of its most recent operation in
    ``Buffer.last_status`` until the next operation overwrites it.
    """

    OK = 0
    ALLOCATION_FAILURE = 1
    OUT_OF_RANGE = 2


_UNKNOWN_MESSAGE = "Unknown error code"


def status_message(code: Status | int) -> str:
    """Return the symbolic name of a status code.

    Args:
        code: A ``Status`` member or its integer value.

    Returns:
        ``"OK"``, ``"ALLOCATION_FAILURE"`` or ``"OUT_OF_RANGE"``;
        ``"Unknown error code"`` for anything else.
    """
    try:
        return Status(code).name
    except ValueError:
        return _UNKNOWN_MESSAGE


def check(
    status: Status | int,
    message: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Raise the exception matching a non-OK status.

    Args:
        status: Status returned by a Buffer operation.
        message: Optional message; defaults to the status name.
        details: Optional structured context attached to the exception.

    Raises:
        AllocationError: For ``ALLOCATION_FAILURE``.
        OutOfRangeError: For ``OUT_OF_RANGE``.
        StrbufError: For an unknown code.
    """
    if status == Status.OK:
        return

    text = message or status_message(status)
    if status == Status.ALLOCATION_FAILURE:
        raise AllocationError(text, details=details, original_code=int(status))
    if status == Status.OUT_OF_RANGE:
        raise OutOfRangeError(text, details=details, original_code=int(status))
    raise StrbufError(f"{_UNKNOWN_MESSAGE} (code {int(status)})", details=details, original_code=int(status))
