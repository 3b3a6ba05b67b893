"""
Text renderers used by the numeric and formatted appends.

Every renderer produces the exact bytes to append, so the caller can size
the buffer once before writing. Integer rendering never exceeds
``INT_MAX_WIDTH`` bytes, which lets the integer append reserve a fixed
worst-case width up front.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .exceptions import ValidationError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

# Widest decimal rendering of a 64-bit value: "-9223372036854775808" and
# "18446744073709551615" are both 20 bytes.
INT_MAX_WIDTH = 20

# "%f" precision when none is given
DEFAULT_FLOAT_DECIMALS = 6

_ZERO = ord("0")


def digit(value: int) -> int:
    """ASCII code of a single decimal digit."""
    return _ZERO + value


def render_int(value: int) -> bytes:
    """Render an integer in base 10 without a formatting call."""
    if value == 0:
        return b"0"

    negative = value < 0
    magnitude = -value if negative else value
    out = bytearray()
    while magnitude:
        magnitude, rem = divmod(magnitude, 10)
        out.append(_ZERO + rem)
    if negative:
        out.append(ord("-"))
    out.reverse()
    return bytes(out)


def render_fixed(value: float, decimals: int) -> bytes:
    """Render ``value`` in fixed-point notation with ``decimals`` digits.

    A negative ``decimals`` means "no precision given" and uses the
    ``%f`` default of 6. Infinities and NaN render as ``inf``, ``-inf`` and
    ``nan``.

    Raises:
        OverflowError: If ``value`` is an int too large for a double.
        ValueError: If ``decimals`` is too large to render.
    """
    if decimals < 0:
        decimals = DEFAULT_FLOAT_DECIMALS
    return format(float(value), f".{decimals}f").encode("ascii")


def render_formatted(template: str | bytes, args: tuple[Any, ...]) -> bytes:
    """Apply printf-style interpolation.

    A single mapping argument enables ``%(name)s`` lookups, as with the
    ``%`` operator. ``str`` templates are encoded as UTF-8.

    Raises:
        ValidationError: If the template is malformed or does not match
            the arguments.
    """
    values: Any = args[0] if len(args) == 1 and isinstance(args[0], Mapping) else args
    try:
        if isinstance(template, str):
            return (template % values).encode("utf-8")
        if isinstance(template, (bytes, bytearray)):
            return bytes(template) % values
    except (TypeError, ValueError, KeyError) as e:
        raise ValidationError(
            f"Cannot render template {template!r}: {e}",
            details={"template": template, "arguments": len(args)},
        ) from e
    raise ValidationError(
        f"Template must be str or bytes, got {type(template).__name__}",
        details={"template_type": type(template).__name__},
    )
