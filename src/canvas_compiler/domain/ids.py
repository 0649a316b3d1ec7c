"""Canonical normalization of node and edge identifiers."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Final

# Decimal-point positions printed without an exponent (1e-6 <= |x| < 1e21).
_MIN_FIXED_POINT: Final[int] = -5
_MAX_FIXED_POINT: Final[int] = 21


def normalize_id(value: object) -> str:
    """Return the canonical string form of a raw identifier.

    Strings are trimmed. Booleans become ``true``/``false``. Integers keep
    their exact digits; floats use the shortest round-trip digits spelled the
    way JSON producers print numbers (``1.5``, ``7``, ``1e+21``, ``1e-7``).
    Anything else normalizes to the empty string and therefore fails
    validation.
    """

    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    return ""


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(digit) for digit in digit_tuple)
    count = len(digits)
    point = int(exponent) + count

    if count <= point <= _MAX_FIXED_POINT:
        return sign + digits + "0" * (point - count)
    if 0 < point <= _MAX_FIXED_POINT:
        return f"{sign}{digits[:point]}.{digits[point:]}"
    if _MIN_FIXED_POINT <= point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"

    mantissa = digits[0] if count == 1 else f"{digits[0]}.{digits[1:]}"
    power = point - 1
    return f"{sign}{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"


__all__ = ["normalize_id"]
