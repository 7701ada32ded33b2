"""Numeric policy shared by extraction, scaling and aggregation.

Ties round half away from zero on the shortest decimal representation of a
float, so ``1.25`` becomes ``1.3`` and ``-1.25`` becomes ``-1.3``.
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal

from nutrilog.domain.nutrition import GRAM_FIELDS, TotalsPrecision

_ONE = Decimal("1")
_TENTH = Decimal("0.1")
_HUNDREDTH = Decimal("0.01")
# Wide enough to hold any finite float to two decimal places.
_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


def to_number(value: object) -> float | None:
    """Return a finite float for numeric-looking input, otherwise None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float | Decimal):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def to_float(value: object) -> float:
    """Coerce a loosely typed value to a float, defaulting to 0."""
    number = to_number(value)
    return 0.0 if number is None else number


def normalize_multiplier(value: object) -> float:
    """Return a usable serving multiplier, substituting 1 for degenerate input."""
    number = to_number(value)
    if number is None or number <= 0:
        return 1.0
    return number


def round_tenth(value: float) -> float:
    """Round to one decimal place."""
    return float(_quantize(value, _TENTH))


def round_whole(value: float) -> int:
    """Round to the nearest integer."""
    return int(_quantize(value, _ONE))


def round_multiplier(value: float) -> float:
    """Round a serving multiplier to two decimal places."""
    return float(_quantize(value, _HUNDREDTH))


def round_nutrients(
    values: dict[str, float], precision: TotalsPrecision = TotalsPrecision.RECORD
) -> dict[str, float]:
    """Apply the calorie and gram rounding rules to a nutrient mapping."""
    rounded: dict[str, float] = {"calories": round_whole(values.get("calories", 0))}
    for field in GRAM_FIELDS:
        value = values.get(field, 0.0)
        if precision is TotalsPrecision.WHOLE:
            rounded[field] = round_whole(value)
        else:
            rounded[field] = round_tenth(value)
    return rounded


def _quantize(value: float, exponent: Decimal) -> Decimal:
    if not math.isfinite(value):
        return Decimal(0)
    return Decimal(repr(float(value))).quantize(exponent, context=_CONTEXT)
