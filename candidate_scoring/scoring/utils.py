"""
Decimal Utilities
candidate_scoring/scoring/utils.py

Precision-safe decimal math shared by the calculators. All rounding is
ROUND_HALF_UP so results never depend on float representation.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[int, float, str, Decimal]

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Number, places: Optional[int] = None) -> Decimal:
    """Convert a number to Decimal via its string form, optionally quantized."""
    d = value if isinstance(value, Decimal) else Decimal(str(value))
    if places is None:
        return d
    return d.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


def clamp(
    value: Decimal,
    min_val: Decimal = ZERO,
    max_val: Decimal = HUNDRED,
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def round_score(value: Number) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_composite(value: Number) -> Decimal:
    """Round a composite to one decimal place."""
    return to_decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def duration_years(start_year: Optional[int], end_year: Optional[int], as_of_year: int) -> int:
    """
    Whole years between start and end (or as_of_year for open roles).

    Unknown start, or an end before the start, counts as zero.
    """
    if start_year is None:
        return 0
    end = end_year if end_year is not None else as_of_year
    return max(0, end - start_year)
