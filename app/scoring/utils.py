"""
Decimal Utilities
app/scoring/utils.py

Provides precision-safe decimal math for scoring calculations.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any


def to_decimal(value: Any) -> Decimal:
    """Convert a number to Decimal via its shortest string form."""
    return Decimal(str(float(value)))


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("1"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def round_score(value: Decimal, places: int = 2) -> float:
    """Round half-up to ``places`` decimals and return a float."""
    return float(value.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP))
