"""Decimal rounding helpers shared by the fee and risk calculators"""

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)"""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def clamp(value: int, lower: int = 0, upper: int = 100) -> int:
    """Bound an integer score to [lower, upper]"""
    return min(upper, max(lower, value))
