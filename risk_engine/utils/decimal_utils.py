"""Decimal arithmetic helpers with explicit half-up rounding"""

from decimal import Decimal, ROUND_HALF_UP


def quantize_half_up(value: Decimal, places: int) -> Decimal:
    """Round to a fixed number of decimal places, ties away from zero"""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def divide(numerator: Decimal, denominator: Decimal, places: int = 4) -> Decimal:
    """Divide and round the quotient half-up to `places` decimal places"""
    return quantize_half_up(numerator / denominator, places)


def percentage(count: int, total: int) -> float:
    """count/total as a percentage with 2 decimal places, 0.0 when total is 0"""
    if total <= 0:
        return 0.0
    return float(quantize_half_up(Decimal(count) * 100 / Decimal(total), 2))
