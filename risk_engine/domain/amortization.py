"""Level monthly payment for an amortizing loan"""

from decimal import Decimal, localcontext
from typing import Optional

from risk_engine.utils.decimal_utils import divide, quantize_half_up

# Matches IEEE 754 decimal128, enough headroom for (1 + r)^n over long terms
_PRECISION = 34


def calculate_monthly_payment(
    annual_rate: Optional[Decimal],
    principal: Optional[Decimal],
    term_months: Optional[int],
) -> Decimal:
    """
    Standard amortization: M = P * r * (1 + r)^n / ((1 + r)^n - 1)

    Args:
        annual_rate: Annual interest rate as a percentage (4.50 means 4.5%)
        principal: Amount borrowed
        term_months: Number of monthly payments

    Returns:
        Payment rounded half-up to cents; 0.00 when any input is missing
        or principal/term is not positive.

    Example:
        250000 at 4.50% over 360 months -> 1266.71
    """
    zero = Decimal("0.00")
    if annual_rate is None or principal is None or term_months is None:
        return zero
    if principal <= 0 or term_months <= 0:
        return zero

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        monthly_rate = annual_rate / Decimal(100) / Decimal(12)

        if monthly_rate == 0:
            return divide(principal, Decimal(term_months), 2)

        growth = (1 + monthly_rate) ** term_months
        payment = principal * monthly_rate * growth / (growth - 1)
        return quantize_half_up(payment, 2)
