"""Level-payment loan math for owner-funded deals.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")


def monthly_payment(principal: Decimal, annual_rate: Decimal, term_years: int) -> Decimal:
    """Calculate fixed monthly payment on a fully amortizing loan."""
    if principal <= 0 or term_years <= 0:
        return Decimal("0")
    if annual_rate <= 0:
        return (principal / (term_years * 12)).quantize(TWO_PLACES, ROUND_HALF_UP)

    r = annual_rate / 12
    n = term_years * 12
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** n
    payment = principal * (r * factor) / (factor - 1)
    return payment.quantize(TWO_PLACES, ROUND_HALF_UP)


def rate_discount_per_unit(loan_payment: Decimal, units: int) -> Decimal:
    """Monthly per-unit rate reduction that passes the loan payment to the owner."""
    if units <= 0:
        return Decimal("0")
    return loan_payment / units
