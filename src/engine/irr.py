"""IRR computation: Newton-Raphson with a scipy bisection fallback.

Pure functions. No I/O.
"""

import logging
import math
from collections.abc import Sequence
from decimal import Decimal, ROUND_HALF_UP

from scipy.optimize import bisect

logger = logging.getLogger(__name__)

FOUR_PLACES = Decimal("0.0001")

MAX_ITERATIONS = 100
TOLERANCE = 1e-6
MIN_DERIVATIVE = 1e-10

# Search domain: -99% to 1000%
RATE_FLOOR = -0.99
RATE_CEILING = 10.0


def _discount_factor(rate: float, t: int) -> float:
    """(1 + rate) ** -t, saturating to infinity instead of raising on overflow."""
    try:
        return (1 + rate) ** -t
    except OverflowError:
        return math.inf


def npv(cash_flows: Sequence[float], rate: float) -> float:
    """Net present value of period-indexed cash flows (period 0 undiscounted).

    Long series at extreme rates may come back as +/-inf or nan.
    """
    return sum(cf * _discount_factor(rate, t) for t, cf in enumerate(cash_flows) if cf)


def npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    """d(NPV)/d(rate)."""
    return sum(-t * cf * _discount_factor(rate, t + 1) for t, cf in enumerate(cash_flows) if t and cf)


def _same_sign(a: float, b: float) -> bool:
    return (a > 0 and b > 0) or (a < 0 and b < 0)


def newton_irr(cash_flows: Sequence[float], guess: float = 0.1) -> float | None:
    """Newton-Raphson search for the IRR.

    Returns None when the method gives up (flat tangent, divergence,
    or no convergence within MAX_ITERATIONS); callers fall back to bisection.
    """
    cf = [float(c) for c in cash_flows]
    rate = guess
    try:
        for _ in range(MAX_ITERATIONS):
            value = npv(cf, rate)
            derivative = npv_derivative(cf, rate)
            if not (math.isfinite(value) and math.isfinite(derivative)):
                return None
            if abs(derivative) < MIN_DERIVATIVE:
                return None

            new_rate = rate - value / derivative
            if abs(new_rate - rate) < TOLERANCE:
                return new_rate

            # Divergence guard; rates at or below -100% are undefined
            if not math.isfinite(new_rate) or abs(new_rate) > RATE_CEILING or new_rate <= -1:
                return None
            rate = new_rate
    except ArithmeticError as e:
        logger.debug("Newton IRR step failed at rate %s: %s", rate, e)
        return None
    return None


def bisection_irr(cash_flows: Sequence[float]) -> float | None:
    """Bisection over [RATE_FLOOR, RATE_CEILING]. None if no bracketed root."""
    cf = [float(c) for c in cash_flows]

    def f(rate: float) -> float:
        return npv(cf, rate)

    try:
        npv_low = f(RATE_FLOOR)
        npv_high = f(RATE_CEILING)
        if math.isnan(npv_low) or math.isnan(npv_high):
            return None
        if _same_sign(npv_low, npv_high):
            return None
        # Root would sit below the floor
        if npv_low > 0:
            return None
        return bisect(f, RATE_FLOOR, RATE_CEILING, xtol=TOLERANCE, maxiter=MAX_ITERATIONS)
    except (ValueError, RuntimeError, ArithmeticError) as e:
        logger.debug("Bisection IRR found no root: %s", e)
        return None


def solve_irr(cash_flows: Sequence[float]) -> float | None:
    """Discount rate at which NPV of the series is zero.

    cash_flows[0] is the upfront outlay (usually negative), followed by
    periodic net receipts. Returns None when no breakeven rate exists
    in (-100%, 1000%].
    """
    if not cash_flows or len(cash_flows) < 2:
        return None

    cf = [float(c) for c in cash_flows]

    # No sign change, no breakeven (also covers the all-zero series)
    if all(c >= 0 for c in cf) or all(c <= 0 for c in cf):
        return None

    try:
        npv_at_zero = npv(cf, 0.0)
        npv_at_ceiling = npv(cf, RATE_CEILING)
    except ArithmeticError as e:
        logger.debug("IRR feasibility check failed: %s", e)
        return None
    if _same_sign(npv_at_zero, npv_at_ceiling):
        return None

    guess = -0.5 if npv_at_zero < 0 else 0.1
    rate = newton_irr(cf, guess)
    if rate is not None:
        return rate

    logger.debug("Newton IRR did not converge, falling back to bisection")
    return bisection_irr(cf)


def compute_irr(cash_flows: list[Decimal]) -> Decimal | None:
    """Compute IRR from a vector of annual cash flows, rounded to 4 places.

    cash_flows[0] should be negative (initial investment).
    """
    irr = solve_irr(cash_flows)
    if irr is None:
        return None
    return Decimal(str(irr)).quantize(FOUR_PLACES, ROUND_HALF_UP)


def compute_equity_multiple(
    total_cash_returned: Decimal, total_cash_invested: Decimal
) -> Decimal:
    """Equity multiple (MOIC) = total cash out / total cash in."""
    if total_cash_invested == 0:
        return Decimal("0")
    return (total_cash_returned / total_cash_invested).quantize(FOUR_PLACES, ROUND_HALF_UP)
