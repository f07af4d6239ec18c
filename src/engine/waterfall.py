"""Month-by-month capital provider waterfall with greenfield lease-up.

The provider's base monthly fee steps down as cumulative receipts cross
MOIC thresholds. The tier for a month is chosen from receipts as of the
start of that month, so a crossing only affects the following month.

Pure functions. No I/O.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from src.models.deal import DEFAULT_WATERFALL_TIERS, RepaymentStructure, WaterfallTier
from src.models.results import WaterfallMilestone

MONTHS_PER_YEAR = 12


@dataclass
class WaterfallRun:
    yearly_revenue: list[Decimal] = field(default_factory=list)
    yearly_payments: list[Decimal] = field(default_factory=list)
    milestones: list[WaterfallMilestone] = field(default_factory=list)

    @property
    def total_payments(self) -> Decimal:
        return sum(self.yearly_payments, Decimal("0"))


def lease_up_multiplier(month: int, lease_up_months: int) -> Decimal:
    """Straight-line revenue ramp: month / lease_up_months until fully leased."""
    if lease_up_months > 0 and month <= lease_up_months:
        return Decimal(month) / Decimal(lease_up_months)
    return Decimal("1")


def payment_rate(
    cumulative: Decimal,
    investment: Decimal,
    tiers: tuple[WaterfallTier, ...] = DEFAULT_WATERFALL_TIERS,
) -> Decimal:
    """Share of the base fee owed given receipts to date."""
    for tier in sorted(tiers, key=lambda t: t.moic_multiple, reverse=True):
        if cumulative >= investment * tier.moic_multiple:
            return tier.payment_rate
    return Decimal("1")


def simulate_waterfall(
    monthly_revenue: Decimal,
    base_payment: Decimal,
    investment: Decimal,
    term_years: int,
    lease_up_months: int = 0,
    tiers: tuple[WaterfallTier, ...] = DEFAULT_WATERFALL_TIERS,
    structure: RepaymentStructure = RepaymentStructure.TIERED,
    track_milestones: bool = True,
) -> WaterfallRun:
    """Step through the term one month at a time.

    Args:
        monthly_revenue: Full-occupancy revenue per month
        base_payment: Provider fee per month before any waterfall reduction
        investment: Capital the MOIC thresholds are multiples of
        term_years: Deal term; the walk covers term_years * 12 months
        lease_up_months: Ramp length (0 = fully leased from month 1)
        tiers: MOIC multiple / payment rate steps
        structure: FLAT skips both the tier lookup and the lease-up ramp
        track_milestones: Record the month each threshold is first reached
    """
    tiered = structure == RepaymentStructure.TIERED
    ordered_tiers = sorted(tiers, key=lambda t: t.moic_multiple)
    milestones = [
        WaterfallMilestone(moic_multiple=t.moic_multiple, threshold_amount=investment * t.moic_multiple)
        for t in ordered_tiers
    ]

    run = WaterfallRun()
    cumulative = Decimal("0")
    month = 0

    for _ in range(1, term_years + 1):
        revenue_this_year = Decimal("0")
        payments_this_year = Decimal("0")

        for _ in range(MONTHS_PER_YEAR):
            month += 1

            ramp = lease_up_multiplier(month, lease_up_months) if tiered else Decimal("1")
            rate = payment_rate(cumulative, investment, tiers) if tiered else Decimal("1")

            revenue_this_year += monthly_revenue * ramp
            payment = base_payment * rate * ramp
            payments_this_year += payment
            cumulative += payment

            if track_milestones:
                for m in milestones:
                    if m.month is None and cumulative >= m.threshold_amount:
                        m.month = month

        run.yearly_revenue.append(revenue_this_year)
        run.yearly_payments.append(payments_this_year)

    run.milestones = milestones
    return run
