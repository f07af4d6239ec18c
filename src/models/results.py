from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class YearlyCashFlow:
    year: int
    revenue: Decimal = Decimal("0")
    provider_payment: Decimal = Decimal("0")
    opex: Decimal = Decimal("0")
    operator_cash_flow: Decimal = Decimal("0")  # Revenue - provider payment - opex
    owner_cash_flow: Decimal = Decimal("0")  # Revenue - opex (no provider payment)


@dataclass
class WaterfallMilestone:
    moic_multiple: Decimal
    threshold_amount: Decimal = Decimal("0")
    month: int | None = None  # 1-indexed from revenue start; None if never reached


@dataclass
class BulkDealResult:
    # CapEx
    capex_per_unit: Decimal = Decimal("0")
    total_capex: Decimal = Decimal("0")

    # Pricing
    adjusted_bulk_rate_per_unit: Decimal = Decimal("0")
    rate_discount_per_unit: Decimal = Decimal("0")
    owner_loan_payment: Decimal = Decimal("0")

    # Monthly economics (averaged over the term where the waterfall varies them)
    gross_revenue_per_month: Decimal = Decimal("0")
    provider_payment_initial: Decimal = Decimal("0")
    provider_payment_per_month: Decimal = Decimal("0")
    support_opex_per_month: Decimal = Decimal("0")
    transport_opex_per_month: Decimal = Decimal("0")
    total_opex_per_month: Decimal = Decimal("0")
    net_cash_flow_per_month: Decimal = Decimal("0")
    net_cash_flow_per_year: Decimal = Decimal("0")

    # Returns
    payback_years: Decimal = Decimal("Infinity")
    ocf_yield: Decimal = Decimal("0")
    provider_irr: Decimal | None = None  # Capital provider: -capex, fee stream
    operator_irr: Decimal | None = None  # Operating entity: net of fee
    unlevered_irr: Decimal | None = None  # Operating entity without the fee
    equity_multiple: Decimal = Decimal("0")  # Provider MOIC over the term

    yearly_cash_flows: list[YearlyCashFlow] = field(default_factory=list)
    milestones: list[WaterfallMilestone] = field(default_factory=list)
    provider_cash_flows: list[Decimal] = field(default_factory=list)
    operator_cash_flows: list[Decimal] = field(default_factory=list)

    def month_for(self, moic_multiple: Decimal) -> int | None:
        """Month a given MOIC multiple was first reached, if any."""
        for m in self.milestones:
            if m.moic_multiple == moic_multiple:
                return m.month
        return None
