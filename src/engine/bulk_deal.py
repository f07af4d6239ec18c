"""Bulk MDU deal orchestrator: funding, waterfall and IRR into one result.

Pure computation. No I/O. BulkDealInputs in, BulkDealResult out.
"""

from decimal import Decimal, ROUND_HALF_UP

from src.models.deal import BulkDealInputs, FundingSource
from src.models.results import BulkDealResult, YearlyCashFlow

from src.engine.debt import monthly_payment, rate_discount_per_unit
from src.engine.irr import compute_irr, compute_equity_multiple
from src.engine.waterfall import MONTHS_PER_YEAR, simulate_waterfall

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
INFINITE_PAYBACK = Decimal("Infinity")


def payback_years(total_capex: Decimal, annual_net_cash_flow: Decimal) -> Decimal:
    """Years to recover capex at the average annual net cash flow."""
    if annual_net_cash_flow <= 0:
        return INFINITE_PAYBACK
    return (total_capex / annual_net_cash_flow).quantize(FOUR_PLACES, ROUND_HALF_UP)


def ocf_yield(annual_net_cash_flow: Decimal, total_capex: Decimal) -> Decimal:
    """Operating cash flow yield = average annual net cash flow / capex."""
    if total_capex <= 0:
        return Decimal("0")
    return (annual_net_cash_flow / total_capex).quantize(FOUR_PLACES, ROUND_HALF_UP)


def analyze_deal(inputs: BulkDealInputs) -> BulkDealResult:
    """Run the full bulk deal analysis.

    Builds three annual series from one month-by-month walk:
    provider (fee stream), operator (revenue - fee - opex) and
    unlevered (revenue - opex). Period 0 of the operator and unlevered
    series is always -total_capex; the provider series carries it only
    when the provider funds the build.
    """
    total_capex = inputs.total_capex
    provider_funded = inputs.funding_source == FundingSource.CAPITAL_PROVIDER

    # Owner funding: a notional loan on the capex is credited back through the rate
    loan_payment = Decimal("0")
    discount = Decimal("0")
    adjusted_rate = inputs.bulk_rate_per_unit
    if inputs.funding_source == FundingSource.OWNER:
        loan_payment = monthly_payment(total_capex, inputs.owner_loan_interest_rate, inputs.term_years)
        discount = rate_discount_per_unit(loan_payment, inputs.units)
        adjusted_rate = max(Decimal("0"), inputs.bulk_rate_per_unit - discount)

    gross_revenue_per_month = inputs.units * adjusted_rate
    base_payment = inputs.units * inputs.provider_fee_per_unit_per_month if provider_funded else Decimal("0")
    provider_investment = total_capex if provider_funded else Decimal("0")
    annual_opex = inputs.total_opex_per_month * MONTHS_PER_YEAR

    run = simulate_waterfall(
        monthly_revenue=gross_revenue_per_month,
        base_payment=base_payment,
        investment=provider_investment,
        term_years=inputs.term_years,
        lease_up_months=inputs.effective_lease_up_months,
        tiers=inputs.waterfall_tiers,
        structure=inputs.repayment_structure,
        track_milestones=provider_funded,
    )

    provider_cfs: list[Decimal] = [-provider_investment]
    operator_cfs: list[Decimal] = [-total_capex]
    unlevered_cfs: list[Decimal] = [-total_capex]
    yearly: list[YearlyCashFlow] = []

    for year, (revenue, payment) in enumerate(zip(run.yearly_revenue, run.yearly_payments), start=1):
        operator_cf = revenue - payment - annual_opex
        owner_cf = revenue - annual_opex

        provider_cfs.append(payment)
        operator_cfs.append(operator_cf)
        unlevered_cfs.append(owner_cf)

        yearly.append(YearlyCashFlow(
            year=year,
            revenue=revenue.quantize(TWO_PLACES, ROUND_HALF_UP),
            provider_payment=payment.quantize(TWO_PLACES, ROUND_HALF_UP),
            opex=annual_opex.quantize(TWO_PLACES, ROUND_HALF_UP),
            operator_cash_flow=operator_cf.quantize(TWO_PLACES, ROUND_HALF_UP),
            owner_cash_flow=owner_cf.quantize(TWO_PLACES, ROUND_HALF_UP),
        ))

    # Headline figures are term averages since the waterfall varies them by year
    term_months = inputs.term_years * MONTHS_PER_YEAR
    total_payments = run.total_payments
    if inputs.term_years > 0:
        avg_payment_per_month = total_payments / term_months
        avg_net_per_year = sum(operator_cfs[1:], Decimal("0")) / inputs.term_years
    else:
        avg_payment_per_month = Decimal("0")
        avg_net_per_year = Decimal("0")
    avg_net_per_month = avg_net_per_year / MONTHS_PER_YEAR

    return BulkDealResult(
        capex_per_unit=inputs.capex_per_unit,
        total_capex=total_capex,
        adjusted_bulk_rate_per_unit=adjusted_rate.quantize(FOUR_PLACES, ROUND_HALF_UP),
        rate_discount_per_unit=discount.quantize(FOUR_PLACES, ROUND_HALF_UP),
        owner_loan_payment=loan_payment,
        gross_revenue_per_month=gross_revenue_per_month.quantize(TWO_PLACES, ROUND_HALF_UP),
        provider_payment_initial=base_payment,
        provider_payment_per_month=avg_payment_per_month.quantize(TWO_PLACES, ROUND_HALF_UP),
        support_opex_per_month=inputs.support_opex_per_month,
        transport_opex_per_month=inputs.transport_opex_per_month,
        total_opex_per_month=inputs.total_opex_per_month,
        net_cash_flow_per_month=avg_net_per_month.quantize(TWO_PLACES, ROUND_HALF_UP),
        net_cash_flow_per_year=avg_net_per_year.quantize(TWO_PLACES, ROUND_HALF_UP),
        payback_years=payback_years(total_capex, avg_net_per_year),
        ocf_yield=ocf_yield(avg_net_per_year, total_capex),
        provider_irr=compute_irr(provider_cfs),
        operator_irr=compute_irr(operator_cfs),
        unlevered_irr=compute_irr(unlevered_cfs),
        equity_multiple=compute_equity_multiple(total_payments, provider_investment),
        yearly_cash_flows=yearly,
        milestones=run.milestones,
        provider_cash_flows=provider_cfs,
        operator_cash_flows=operator_cfs,
    )
