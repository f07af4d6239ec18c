from dataclasses import replace
from decimal import Decimal

from src.engine.bulk_deal import analyze_deal, ocf_yield, payback_years
from src.models.deal import (
    ConstructionType,
    FundingSource,
    RepaymentStructure,
    WaterfallTier,
)


class TestCapex:
    def test_larkspur_capex(self, larkspur_deal):
        result = analyze_deal(larkspur_deal)
        assert result.capex_per_unit == Decimal("630")
        assert result.total_capex == Decimal("137970")

    def test_extra_line_items(self, larkspur_deal):
        deal = replace(larkspur_deal, door_fee_per_unit=Decimal("25"), olt_cost_per_unit=Decimal("40"))
        assert analyze_deal(deal).capex_per_unit == Decimal("695")

    def test_brownfield_build_cost(self, larkspur_deal):
        deal = replace(
            larkspur_deal,
            construction_type=ConstructionType.BROWNFIELD,
            build_cost_per_unit=Decimal("750"),
        )
        result = analyze_deal(deal)
        assert result.capex_per_unit == Decimal("1030")
        assert result.total_capex > Decimal("137970")


class TestCapitalProviderFunding:
    def test_monthly_breakdown(self, larkspur_deal):
        result = analyze_deal(larkspur_deal)
        assert result.gross_revenue_per_month == Decimal("7008.00")
        assert result.provider_payment_initial == Decimal("3285")
        assert result.support_opex_per_month == Decimal("547.5")
        assert result.total_opex_per_month == Decimal("2047.5")

    def test_average_fee_reduced_by_waterfall(self, larkspur_deal):
        """7 years at 100% then 3 years at 50% = 335,070 over 120 months."""
        result = analyze_deal(larkspur_deal)
        assert result.provider_payment_per_month == Decimal("2792.25")
        assert result.provider_payment_per_month < result.provider_payment_initial

    def test_average_net_cash_flow(self, larkspur_deal):
        result = analyze_deal(larkspur_deal)
        first_year_net_per_month = Decimal("7008") - Decimal("3285") - Decimal("2047.5")
        assert result.net_cash_flow_per_year == Decimal("26019.00")
        assert result.net_cash_flow_per_month == Decimal("2168.25")
        assert result.net_cash_flow_per_month > first_year_net_per_month

    def test_payback_and_yield(self, larkspur_deal):
        result = analyze_deal(larkspur_deal)
        assert result.payback_years == Decimal("5.3027")
        assert result.ocf_yield == Decimal("0.1886")

    def test_milestones(self, larkspur_deal):
        result = analyze_deal(larkspur_deal)
        assert result.month_for(Decimal("2.0")) == 84
        assert result.month_for(Decimal("2.5")) is None
        assert result.month_for(Decimal("3.0")) is None
        assert result.milestones[0].threshold_amount == Decimal("275940.0")

    def test_milestones_ordered_over_long_term(self, larkspur_deal):
        result = analyze_deal(replace(larkspur_deal, term_years=20))
        months = [m.month for m in result.milestones]
        assert None not in months
        assert months[0] <= months[1] <= months[2]

    def test_irr_perspectives(self, larkspur_deal):
        result = analyze_deal(larkspur_deal)
        assert Decimal("0.20") < result.provider_irr < Decimal("0.27")
        assert Decimal("0.10") < result.operator_irr < Decimal("0.15")
        assert result.operator_irr < result.provider_irr
        assert result.unlevered_irr > result.provider_irr

    def test_both_series_carry_capex(self, larkspur_deal):
        result = analyze_deal(larkspur_deal)
        assert result.provider_cash_flows[0] == Decimal("-137970")
        assert result.operator_cash_flows[0] == Decimal("-137970")
        assert len(result.provider_cash_flows) == 11

    def test_equity_multiple(self, larkspur_deal):
        result = analyze_deal(larkspur_deal)
        assert result.equity_multiple == Decimal("2.4286")

    def test_yearly_breakdown(self, larkspur_deal):
        result = analyze_deal(larkspur_deal)
        assert len(result.yearly_cash_flows) == 10
        y1 = result.yearly_cash_flows[0]
        assert y1.revenue == Decimal("84096.00")
        assert y1.provider_payment == Decimal("39420.00")
        assert y1.operator_cash_flow == Decimal("20106.00")
        for y in result.yearly_cash_flows:
            assert y.owner_cash_flow == y.operator_cash_flow + y.provider_payment

    def test_idempotent(self, larkspur_deal):
        assert analyze_deal(larkspur_deal) == analyze_deal(larkspur_deal)


class TestOwnerFunding:
    def test_rate_discount(self, larkspur_deal):
        deal = replace(
            larkspur_deal,
            funding_source=FundingSource.OWNER,
            owner_loan_interest_rate=Decimal("0"),
        )
        result = analyze_deal(deal)
        assert result.owner_loan_payment == Decimal("1149.75")
        assert result.rate_discount_per_unit == Decimal("5.2500")
        assert result.adjusted_bulk_rate_per_unit == Decimal("26.7500")
        assert result.gross_revenue_per_month == Decimal("5858.25")

    def test_no_provider_fee(self, larkspur_deal):
        result = analyze_deal(replace(larkspur_deal, funding_source=FundingSource.OWNER))
        assert result.provider_payment_initial == 0
        assert result.provider_payment_per_month == 0
        assert result.provider_irr is None
        assert all(m.month is None for m in result.milestones)
        assert all(m.threshold_amount == 0 for m in result.milestones)

    def test_rate_floored_at_zero(self, larkspur_deal):
        deal = replace(
            larkspur_deal,
            funding_source=FundingSource.OWNER,
            bulk_rate_per_unit=Decimal("1"),
        )
        result = analyze_deal(deal)
        assert result.adjusted_bulk_rate_per_unit == 0
        assert result.gross_revenue_per_month == 0

    def test_interest_increases_discount(self, larkspur_deal):
        zero = analyze_deal(replace(
            larkspur_deal, funding_source=FundingSource.OWNER, owner_loan_interest_rate=Decimal("0")
        ))
        five = analyze_deal(replace(
            larkspur_deal, funding_source=FundingSource.OWNER, owner_loan_interest_rate=Decimal("0.05")
        ))
        assert five.rate_discount_per_unit > zero.rate_discount_per_unit


class TestInternalFunding:
    def test_no_fee_no_discount(self, larkspur_deal):
        result = analyze_deal(replace(larkspur_deal, funding_source=FundingSource.INTERNAL))
        assert result.provider_payment_initial == 0
        assert result.rate_discount_per_unit == 0
        assert result.gross_revenue_per_month == Decimal("7008.00")
        assert result.provider_irr is None
        assert result.operator_irr == result.unlevered_irr


class TestLeaseUp:
    def test_greenfield_ramp_lowers_year_one(self, larkspur_deal):
        base = analyze_deal(larkspur_deal)
        ramped = analyze_deal(replace(larkspur_deal, lease_up_months=12))
        assert ramped.yearly_cash_flows[0].revenue < base.yearly_cash_flows[0].revenue
        assert ramped.yearly_cash_flows[1].revenue == base.yearly_cash_flows[1].revenue

    def test_ramp_slows_waterfall(self, larkspur_deal):
        base = analyze_deal(larkspur_deal)
        ramped = analyze_deal(replace(larkspur_deal, lease_up_months=12))
        assert ramped.month_for(Decimal("2.0")) > base.month_for(Decimal("2.0"))

    def test_brownfield_ignores_lease_up(self, larkspur_deal):
        brownfield = replace(larkspur_deal, construction_type=ConstructionType.BROWNFIELD)
        assert analyze_deal(replace(brownfield, lease_up_months=12)) == analyze_deal(brownfield)


class TestRepaymentStructure:
    def test_flat_matches_tiered_when_thresholds_unreachable(self, larkspur_deal):
        unreachable = tuple(
            WaterfallTier(moic_multiple=Decimal(m), payment_rate=Decimal("0"))
            for m in ("100", "200", "300")
        )
        tiered = analyze_deal(replace(larkspur_deal, waterfall_tiers=unreachable))
        flat = analyze_deal(replace(larkspur_deal, repayment_structure=RepaymentStructure.FLAT))
        assert flat.provider_cash_flows == tiered.provider_cash_flows
        assert flat.operator_cash_flows == tiered.operator_cash_flows
        assert flat.provider_irr == tiered.provider_irr
        assert flat.operator_irr == tiered.operator_irr
        assert flat.payback_years == tiered.payback_years

    def test_flat_fee_not_reduced(self, larkspur_deal):
        result = analyze_deal(replace(larkspur_deal, repayment_structure=RepaymentStructure.FLAT))
        assert result.provider_payment_per_month == Decimal("3285.00")

    def test_waterfall_improves_operator_irr(self, larkspur_deal):
        flat = analyze_deal(replace(larkspur_deal, repayment_structure=RepaymentStructure.FLAT))
        tiered = analyze_deal(larkspur_deal)
        assert tiered.operator_irr > flat.operator_irr


class TestDegenerateInputs:
    def test_unprofitable_deal(self, larkspur_deal):
        deal = replace(
            larkspur_deal,
            bulk_rate_per_unit=Decimal("1"),
            provider_fee_per_unit_per_month=Decimal("10"),
        )
        result = analyze_deal(deal)
        assert result.net_cash_flow_per_month < 0
        assert result.payback_years == Decimal("Infinity")
        assert result.operator_irr is None

    def test_zero_units(self, larkspur_deal):
        result = analyze_deal(replace(larkspur_deal, units=0))
        assert result.total_capex == 0
        assert result.ocf_yield == 0
        assert result.payback_years == Decimal("Infinity")

    def test_very_long_term(self, larkspur_deal):
        """300 years of annual flows stays inside float range."""
        base = analyze_deal(larkspur_deal)
        result = analyze_deal(replace(larkspur_deal, term_years=300))
        assert len(result.yearly_cash_flows) == 300
        assert result.provider_irr > base.provider_irr
        assert result.operator_irr > base.operator_irr
        assert result.unlevered_irr is not None

    def test_zero_term(self, larkspur_deal):
        result = analyze_deal(replace(larkspur_deal, term_years=0))
        assert result.yearly_cash_flows == []
        assert result.net_cash_flow_per_year == 0
        assert result.provider_payment_per_month == 0
        assert result.provider_irr is None
        assert result.operator_irr is None


class TestPaybackAndYield:
    def test_payback_infinite_when_not_positive(self):
        assert payback_years(Decimal("1000"), Decimal("0")) == Decimal("Infinity")
        assert payback_years(Decimal("1000"), Decimal("-5")) == Decimal("Infinity")

    def test_yield_zero_capex(self):
        assert ocf_yield(Decimal("500"), Decimal("0")) == 0
