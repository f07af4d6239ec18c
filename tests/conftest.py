"""Canonical test fixtures used across all engine tests.

Fixture: Larkspur - Juniper, 219-unit greenfield MDU, $32/unit bulk rate,
$630/unit capex, capital provider funded at $15/unit/month for 10 years.
Fiber baseline: $1,000/passing, 35% steady-state penetration, $60 ARPU.
"""

import pytest
from decimal import Decimal

from src.models.deal import BulkDealInputs, ConstructionType, FundingSource
from src.models.fiber import FiberBuildInputs


@pytest.fixture
def larkspur_deal() -> BulkDealInputs:
    """219-unit capital-provider-funded deal with the default waterfall."""
    return BulkDealInputs(
        property_name="Larkspur - Juniper",
        units=219,
        construction_type=ConstructionType.GREENFIELD,
        term_years=10,
        bulk_rate_per_unit=Decimal("32"),
        build_cost_per_unit=Decimal("350"),
        cpe_cost_per_unit=Decimal("230"),
        install_cost_per_unit=Decimal("50"),
        door_fee_per_unit=Decimal("0"),
        olt_cost_per_unit=Decimal("0"),
        support_opex_per_unit_per_month=Decimal("2.5"),
        transport_opex_per_month=Decimal("1500"),
        funding_source=FundingSource.CAPITAL_PROVIDER,
        provider_fee_per_unit_per_month=Decimal("15"),
        owner_loan_interest_rate=Decimal("0.05"),
        discount_rate=Decimal("0.10"),
        lease_up_months=0,
    )


@pytest.fixture
def baseline_fiber() -> FiberBuildInputs:
    """Per-passing FTTH build with a 40% / 70% penetration ramp."""
    return FiberBuildInputs(
        cost_per_passing=Decimal("1000"),
        steady_state_penetration=Decimal("0.35"),
        arpu=Decimal("60"),
        gross_margin=Decimal("0.8"),
        drop_cost_per_sub=Decimal("500"),
        churn_rate=Decimal("0.03"),
        reinstall_cost_per_churn=Decimal("300"),
        exit_multiple=Decimal("12"),
        horizon_years=7,
        ramp_year1_factor=Decimal("0.4"),
        ramp_year2_factor=Decimal("0.7"),
    )
