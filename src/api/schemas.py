"""Pydantic schemas for API request/response models."""

from decimal import Decimal

from pydantic import BaseModel, Field


# ---- Request schemas ----

class WaterfallTierRequest(BaseModel):
    moic_multiple: Decimal
    payment_rate: Decimal


class BulkDealRequest(BaseModel):
    property_name: str = ""
    units: int = Field(..., description="Number of units in the property")
    construction_type: str = Field("greenfield", description="greenfield or brownfield")
    term_years: int | None = None

    bulk_rate_per_unit: Decimal
    build_cost_per_unit: Decimal | None = Field(None, description="Defaults by construction type")
    cpe_cost_per_unit: Decimal = Decimal("230")
    install_cost_per_unit: Decimal = Decimal("50")
    door_fee_per_unit: Decimal = Decimal("0")
    olt_cost_per_unit: Decimal = Decimal("0")

    support_opex_per_unit_per_month: Decimal = Decimal("2.5")
    transport_opex_per_month: Decimal = Decimal("1500")

    funding_source: str = Field("capital_provider", description="capital_provider, owner or internal")
    provider_fee_per_unit_per_month: Decimal = Decimal("15")
    owner_loan_interest_rate: Decimal = Decimal("0.05")
    discount_rate: Decimal = Decimal("0.10")

    lease_up_months: int = 0
    repayment_structure: str = Field("tiered", description="tiered or flat")
    waterfall_tiers: list[WaterfallTierRequest] | None = None


class IrrRequest(BaseModel):
    cash_flows: list[Decimal] = Field(..., description="Period 0 outlay followed by periodic receipts")


class FiberIrrRequest(BaseModel):
    cost_per_passing: Decimal
    steady_state_penetration: Decimal
    arpu: Decimal = Decimal("60")
    gross_margin: Decimal = Decimal("0.8")
    churn_rate: Decimal = Decimal("0.03")
    exit_multiple: Decimal = Decimal("12")
    horizon_years: int = 7
    ramp_year1_factor: Decimal = Decimal("0.4")
    ramp_year2_factor: Decimal = Decimal("0.7")

    # Drop / reinstall cost components
    new_drop_construction: Decimal = Decimal("200")
    new_install_labor: Decimal = Decimal("100")
    new_cpe_cost: Decimal = Decimal("200")
    churn_install_labor: Decimal = Decimal("100")
    churn_cpe_cost: Decimal = Decimal("200")


class SensitivityGridRequest(FiberIrrRequest):
    cost_per_passing: Decimal = Decimal("1000")
    steady_state_penetration: Decimal = Decimal("0.35")
    costs: list[Decimal] | None = None
    penetrations: list[Decimal] | None = None
    minimum_irr: Decimal | None = None
    borderline_spread: Decimal | None = None


# ---- Response schemas ----

class YearlyCashFlowResponse(BaseModel):
    year: int
    revenue: Decimal
    provider_payment: Decimal
    opex: Decimal
    operator_cash_flow: Decimal
    owner_cash_flow: Decimal


class WaterfallMilestoneResponse(BaseModel):
    moic_multiple: Decimal
    threshold_amount: Decimal
    month: int | None = None


class BulkDealResponse(BaseModel):
    property_name: str
    capex_per_unit: Decimal
    total_capex: Decimal
    adjusted_bulk_rate_per_unit: Decimal
    rate_discount_per_unit: Decimal
    owner_loan_payment: Decimal
    gross_revenue_per_month: Decimal
    provider_payment_initial: Decimal
    provider_payment_per_month: Decimal
    support_opex_per_month: Decimal
    transport_opex_per_month: Decimal
    total_opex_per_month: Decimal
    net_cash_flow_per_month: Decimal
    net_cash_flow_per_year: Decimal
    payback_years: Decimal | None = Field(None, description="null when the deal never pays back")
    ocf_yield: Decimal
    provider_irr: Decimal | None = None
    operator_irr: Decimal | None = None
    unlevered_irr: Decimal | None = None
    equity_multiple: Decimal
    yearly_cash_flows: list[YearlyCashFlowResponse]
    milestones: list[WaterfallMilestoneResponse]


class IrrResponse(BaseModel):
    irr: Decimal | None = None


class FiberIrrResponse(BaseModel):
    irr: Decimal | None = None
    cash_flows: list[Decimal]
    drop_cost_per_sub: Decimal
    reinstall_cost_per_churn: Decimal


class GridCellResponse(BaseModel):
    cost_per_passing: Decimal
    penetration: Decimal
    irr: Decimal | None = None
    band: str


class SensitivityGridResponse(BaseModel):
    costs: list[Decimal]
    penetrations: list[Decimal]
    minimum_irr: Decimal
    borderline_spread: Decimal
    rows: list[list[GridCellResponse]]
    band_counts: dict[str, int]
