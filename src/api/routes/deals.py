"""Bulk deal routes. Primary API entry point."""

import logging

from fastapi import APIRouter, HTTPException

from src.api.schemas import (
    BulkDealRequest,
    BulkDealResponse,
    IrrRequest,
    IrrResponse,
    WaterfallMilestoneResponse,
    YearlyCashFlowResponse,
)
from src.config import settings
from src.engine.bulk_deal import analyze_deal
from src.engine.irr import compute_irr
from src.models.deal import (
    DEFAULT_BUILD_COST,
    DEFAULT_WATERFALL_TIERS,
    BulkDealInputs,
    ConstructionType,
    FundingSource,
    RepaymentStructure,
    WaterfallTier,
)
from src.models.results import BulkDealResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["deals"])


def _build_inputs(req: BulkDealRequest) -> BulkDealInputs:
    """Build engine inputs from request data. Raises ValueError on unknown enum values."""
    tiers = DEFAULT_WATERFALL_TIERS
    if req.waterfall_tiers:
        tiers = tuple(
            WaterfallTier(moic_multiple=t.moic_multiple, payment_rate=t.payment_rate)
            for t in req.waterfall_tiers
        )

    construction_type = ConstructionType(req.construction_type)
    build_cost = req.build_cost_per_unit
    if build_cost is None:
        build_cost = DEFAULT_BUILD_COST[construction_type]

    return BulkDealInputs(
        property_name=req.property_name,
        units=req.units,
        construction_type=construction_type,
        term_years=req.term_years if req.term_years is not None else settings.default_term_years,
        bulk_rate_per_unit=req.bulk_rate_per_unit,
        build_cost_per_unit=build_cost,
        cpe_cost_per_unit=req.cpe_cost_per_unit,
        install_cost_per_unit=req.install_cost_per_unit,
        door_fee_per_unit=req.door_fee_per_unit,
        olt_cost_per_unit=req.olt_cost_per_unit,
        support_opex_per_unit_per_month=req.support_opex_per_unit_per_month,
        transport_opex_per_month=req.transport_opex_per_month,
        funding_source=FundingSource(req.funding_source),
        provider_fee_per_unit_per_month=req.provider_fee_per_unit_per_month,
        owner_loan_interest_rate=req.owner_loan_interest_rate,
        discount_rate=req.discount_rate,
        lease_up_months=req.lease_up_months,
        repayment_structure=RepaymentStructure(req.repayment_structure),
        waterfall_tiers=tiers,
    )


def _result_to_response(result: BulkDealResult, property_name: str) -> BulkDealResponse:
    """Convert engine BulkDealResult to API response."""
    yearly = [
        YearlyCashFlowResponse(
            year=y.year,
            revenue=y.revenue,
            provider_payment=y.provider_payment,
            opex=y.opex,
            operator_cash_flow=y.operator_cash_flow,
            owner_cash_flow=y.owner_cash_flow,
        )
        for y in result.yearly_cash_flows
    ]
    milestones = [
        WaterfallMilestoneResponse(
            moic_multiple=m.moic_multiple,
            threshold_amount=m.threshold_amount,
            month=m.month,
        )
        for m in result.milestones
    ]

    return BulkDealResponse(
        property_name=property_name,
        capex_per_unit=result.capex_per_unit,
        total_capex=result.total_capex,
        adjusted_bulk_rate_per_unit=result.adjusted_bulk_rate_per_unit,
        rate_discount_per_unit=result.rate_discount_per_unit,
        owner_loan_payment=result.owner_loan_payment,
        gross_revenue_per_month=result.gross_revenue_per_month,
        provider_payment_initial=result.provider_payment_initial,
        provider_payment_per_month=result.provider_payment_per_month,
        support_opex_per_month=result.support_opex_per_month,
        transport_opex_per_month=result.transport_opex_per_month,
        total_opex_per_month=result.total_opex_per_month,
        net_cash_flow_per_month=result.net_cash_flow_per_month,
        net_cash_flow_per_year=result.net_cash_flow_per_year,
        # JSON has no infinity; a deal that never pays back reports null
        payback_years=result.payback_years if result.payback_years.is_finite() else None,
        ocf_yield=result.ocf_yield,
        provider_irr=result.provider_irr,
        operator_irr=result.operator_irr,
        unlevered_irr=result.unlevered_irr,
        equity_multiple=result.equity_multiple,
        yearly_cash_flows=yearly,
        milestones=milestones,
    )


@router.post("/deals/analyze", response_model=BulkDealResponse)
async def analyze(req: BulkDealRequest):
    """Bulk MDU deal inputs → full deal economics."""
    try:
        inputs = _build_inputs(req)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        "Analyzing bulk deal %r: %d units, %s funding, %s repayment",
        inputs.property_name, inputs.units,
        inputs.funding_source.value, inputs.repayment_structure.value,
    )
    result = analyze_deal(inputs)
    return _result_to_response(result, inputs.property_name)


@router.post("/irr", response_model=IrrResponse)
async def irr(req: IrrRequest):
    """IRR of an arbitrary period-indexed cash flow series."""
    return IrrResponse(irr=compute_irr(req.cash_flows))
