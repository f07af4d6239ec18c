"""Fiber build routes: single-scenario IRR and the sensitivity grid."""

import logging

from fastapi import APIRouter, HTTPException

from src.api.schemas import (
    FiberIrrRequest,
    FiberIrrResponse,
    GridCellResponse,
    SensitivityGridRequest,
    SensitivityGridResponse,
)
from src.config import settings
from src.engine.fiber import build_sensitivity_grid, compute_fiber_irr, grid_summary
from src.models.fiber import FiberBuildInputs, FiberCostComponents

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/fiber", tags=["fiber"])


def _build_inputs(req: FiberIrrRequest) -> FiberBuildInputs:
    components = FiberCostComponents(
        new_drop_construction=req.new_drop_construction,
        new_install_labor=req.new_install_labor,
        new_cpe_cost=req.new_cpe_cost,
        churn_install_labor=req.churn_install_labor,
        churn_cpe_cost=req.churn_cpe_cost,
    )
    return components.to_inputs(
        cost_per_passing=req.cost_per_passing,
        steady_state_penetration=req.steady_state_penetration,
        arpu=req.arpu,
        gross_margin=req.gross_margin,
        churn_rate=req.churn_rate,
        exit_multiple=req.exit_multiple,
        horizon_years=req.horizon_years,
        ramp_year1_factor=req.ramp_year1_factor,
        ramp_year2_factor=req.ramp_year2_factor,
    )


@router.post("/irr", response_model=FiberIrrResponse)
async def fiber_irr(req: FiberIrrRequest):
    inputs = _build_inputs(req)
    result = compute_fiber_irr(inputs)
    return FiberIrrResponse(
        irr=result.irr,
        cash_flows=result.cash_flows,
        drop_cost_per_sub=inputs.drop_cost_per_sub,
        reinstall_cost_per_churn=inputs.reinstall_cost_per_churn,
    )


@router.post("/grid", response_model=SensitivityGridResponse)
def sensitivity_grid(req: SensitivityGridRequest):
    """IRR for every cost per passing x steady-state penetration pair."""
    if req.costs is not None and not req.costs:
        raise HTTPException(status_code=400, detail="costs must not be empty")
    if req.penetrations is not None and not req.penetrations:
        raise HTTPException(status_code=400, detail="penetrations must not be empty")

    minimum_irr = req.minimum_irr if req.minimum_irr is not None else settings.default_minimum_irr
    spread = req.borderline_spread if req.borderline_spread is not None else settings.grid_borderline_spread

    grid = build_sensitivity_grid(
        _build_inputs(req),
        costs=req.costs,
        penetrations=req.penetrations,
        minimum_irr=minimum_irr,
        borderline_spread=spread,
    )
    logger.info("Built %dx%d sensitivity grid", len(grid.costs), len(grid.penetrations))

    rows = [
        [
            GridCellResponse(
                cost_per_passing=c.cost_per_passing,
                penetration=c.penetration,
                irr=c.irr,
                band=c.band.value,
            )
            for c in row
        ]
        for row in grid.rows
    ]
    return SensitivityGridResponse(
        costs=grid.costs,
        penetrations=grid.penetrations,
        minimum_irr=grid.minimum_irr,
        borderline_spread=grid.borderline_spread,
        rows=rows,
        band_counts={band.value: n for band, n in grid_summary(grid).items()},
    )
