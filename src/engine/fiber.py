"""Fiber-to-the-home build IRR with a penetration ramp, and the
cost-per-passing x penetration sensitivity grid.

Pure functions. No I/O. All figures are per passing.
"""

from dataclasses import replace
from decimal import Decimal

from src.models.fiber import (
    FiberBuildInputs,
    FiberIrrResult,
    GridCell,
    IrrBand,
    SensitivityGrid,
)
from src.engine.irr import compute_irr

DEFAULT_COSTS = [Decimal(c) for c in range(300, 3001, 100)]
DEFAULT_PENETRATIONS = [Decimal(p) / 100 for p in range(15, 101, 5)]
DEFAULT_MINIMUM_IRR = Decimal("0.15")
DEFAULT_BORDERLINE_SPREAD = Decimal("0.05")


def initial_capex(inputs: FiberBuildInputs) -> Decimal:
    """Network cost plus drops for the expected steady-state subscribers."""
    return inputs.cost_per_passing + inputs.drop_cost_per_sub * inputs.steady_state_penetration


def penetration_for_year(inputs: FiberBuildInputs, year: int) -> Decimal:
    if year == 1:
        return inputs.steady_state_penetration * inputs.ramp_year1_factor
    if year == 2:
        return inputs.steady_state_penetration * inputs.ramp_year2_factor
    return inputs.steady_state_penetration


def annual_cash_flow(inputs: FiberBuildInputs, penetration: Decimal) -> Decimal:
    """EBITDA less churn-driven reinstall cost at a given penetration."""
    ebitda_per_sub = inputs.arpu * 12 * inputs.gross_margin
    churn_cost_per_sub = inputs.churn_rate * inputs.reinstall_cost_per_churn
    return (ebitda_per_sub - churn_cost_per_sub) * penetration


def exit_value(inputs: FiberBuildInputs) -> Decimal:
    """Terminal value: steady-state cash flow times the exit multiple."""
    return annual_cash_flow(inputs, inputs.steady_state_penetration) * inputs.exit_multiple


def compute_fiber_irr(inputs: FiberBuildInputs) -> FiberIrrResult:
    cash_flows: list[Decimal] = [-initial_capex(inputs)]

    for year in range(1, inputs.horizon_years + 1):
        cf = annual_cash_flow(inputs, penetration_for_year(inputs, year))
        if year == inputs.horizon_years:
            cf += exit_value(inputs)
        cash_flows.append(cf)

    return FiberIrrResult(irr=compute_irr(cash_flows), cash_flows=cash_flows)


def classify_irr(
    irr: Decimal | None,
    minimum_irr: Decimal = DEFAULT_MINIMUM_IRR,
    borderline_spread: Decimal = DEFAULT_BORDERLINE_SPREAD,
) -> IrrBand:
    """Approval band for a grid cell.

    Below the minimum is a reject; within borderline_spread above it is
    borderline; anything higher is an approve.
    """
    if irr is None:
        return IrrBand.UNDEFINED
    if irr < minimum_irr:
        return IrrBand.REJECT
    if irr < minimum_irr + borderline_spread:
        return IrrBand.BORDERLINE
    return IrrBand.APPROVE


def build_sensitivity_grid(
    base: FiberBuildInputs,
    costs: list[Decimal] | None = None,
    penetrations: list[Decimal] | None = None,
    minimum_irr: Decimal = DEFAULT_MINIMUM_IRR,
    borderline_spread: Decimal = DEFAULT_BORDERLINE_SPREAD,
) -> SensitivityGrid:
    """Solve one IRR per (cost per passing, steady-state penetration) pair.

    Every other assumption comes from base. Cells are independent of
    each other.
    """
    costs = list(DEFAULT_COSTS if costs is None else costs)
    penetrations = list(DEFAULT_PENETRATIONS if penetrations is None else penetrations)

    grid = SensitivityGrid(
        costs=costs,
        penetrations=penetrations,
        minimum_irr=minimum_irr,
        borderline_spread=borderline_spread,
    )
    for cost in costs:
        row = []
        for pen in penetrations:
            scenario = replace(base, cost_per_passing=cost, steady_state_penetration=pen)
            irr = compute_fiber_irr(scenario).irr
            row.append(GridCell(
                cost_per_passing=cost,
                penetration=pen,
                irr=irr,
                band=classify_irr(irr, minimum_irr, borderline_spread),
            ))
        grid.rows.append(row)
    return grid


def grid_summary(grid: SensitivityGrid) -> dict[IrrBand, int]:
    """Count of cells in each approval band."""
    counts = {band: 0 for band in IrrBand}
    for row in grid.rows:
        for cell in row:
            counts[cell.band] += 1
    return counts
