from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class FiberBuildInputs:
    """Per-passing assumptions for a fiber-to-the-home build."""
    cost_per_passing: Decimal  # Network capex per passing, excluding drop
    steady_state_penetration: Decimal  # e.g. Decimal("0.35")
    arpu: Decimal = Decimal("60")  # Monthly
    gross_margin: Decimal = Decimal("0.8")
    drop_cost_per_sub: Decimal = Decimal("500")  # Full drop capex per connected home
    churn_rate: Decimal = Decimal("0.03")  # Annual
    reinstall_cost_per_churn: Decimal = Decimal("300")
    exit_multiple: Decimal = Decimal("12")  # EBITDA multiple at exit
    horizon_years: int = 7
    ramp_year1_factor: Decimal = Decimal("0.4")  # Share of steady-state penetration
    ramp_year2_factor: Decimal = Decimal("0.7")


@dataclass(frozen=True)
class FiberCostComponents:
    """Itemized drop and churn costs that roll up into FiberBuildInputs."""
    new_drop_construction: Decimal = Decimal("200")
    new_install_labor: Decimal = Decimal("100")
    new_cpe_cost: Decimal = Decimal("200")
    churn_install_labor: Decimal = Decimal("100")
    churn_cpe_cost: Decimal = Decimal("200")

    @property
    def drop_cost_per_sub(self) -> Decimal:
        return self.new_drop_construction + self.new_install_labor + self.new_cpe_cost

    @property
    def reinstall_cost_per_churn(self) -> Decimal:
        return self.churn_install_labor + self.churn_cpe_cost

    def to_inputs(
        self,
        cost_per_passing: Decimal,
        steady_state_penetration: Decimal,
        **overrides,
    ) -> FiberBuildInputs:
        return FiberBuildInputs(
            cost_per_passing=cost_per_passing,
            steady_state_penetration=steady_state_penetration,
            drop_cost_per_sub=self.drop_cost_per_sub,
            reinstall_cost_per_churn=self.reinstall_cost_per_churn,
            **overrides,
        )


@dataclass
class FiberIrrResult:
    irr: Decimal | None
    cash_flows: list[Decimal] = field(default_factory=list)  # Year 0..N, per passing


class IrrBand(Enum):
    APPROVE = "approve"
    BORDERLINE = "borderline"
    REJECT = "reject"
    UNDEFINED = "undefined"


@dataclass
class GridCell:
    cost_per_passing: Decimal
    penetration: Decimal
    irr: Decimal | None
    band: IrrBand


@dataclass
class SensitivityGrid:
    costs: list[Decimal]
    penetrations: list[Decimal]
    minimum_irr: Decimal
    borderline_spread: Decimal
    rows: list[list[GridCell]] = field(default_factory=list)  # One row per cost

    def cell(self, cost_per_passing: Decimal, penetration: Decimal) -> GridCell:
        i = self.costs.index(cost_per_passing)
        j = self.penetrations.index(penetration)
        return self.rows[i][j]
