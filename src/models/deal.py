from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class ConstructionType(Enum):
    GREENFIELD = "greenfield"  # New construction, lease-up applies
    BROWNFIELD = "brownfield"  # Existing building retrofit


class FundingSource(Enum):
    CAPITAL_PROVIDER = "capital_provider"
    OWNER = "owner"
    INTERNAL = "internal"


class RepaymentStructure(Enum):
    FLAT = "flat"
    TIERED = "tiered"


# Default build cost per unit by construction type
DEFAULT_BUILD_COST = {
    ConstructionType.GREENFIELD: Decimal("350"),
    ConstructionType.BROWNFIELD: Decimal("750"),
}


@dataclass(frozen=True)
class WaterfallTier:
    """Payment rate that applies once cumulative receipts reach a MOIC multiple."""
    moic_multiple: Decimal
    payment_rate: Decimal


DEFAULT_WATERFALL_TIERS = (
    WaterfallTier(moic_multiple=Decimal("2.0"), payment_rate=Decimal("0.50")),
    WaterfallTier(moic_multiple=Decimal("2.5"), payment_rate=Decimal("0.25")),
    WaterfallTier(moic_multiple=Decimal("3.0"), payment_rate=Decimal("0")),
)


@dataclass(frozen=True)
class BulkDealInputs:
    units: int
    property_name: str = ""
    construction_type: ConstructionType = ConstructionType.GREENFIELD
    term_years: int = 10

    # Pricing
    bulk_rate_per_unit: Decimal = Decimal("0")  # Monthly, charged to the property

    # CapEx (per unit)
    build_cost_per_unit: Decimal = Decimal("350")
    cpe_cost_per_unit: Decimal = Decimal("230")
    install_cost_per_unit: Decimal = Decimal("50")
    door_fee_per_unit: Decimal = Decimal("0")
    olt_cost_per_unit: Decimal = Decimal("0")

    # Opex
    support_opex_per_unit_per_month: Decimal = Decimal("2.5")
    transport_opex_per_month: Decimal = Decimal("1500")  # Fixed

    # Financing
    funding_source: FundingSource = FundingSource.CAPITAL_PROVIDER
    provider_fee_per_unit_per_month: Decimal = Decimal("15")
    owner_loan_interest_rate: Decimal = Decimal("0.05")  # Annual
    discount_rate: Decimal = Decimal("0.10")  # Reported only, not used in IRR

    # Lease-up (greenfield only)
    lease_up_months: int = 0

    # Repayment
    repayment_structure: RepaymentStructure = RepaymentStructure.TIERED
    waterfall_tiers: tuple[WaterfallTier, ...] = DEFAULT_WATERFALL_TIERS

    @property
    def capex_per_unit(self) -> Decimal:
        return (
            self.build_cost_per_unit
            + self.cpe_cost_per_unit
            + self.install_cost_per_unit
            + self.door_fee_per_unit
            + self.olt_cost_per_unit
        )

    @property
    def total_capex(self) -> Decimal:
        return self.units * self.capex_per_unit

    @property
    def effective_lease_up_months(self) -> int:
        """Lease-up only ramps revenue on new construction."""
        if self.construction_type != ConstructionType.GREENFIELD:
            return 0
        return max(self.lease_up_months, 0)

    @property
    def support_opex_per_month(self) -> Decimal:
        return self.units * self.support_opex_per_unit_per_month

    @property
    def total_opex_per_month(self) -> Decimal:
        return self.support_opex_per_month + self.transport_opex_per_month
