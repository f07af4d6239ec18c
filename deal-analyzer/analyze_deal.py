"""CLI client for the Bulk Deal Analyzer API: posts a deal and prints a terminal report.

Usage:
    python deal-analyzer/analyze_deal.py "Larkspur - Juniper" --units 219 --rate 32
    python deal-analyzer/analyze_deal.py "Maple Court" --units 120 --rate 40 --funding owner --loan-rate 0.06
"""

import argparse
import asyncio
import sys
from decimal import Decimal

import httpx


# ── Helpers ──────────────────────────────────────────────────────────────────

def _pct(v) -> str:
    """Format a decimal/float as a percentage string, N/A when undefined."""
    if v is None:
        return "N/A"
    return f"{float(v) * 100:.2f}%"


def _dollar(v) -> str:
    return f"${float(v):,.0f}"


def _header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


# ── Report sections ──────────────────────────────────────────────────────────

def print_capex(data: dict) -> None:
    _header(f"Deal: {data['property_name'] or 'Untitled Property'}")
    print(f"  CapEx per Unit:       {_dollar(data['capex_per_unit'])}")
    print(f"  Total CapEx:          {_dollar(data['total_capex'])}")
    if float(data["rate_discount_per_unit"]) > 0:
        print(f"  Owner Loan Payment:   {_dollar(data['owner_loan_payment'])}/mo")
        print(f"  Rate Discount:        ${float(data['rate_discount_per_unit']):,.2f}/unit/mo")
        print(f"  Adjusted Bulk Rate:   ${float(data['adjusted_bulk_rate_per_unit']):,.2f}/unit/mo")


def print_monthly_economics(data: dict) -> None:
    _header("Monthly Economics (term average)")
    print(f"  Gross Revenue:        {_dollar(data['gross_revenue_per_month'])}")
    print(f"  Provider Payment:     {_dollar(data['provider_payment_per_month'])}"
          f"  (initial {_dollar(data['provider_payment_initial'])})")
    print(f"  Support Opex:         {_dollar(data['support_opex_per_month'])}")
    print(f"  Transport Opex:       {_dollar(data['transport_opex_per_month'])}")
    print(f"  Total Opex:           {_dollar(data['total_opex_per_month'])}")
    print(f"  Net Cash Flow:        {_dollar(data['net_cash_flow_per_month'])}")


def print_returns(data: dict) -> None:
    _header("Returns")
    payback = data.get("payback_years")
    payback_str = f"{float(payback):.2f} years" if payback is not None else "Never"
    print(f"  Annual Net Cash Flow: {_dollar(data['net_cash_flow_per_year'])}")
    print(f"  Payback Period:       {payback_str}")
    print(f"  OCF Yield:            {_pct(data['ocf_yield'])}")
    print(f"  Provider IRR:         {_pct(data.get('provider_irr'))}")
    print(f"  Operator IRR:         {_pct(data.get('operator_irr'))}")
    print(f"  IRR without Fee:      {_pct(data.get('unlevered_irr'))}")
    print(f"  Provider MOIC:        {float(data['equity_multiple']):.2f}x")


def print_cashflow_table(data: dict) -> None:
    rows = data.get("yearly_cash_flows", [])
    if not rows:
        return
    _header("Cash Flow Projections")
    print(f"  {'Yr':>3}  {'Revenue':>11}  {'Provider':>11}  {'Opex':>11}  {'Operator':>11}  {'Owner':>11}")
    print(f"  {'---':>3}  {'-' * 11}  {'-' * 11}  {'-' * 11}  {'-' * 11}  {'-' * 11}")
    for yr in rows:
        print(
            f"  {yr['year']:>3}  {_dollar(yr['revenue']):>11}  "
            f"{_dollar(yr['provider_payment']):>11}  {_dollar(yr['opex']):>11}  "
            f"{_dollar(yr['operator_cash_flow']):>11}  {_dollar(yr['owner_cash_flow']):>11}"
        )


def print_milestones(data: dict) -> None:
    milestones = data.get("milestones", [])
    if not any(float(m["threshold_amount"]) > 0 for m in milestones):
        return
    _header("Provider Waterfall")
    for m in milestones:
        when = f"month {m['month']}" if m.get("month") else "not reached in term"
        print(f"  {float(m['moic_multiple']):.1f}x MOIC  {_dollar(m['threshold_amount']):>11}  {when}")


# ── Main ─────────────────────────────────────────────────────────────────────

async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Analyze a bulk MDU deal via the Bulk Deal Analyzer API"
    )
    parser.add_argument("property_name", help="Property name for the report")
    parser.add_argument("--units", type=int, required=True, help="Number of units")
    parser.add_argument("--rate", type=Decimal, required=True, help="Bulk rate per unit per month")
    parser.add_argument(
        "--construction",
        choices=["greenfield", "brownfield"],
        default=None,
        help="Construction type (default: greenfield)",
    )
    parser.add_argument("--term", type=int, help="Term in years")
    parser.add_argument("--build-cost", type=Decimal, help="Build cost per unit")
    parser.add_argument("--cpe-cost", type=Decimal, help="CPE cost per unit")
    parser.add_argument("--install-cost", type=Decimal, help="Install cost per unit")
    parser.add_argument("--door-fee", type=Decimal, help="Door fee per unit")
    parser.add_argument(
        "--funding",
        choices=["capital_provider", "owner", "internal"],
        default=None,
        help="Who funds the CapEx (default: capital_provider)",
    )
    parser.add_argument("--provider-fee", type=Decimal, help="Provider fee per unit per month")
    parser.add_argument("--loan-rate", type=Decimal, help="Owner loan interest rate")
    parser.add_argument("--lease-up", type=int, help="Lease-up months (greenfield only)")
    parser.add_argument("--flat", action="store_true", help="Flat provider fee, no waterfall")
    parser.add_argument(
        "--api-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )

    args = parser.parse_args()

    # Build payload, only include non-None overrides
    payload: dict = {
        "property_name": args.property_name,
        "units": args.units,
        "bulk_rate_per_unit": str(args.rate),
    }
    if args.flat:
        payload["repayment_structure"] = "flat"

    field_map = {
        "construction": "construction_type",
        "term": "term_years",
        "build_cost": "build_cost_per_unit",
        "cpe_cost": "cpe_cost_per_unit",
        "install_cost": "install_cost_per_unit",
        "door_fee": "door_fee_per_unit",
        "funding": "funding_source",
        "provider_fee": "provider_fee_per_unit_per_month",
        "loan_rate": "owner_loan_interest_rate",
        "lease_up": "lease_up_months",
    }
    for cli_name, api_name in field_map.items():
        val = getattr(args, cli_name)
        if val is not None:
            payload[api_name] = val if not isinstance(val, Decimal) else str(val)

    url = f"{args.api_url}/api/v1/deals/analyze"

    async with httpx.AsyncClient(timeout=30) as client:
        try:
            resp = await client.post(url, json=payload)
        except httpx.ConnectError:
            print(f"Error: Could not connect to API at {args.api_url}", file=sys.stderr)
            print("Is the server running? Start with: uvicorn src.api.app:app --reload", file=sys.stderr)
            sys.exit(1)
        except httpx.TimeoutException:
            print("Error: Request timed out", file=sys.stderr)
            sys.exit(1)

        if resp.status_code != 200:
            print(f"Error: API returned {resp.status_code}", file=sys.stderr)
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            print(f"  {detail}", file=sys.stderr)
            sys.exit(1)

        data = resp.json()

    # Print report
    print_capex(data)
    print_monthly_economics(data)
    print_returns(data)
    print_cashflow_table(data)
    print_milestones(data)
    print()


if __name__ == "__main__":
    asyncio.run(main())
