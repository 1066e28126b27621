"""Set-aside MCP Server - FastMCP tools over the record store and tax calculators."""

import logging
from dataclasses import asdict
from datetime import date
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from setaside.sdk import (
    PeriodFilter,
    StatusFilter,
    filter_income,
    filter_tax_records,
    load_profile,
    store,
    summarize_snapshot,
)
from setaside.sdk.taxes import days_until_next_payment, estimate, next_due_date

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("setaside")


def _snapshot():
    """Current records with tax records regenerated in memory (nothing is saved)."""
    ledger = store.Ledger(store.JsonFileStore(), load_profile())
    return store.with_regenerated(ledger.snapshot())


# --- Tools ---

@mcp.tool()
async def estimate_set_aside(
    gross_income: float = Field(description="Gross income amount"),
    deductions: float = Field(default=0.0, description="Deductions subtracted before tax"),
    tax_rate: float | None = Field(default=None, description="Tax rate as a fraction (e.g. 0.25); defaults to the profile"),
    extra_reserve_rate: float | None = Field(default=None, description="Extra reserve as a fraction; defaults to the profile"),
) -> dict[str, Any]:
    """Estimate how much of an income amount to set aside for taxes."""
    try:
        profile = load_profile()
        result = estimate(
            gross_income=gross_income,
            deductions=deductions,
            tax_rate=profile.default_tax_rate if tax_rate is None else tax_rate,
            extra_reserve_rate=profile.default_reserve_extra_rate if extra_reserve_rate is None else extra_reserve_rate,
        )
        return asdict(result)

    except Exception as e:
        logger.error(f"Error estimating set-aside: {e}")
        return {"error": str(e)}


@mcp.tool()
async def list_income(
    status: str = Field(default="all", description="'all', 'paid' or 'unpaid'"),
    period: str = Field(default="all-time", description="'this-month', 'last-3-months', 'this-year' or 'all-time'"),
    limit: int = Field(default=50, description="Maximum number of records to return (default 50)"),
) -> dict[str, Any]:
    """List income records, newest first, with the period total."""
    try:
        snapshot = _snapshot()
        records = filter_income(snapshot.records, StatusFilter(status), PeriodFilter(period))
        return {
            "records": [r.model_dump(mode="json") for r in records[:limit]],
            "count": min(len(records), limit),
            "total_available": len(records),
            "total_amount": sum(r.amount for r in records),
            "filters_applied": {"status": status, "period": period},
        }

    except Exception as e:
        logger.error(f"Error listing income: {e}")
        return {"error": str(e), "records": [], "count": 0}


@mcp.tool()
async def list_tax_payments(
    status: str = Field(default="all", description="'all', 'paid' or 'unpaid'"),
    period: str = Field(default="all-time", description="'this-month', 'last-3-months', 'this-year' or 'all-time'"),
) -> dict[str, Any]:
    """List monthly tax set-aside records with the outstanding total."""
    try:
        snapshot = _snapshot()
        records = filter_tax_records(snapshot.tax_records, StatusFilter(status), PeriodFilter(period))
        return {
            "tax_records": [r.model_dump(mode="json") for r in records],
            "count": len(records),
            "next_unpaid_amount": store.next_unpaid_amount(snapshot),
            "outstanding_total": store.outstanding_total(snapshot),
        }

    except Exception as e:
        logger.error(f"Error listing tax payments: {e}")
        return {"error": str(e), "tax_records": [], "count": 0}


@mcp.tool()
async def next_payment_due(
    from_date: str | None = Field(default=None, description="Reference date YYYY-MM-DD (default today)"),
) -> dict[str, Any]:
    """Next quarterly estimated tax due date and days remaining."""
    try:
        reference = date.fromisoformat(from_date) if from_date else date.today()
        due = next_due_date(reference)
        if due is None:
            return {"error": f"No due date after {reference}"}
        return {
            "due_date": due.date.isoformat(),
            "quarter": due.label,
            "tax_year": due.tax_year,
            "days_remaining": days_until_next_payment(reference),
        }

    except Exception as e:
        logger.error(f"Error computing next payment: {e}")
        return {"error": str(e)}


@mcp.tool()
async def year_summary(
    year: int = Field(description="Tax year (e.g. 2024)"),
    prior_year_agi: float | None = Field(default=None, description="Prior year adjusted gross income"),
    prior_year_tax: float | None = Field(default=None, description="Prior year total tax; enables safe harbor checks"),
    as_of: str | None = Field(default=None, description="Evaluate as of YYYY-MM-DD (default today)"),
) -> dict[str, Any]:
    """Bracket and self-employment tax for a year, payments to date, safe harbor and penalty."""
    try:
        as_of_date = date.fromisoformat(as_of) if as_of else date.today()
        summary = summarize_snapshot(_snapshot(), year, as_of_date, prior_year_agi, prior_year_tax)
        return {
            "year": summary.year,
            "as_of": summary.as_of.isoformat(),
            "gross_income": summary.gross_income,
            "business_deductions": summary.business_deductions,
            "self_employment_tax": summary.self_employment.total,
            "adjusted_gross_income": summary.adjusted_gross_income,
            "taxable_income": summary.taxable_income,
            "income_tax": summary.income_tax,
            "total_tax": summary.total_tax,
            "effective_rate": summary.effective_rate,
            "paid_to_date": summary.paid_to_date,
            "quarters_elapsed": summary.quarters_elapsed,
            "remaining": summary.adjustment.remaining,
            "per_quarter": summary.adjustment.per_quarter,
            "safe_harbor_minimum": summary.safe_harbor.minimum_payment if summary.safe_harbor else None,
            "penalty_risk": summary.penalty_risk,
            "estimated_penalty": summary.estimated_penalty,
        }

    except Exception as e:
        logger.error(f"Error summarizing year {year}: {e}")
        return {"error": str(e)}


def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
