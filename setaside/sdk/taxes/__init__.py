"""taxes - Tax set-aside calculation logic.

Scope:
- Flat-rate set-aside estimates (estimate)
- Federal brackets and self-employment tax
- Deduction catalog, safe harbor and underpayment penalty
- Quarterly estimated payment schedule

Constraints:
- Pure calculation - no store or profile access
- Receives sanitized non-negative numbers, clamps what it must, never raises on input
- Year-specific parameters loaded from setaside/tax_rules/{year}.yaml

Usage:
    from setaside.sdk.taxes import estimate, BracketTable, load_tax_rules

    result = estimate(gross_income=5000, deductions=0, tax_rate=0.25, extra_reserve_rate=0.03)
    table = BracketTable.from_rules(load_tax_rules(2024), "single")
"""

from .estimate import TaxResult, estimate
from .brackets import BracketLine, BracketTable, TaxBracket
from .self_employment import SelfEmploymentTax, SelfEmploymentTaxCalculator
from .deductions import DEFAULT_CATEGORIES, DeductionCatalog, DeductionCategory
from .safe_harbor import SafeHarborRule
from .penalty import ANNUALIZATION_FACTORS, AnnualizedQuarter, PenaltyEstimator
from .schedule import (
    DueDate,
    days_until_next_payment,
    due_dates_for,
    last_passed_due_date,
    next_due_date,
    quarters_elapsed,
)
from .schemas import FilingStatus, TaxRules
from .rules import get_available_years, load_tax_rules, resolve_rules_year

__all__ = [
    # Estimate
    "TaxResult",
    "estimate",
    # Brackets
    "BracketLine",
    "BracketTable",
    "TaxBracket",
    # Self-employment
    "SelfEmploymentTax",
    "SelfEmploymentTaxCalculator",
    # Deductions
    "DEFAULT_CATEGORIES",
    "DeductionCatalog",
    "DeductionCategory",
    # Safe harbor / penalty
    "SafeHarborRule",
    "ANNUALIZATION_FACTORS",
    "AnnualizedQuarter",
    "PenaltyEstimator",
    # Schedule
    "DueDate",
    "days_until_next_payment",
    "due_dates_for",
    "last_passed_due_date",
    "next_due_date",
    "quarters_elapsed",
    # Rules
    "FilingStatus",
    "TaxRules",
    "get_available_years",
    "load_tax_rules",
    "resolve_rules_year",
]
