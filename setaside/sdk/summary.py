"""Year-end and per-period advisory numbers.

Composes the pure calculators in setaside.sdk.taxes over a year of income
and tax records:

- IncomeProjection: straight-line projection of year-to-date paid income
- WithholdingAdjustment: per-quarter payment needed to reach a target
- TaxYearSummary: bracket + self-employment tax on the year's income,
  payments to date, safe harbor status and penalty estimate
"""

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from .schemas import IncomeRecord, Snapshot, TaxPaymentRecord
from .taxes import (
    BracketTable,
    DeductionCatalog,
    PenaltyEstimator,
    SafeHarborRule,
    SelfEmploymentTax,
    SelfEmploymentTaxCalculator,
    TaxRules,
    FilingStatus,
    last_passed_due_date,
    load_tax_rules,
    quarters_elapsed,
)


@dataclass(frozen=True)
class IncomeProjection:
    """Year-to-date income extrapolated to a full year."""

    year: int
    ytd_income: float
    days_elapsed: int
    days_in_year: int

    @property
    def projected_annual_income(self) -> float:
        if self.days_elapsed <= 0:
            return 0.0
        return self.ytd_income / self.days_elapsed * self.days_in_year

    @classmethod
    def from_records(cls, records: Iterable[IncomeRecord], year: int, as_of: date) -> "IncomeProjection":
        """Project paid income dated in `year` up to and including as_of."""
        ytd = sum(
            max(0.0, r.amount) for r in records
            if r.is_paid and r.date.year == year and r.date <= as_of
        )
        days_in_year = 366 if calendar.isleap(year) else 365
        if as_of.year < year:
            days_elapsed = 0
        elif as_of.year > year:
            days_elapsed = days_in_year
        else:
            days_elapsed = as_of.timetuple().tm_yday
        return cls(year=year, ytd_income=ytd, days_elapsed=days_elapsed, days_in_year=days_in_year)


@dataclass(frozen=True)
class WithholdingAdjustment:
    """Payment needed per remaining quarter to reach a target."""

    target: float
    paid_to_date: float
    quarters_remaining: int

    @property
    def remaining(self) -> float:
        return max(0.0, self.target - self.paid_to_date)

    @property
    def per_quarter(self) -> float:
        """Even split of the remainder (all of it when no quarters remain)."""
        if self.quarters_remaining <= 0:
            return self.remaining
        return self.remaining / self.quarters_remaining


@dataclass(frozen=True)
class TaxYearSummary:
    """Advisory tax picture for one tax year."""

    year: int
    as_of: date
    gross_income: float
    business_deductions: float
    net_earnings: float
    self_employment: SelfEmploymentTax
    adjusted_gross_income: float
    standard_deduction: float
    taxable_income: float
    income_tax: float
    paid_to_date: float
    quarters_elapsed: int
    adjustment: WithholdingAdjustment
    safe_harbor: Optional[SafeHarborRule] = None
    penalty_risk: bool = False
    estimated_penalty: float = 0.0

    @property
    def total_tax(self) -> float:
        return self.income_tax + self.self_employment.total

    @property
    def effective_rate(self) -> float:
        if self.gross_income <= 0:
            return 0.0
        return self.total_tax / self.gross_income


# Period ends for the annualized income installment method
ANNUALIZATION_PERIOD_ENDS = ((3, 31), (5, 31), (8, 31), (12, 31))


def ytd_income_by_period(records: Iterable[IncomeRecord], year: int) -> List[float]:
    """Year-to-date paid income at the end of each annualization period."""
    paid = [r for r in records if r.is_paid and r.date.year == year]
    return [
        sum(max(0.0, r.amount) for r in paid if r.date <= date(year, month, day))
        for month, day in ANNUALIZATION_PERIOD_ENDS
    ]


def paid_to_date(tax_records: Iterable[TaxPaymentRecord], year: int) -> float:
    """Set-aside amounts marked paid for months of the tax year."""
    return sum(t.amount_due for t in tax_records if t.is_paid and t.period_start.year == year)


def summarize_year(
    records: Iterable[IncomeRecord],
    tax_records: Iterable[TaxPaymentRecord],
    year: int,
    rules: TaxRules,
    as_of: date,
    filing_status: FilingStatus = "single",
    catalog: Optional[DeductionCatalog] = None,
    prior_year_agi: Optional[float] = None,
    prior_year_tax: Optional[float] = None,
) -> TaxYearSummary:
    """Build the tax year summary for paid income dated in `year`.

    Safe harbor and penalty figures are only computed when the prior year's
    tax is known.
    """
    catalog = catalog or DeductionCatalog()

    gross = sum(max(0.0, r.amount) for r in records if r.is_paid and r.date.year == year)
    business_deductions = catalog.total_for(gross)
    net_earnings = max(0.0, gross - business_deductions)

    se = SelfEmploymentTaxCalculator.from_rules(rules).compute(net_earnings)
    agi = max(0.0, net_earnings - se.deductible_half)
    standard_deduction = rules.for_status(filing_status).standard_deduction
    taxable = max(0.0, agi - standard_deduction)
    income_tax = BracketTable.from_rules(rules, filing_status).tax_for(taxable)
    total_tax = income_tax + se.total

    paid = paid_to_date(tax_records, year)
    elapsed = quarters_elapsed(year, as_of)

    safe_harbor = None
    risk = False
    penalty = 0.0
    target = total_tax
    if prior_year_tax is not None:
        safe_harbor = SafeHarborRule(
            prior_year_agi=prior_year_agi or 0.0,
            prior_year_tax=prior_year_tax,
            current_year_estimated_tax=total_tax,
            params=rules.safe_harbor,
        )
        target = safe_harbor.minimum_payment
        risk = safe_harbor.penalty_risk(paid, elapsed)
        if risk:
            last_due = last_passed_due_date(year, as_of)
            penalty = PenaltyEstimator(rules.underpayment_penalty_rate).estimate_penalty(
                safe_harbor.required_by(elapsed) - paid,
                (as_of - last_due.date).days,
            )

    return TaxYearSummary(
        year=year,
        as_of=as_of,
        gross_income=gross,
        business_deductions=business_deductions,
        net_earnings=net_earnings,
        self_employment=se,
        adjusted_gross_income=agi,
        standard_deduction=standard_deduction,
        taxable_income=taxable,
        income_tax=income_tax,
        paid_to_date=paid,
        quarters_elapsed=elapsed,
        adjustment=WithholdingAdjustment(target=target, paid_to_date=paid, quarters_remaining=4 - elapsed),
        safe_harbor=safe_harbor,
        penalty_risk=risk,
        estimated_penalty=penalty,
    )


def summarize_snapshot(
    snapshot: Snapshot,
    year: int,
    as_of: Optional[date] = None,
    prior_year_agi: Optional[float] = None,
    prior_year_tax: Optional[float] = None,
) -> TaxYearSummary:
    """summarize_year using the snapshot's profile and the year's tax rules.

    Raises:
        FileNotFoundError: If no tax rules file exists
    """
    profile = snapshot.profile
    catalog = DeductionCatalog.from_profile_entries([e.model_dump() for e in profile.deductions])
    return summarize_year(
        snapshot.records,
        snapshot.tax_records,
        year=year,
        rules=load_tax_rules(year),
        as_of=as_of or date.today(),
        filing_status=profile.filing_status,
        catalog=catalog,
        prior_year_agi=prior_year_agi,
        prior_year_tax=prior_year_tax,
    )
