"""Underpayment penalty estimates (Form 2210)."""

from dataclasses import dataclass
from typing import List, Sequence

from .brackets import BracketTable

DEFAULT_PENALTY_RATE = 0.08

# Annualization factors for periods ending Mar 31, May 31, Aug 31 and Dec 31
ANNUALIZATION_FACTORS = (4.0, 2.4, 1.5, 1.0)


@dataclass(frozen=True)
class AnnualizedQuarter:
    """One period of the annualized income installment method."""

    quarter: int  # 1-based
    income: float
    factor: float
    annualized_income: float
    tax: float


class PenaltyEstimator:
    """Simple-interest underpayment penalty and annualized installments."""

    def __init__(self, annual_rate: float = DEFAULT_PENALTY_RATE):
        self.annual_rate = annual_rate

    def estimate_penalty(self, shortfall: float, days_late: int) -> float:
        if shortfall <= 0 or days_late <= 0:
            return 0.0
        return shortfall * self.annual_rate * (days_late / 365)

    def annualized_income_method(
        self, income_by_quarter: Sequence[float], table: BracketTable
    ) -> List[AnnualizedQuarter]:
        """Annualize year-to-date income through each period and de-annualize the tax.

        Args:
            income_by_quarter: Year-to-date income at the end of each period
                (only the first four values are used)
            table: Brackets used to tax the annualized income
        """
        quarters = []
        for i, (income, factor) in enumerate(zip(income_by_quarter, ANNUALIZATION_FACTORS)):
            annualized = max(0.0, income) * factor
            quarters.append(AnnualizedQuarter(
                quarter=i + 1,
                income=income,
                factor=factor,
                annualized_income=annualized,
                tax=table.total(annualized) / factor,
            ))
        return quarters
