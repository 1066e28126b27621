"""Estimated tax safe harbor (IRS Form 2210 required annual payment)."""

from dataclasses import dataclass
from typing import Optional

from .schemas import SafeHarborRules


@dataclass(frozen=True)
class SafeHarborRule:
    """Minimum estimated payment that avoids the underpayment penalty.

    The required payment is the smaller of 90% of this year's tax or 100% of
    last year's tax (110% when last year's AGI exceeded $150,000).
    """

    prior_year_agi: float
    prior_year_tax: float
    current_year_estimated_tax: float
    params: Optional[SafeHarborRules] = None

    @property
    def _params(self) -> SafeHarborRules:
        return self.params or SafeHarborRules()

    @property
    def threshold(self) -> float:
        """Multiplier applied to prior-year tax."""
        if self.prior_year_agi > self._params.high_income_agi:
            return self._params.high_income_multiplier
        return 1.00

    @property
    def minimum_payment(self) -> float:
        return min(
            self.current_year_estimated_tax * self._params.current_year_fraction,
            self.prior_year_tax * self.threshold,
        )

    @property
    def quarterly_minimum(self) -> float:
        return self.minimum_payment / 4

    def required_by(self, quarters_elapsed: int) -> float:
        """Cumulative payment required after a number of due dates."""
        return self.quarterly_minimum * quarters_elapsed

    def penalty_risk(self, paid_so_far: float, quarters_elapsed: int) -> bool:
        return paid_so_far < self.required_by(quarters_elapsed)
