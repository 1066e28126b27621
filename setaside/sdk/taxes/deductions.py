"""Deduction categories summed into a total deduction estimate."""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class DeductionCategory:
    """A deduction that is either a flat amount or a percent of income.

    Percent-based categories use max_amount as an optional cap. Flat
    categories use max_amount as the amount itself (0 when absent).
    """

    name: str
    max_amount: Optional[float] = None
    is_percent_based: bool = False
    percent_of_income: float = 0.0

    def amount_for(self, income: float) -> float:
        if self.is_percent_based:
            cap = self.max_amount if self.max_amount is not None else math.inf
            return min(max(0.0, income) * self.percent_of_income, cap)
        return self.max_amount or 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "DeductionCategory":
        """Build from a profile.yaml entry.

        Accepts either {name, amount} for flat deductions or
        {name, percent, cap} for percent-based ones.
        """
        if data.get("percent") is not None:
            return cls(
                name=data["name"],
                max_amount=data.get("cap"),
                is_percent_based=True,
                percent_of_income=float(data["percent"]),
            )
        return cls(name=data["name"], max_amount=data.get("amount"))


# Common freelancer deductions
DEFAULT_CATEGORIES = (
    # Simplified home office method: $5/sq ft, up to 300 sq ft
    DeductionCategory("home_office", max_amount=1500),
    DeductionCategory("sep_ira", max_amount=69000, is_percent_based=True, percent_of_income=0.20),
    DeductionCategory("qualified_business_income", is_percent_based=True, percent_of_income=0.20),
)


class DeductionCatalog:
    """A fixed list of independent deduction categories."""

    def __init__(self, categories: Iterable[DeductionCategory] = DEFAULT_CATEGORIES):
        self.categories: List[DeductionCategory] = list(categories)

    @classmethod
    def from_profile_entries(cls, entries: Optional[list]) -> "DeductionCatalog":
        """Catalog from profile 'deductions' entries, or the default catalog."""
        if not entries:
            return cls()
        return cls(DeductionCategory.from_dict(e) for e in entries)

    def amounts_for(self, income: float) -> Dict[str, float]:
        return {c.name: c.amount_for(income) for c in self.categories}

    def total_for(self, income: float) -> float:
        return sum(c.amount_for(income) for c in self.categories)
