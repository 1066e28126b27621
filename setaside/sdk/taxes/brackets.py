"""Progressive federal income tax brackets."""

import math
from dataclasses import dataclass
from typing import List, Sequence

from .schemas import BracketRule, FilingStatus, TaxRules


@dataclass(frozen=True)
class TaxBracket:
    """A contiguous income range taxed at a single marginal rate."""

    lower_bound: float
    upper_bound: float  # math.inf for the top bracket
    rate: float


@dataclass(frozen=True)
class BracketLine:
    """Tax assessed within one bracket for a given income."""

    bracket: TaxBracket
    income_in_bracket: float
    tax: float


class BracketTable:
    """Ordered, non-overlapping brackets covering [0, inf).

    Raises ValueError on construction if the brackets don't form a contiguous
    ladder starting at 0 and ending at infinity.
    """

    def __init__(self, brackets: Sequence[TaxBracket]):
        self.brackets = tuple(brackets)
        self._check()

    def _check(self) -> None:
        if not self.brackets:
            raise ValueError("bracket table needs at least one bracket")
        if self.brackets[0].lower_bound != 0:
            raise ValueError(f"first bracket must start at 0, got {self.brackets[0].lower_bound}")
        if not math.isinf(self.brackets[-1].upper_bound):
            raise ValueError("last bracket must be unbounded")

        previous_upper = 0.0
        for bracket in self.brackets:
            if bracket.lower_bound >= bracket.upper_bound:
                raise ValueError(
                    f"bracket lower bound {bracket.lower_bound} must be below upper bound {bracket.upper_bound}"
                )
            if bracket.lower_bound != previous_upper:
                raise ValueError(
                    f"brackets must be contiguous: expected lower bound {previous_upper}, got {bracket.lower_bound}"
                )
            previous_upper = bracket.upper_bound

    @classmethod
    def from_rules(cls, rules: TaxRules, filing_status: FilingStatus = "single") -> "BracketTable":
        """Build a table from validated tax rules."""
        return cls.from_bracket_rules(rules.for_status(filing_status).tax_brackets)

    @classmethod
    def from_bracket_rules(cls, bracket_rules: Sequence[BracketRule]) -> "BracketTable":
        """Convert YAML-style up_to/over entries into contiguous brackets."""
        bounded = sorted((b for b in bracket_rules if b.up_to is not None), key=lambda b: b.up_to)
        top = [b for b in bracket_rules if b.over is not None]

        brackets: List[TaxBracket] = []
        lower = 0.0
        for rule in bounded:
            brackets.append(TaxBracket(lower, rule.up_to, rule.rate))
            lower = rule.up_to
        if len(top) != 1:
            raise ValueError(f"bracket rules need exactly one 'over' entry, got {len(top)}")
        if top[0].over != lower:
            raise ValueError(f"top bracket starts at {top[0].over}, expected {lower}")
        brackets.append(TaxBracket(lower, math.inf, top[0].rate))
        return cls(brackets)

    def tax_for(self, income: float) -> float:
        """Tax owed on a taxable-income amount."""
        if income <= 0:
            return 0.0

        tax_owed = 0.0
        for bracket in self.brackets:
            if income > bracket.lower_bound:
                income_in_bracket = min(income, bracket.upper_bound) - bracket.lower_bound
                tax_owed += income_in_bracket * bracket.rate
        return tax_owed

    # Same computation under the name the annualized method uses
    total = tax_for

    def marginal_rate(self, income: float) -> float:
        """Rate applied to the next dollar of income."""
        for bracket in self.brackets:
            if income < bracket.upper_bound:
                return bracket.rate
        return self.brackets[-1].rate

    def effective_rate(self, income: float) -> float:
        """Average rate over the whole income (0 for non-positive income)."""
        if income <= 0:
            return 0.0
        return self.tax_for(income) / income

    def breakdown(self, income: float) -> List[BracketLine]:
        """Per-bracket lines, one per bracket, zero-filled above the income."""
        lines = []
        for bracket in self.brackets:
            if income > bracket.lower_bound:
                in_bracket = min(income, bracket.upper_bound) - bracket.lower_bound
            else:
                in_bracket = 0.0
            lines.append(BracketLine(bracket, in_bracket, in_bracket * bracket.rate))
        return lines
