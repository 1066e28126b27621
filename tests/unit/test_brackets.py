"""Tests for progressive bracket tables and tax rules loading."""

import math

import pytest
from pydantic import ValidationError

from setaside.sdk.taxes import (
    BracketTable,
    TaxBracket,
    get_available_years,
    load_tax_rules,
    resolve_rules_year,
)
from setaside.sdk.taxes.schemas import BracketRule


@pytest.fixture
def single_2023():
    return BracketTable.from_rules(load_tax_rules(2023), "single")


class TestTaxFor:
    """Tests for BracketTable.tax_for."""

    def test_fifty_thousand_single_2023(self, single_2023):
        """1,100 + 4,047 + 1,160.50 across the first three brackets."""
        assert single_2023.tax_for(50000) == pytest.approx(6307.50)

    def test_zero_income_is_zero_tax(self, single_2023):
        assert single_2023.tax_for(0) == 0

    def test_negative_income_is_zero_tax(self, single_2023):
        assert single_2023.tax_for(-2500) == 0

    def test_monotonic_non_decreasing(self, single_2023):
        incomes = [0, 500, 11000, 11001, 44725, 95375, 182100, 231250, 578125, 1_000_000]
        taxes = [single_2023.tax_for(i) for i in incomes]
        assert taxes == sorted(taxes)

    def test_top_bracket_unbounded(self, single_2023):
        """Every dollar above the last bound is taxed at the top rate."""
        delta = single_2023.tax_for(2_000_000) - single_2023.tax_for(1_000_000)
        assert delta == pytest.approx(1_000_000 * 0.37)

    def test_total_matches_tax_for(self, single_2023):
        assert single_2023.total(123456) == single_2023.tax_for(123456)


class TestRates:
    """Tests for marginal/effective rates and breakdown."""

    def test_marginal_rate(self, single_2023):
        assert single_2023.marginal_rate(50000) == 0.22
        assert single_2023.marginal_rate(5000) == 0.10
        assert single_2023.marginal_rate(10_000_000) == 0.37

    def test_effective_rate(self, single_2023):
        assert single_2023.effective_rate(50000) == pytest.approx(6307.50 / 50000)

    def test_effective_rate_zero_income(self, single_2023):
        assert single_2023.effective_rate(0) == 0.0

    def test_breakdown_sums_to_total(self, single_2023):
        lines = single_2023.breakdown(50000)
        assert len(lines) == 7
        assert sum(line.tax for line in lines) == pytest.approx(single_2023.tax_for(50000))
        assert lines[0].income_in_bracket == 11000
        assert lines[3].income_in_bracket == 0


class TestConstruction:
    """Bracket tables reject ladders that don't cover [0, inf) contiguously."""

    def test_valid_table(self):
        table = BracketTable([TaxBracket(0, 100, 0.1), TaxBracket(100, math.inf, 0.2)])
        assert table.tax_for(150) == pytest.approx(20.0)

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            BracketTable([])

    def test_gap_rejected(self):
        with pytest.raises(ValueError, match="contiguous"):
            BracketTable([TaxBracket(0, 100, 0.1), TaxBracket(200, math.inf, 0.2)])

    def test_overlap_rejected(self):
        with pytest.raises(ValueError, match="contiguous"):
            BracketTable([TaxBracket(0, 100, 0.1), TaxBracket(50, math.inf, 0.2)])

    def test_must_start_at_zero(self):
        with pytest.raises(ValueError, match="start at 0"):
            BracketTable([TaxBracket(10, math.inf, 0.1)])

    def test_must_end_unbounded(self):
        with pytest.raises(ValueError, match="unbounded"):
            BracketTable([TaxBracket(0, 100, 0.1)])

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ValueError):
            BracketTable([TaxBracket(0, 0, 0.1), TaxBracket(0, math.inf, 0.2)])

    def test_top_bracket_must_follow_last_bound(self):
        rules = [BracketRule(up_to=100, rate=0.1), BracketRule(over=150, rate=0.2)]
        with pytest.raises(ValueError, match="top bracket starts at 150"):
            BracketTable.from_bracket_rules(rules)

    def test_single_top_bracket_required(self):
        rules = [BracketRule(up_to=100, rate=0.1), BracketRule(over=100, rate=0.2), BracketRule(over=100, rate=0.3)]
        with pytest.raises(ValueError, match="exactly one"):
            BracketTable.from_bracket_rules(rules)
        with pytest.raises(ValueError, match="exactly one"):
            BracketTable.from_bracket_rules([BracketRule(up_to=100, rate=0.1)])


class TestTaxRules:
    """Tests for the per-year YAML rules."""

    def test_available_years(self):
        assert get_available_years()[:3] == [2025, 2024, 2023]

    def test_exact_year(self):
        rules = load_tax_rules(2024)
        assert rules.year == 2024
        assert rules.single.standard_deduction == 14600

    def test_later_year_falls_back_to_latest(self):
        assert resolve_rules_year(2031) == max(get_available_years())

    def test_earlier_year_uses_earliest(self):
        assert resolve_rules_year(1999) == min(get_available_years())

    def test_head_of_household_rules(self):
        assert load_tax_rules(2023).for_status("hoh").standard_deduction == 20800

    def test_missing_status_falls_back_to_single(self):
        rules = load_tax_rules(2023).model_copy(update={"hoh": None})
        assert rules.for_status("hoh") == rules.single

    def test_bracket_rule_needs_one_bound(self):
        with pytest.raises(ValidationError):
            BracketRule(rate=0.1)
        with pytest.raises(ValidationError):
            BracketRule(up_to=100, over=100, rate=0.1)
