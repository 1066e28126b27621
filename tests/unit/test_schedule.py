"""Tests for quarterly estimated payment due dates."""

from datetime import date, datetime

from setaside.sdk.taxes import (
    DueDate,
    days_until_next_payment,
    due_dates_for,
    last_passed_due_date,
    next_due_date,
    quarters_elapsed,
)


class TestNextDueDate:

    def test_after_may_first_is_june_q2(self):
        assert next_due_date(date(2024, 5, 1)) == DueDate(date(2024, 6, 15), "Q2", 2024)

    def test_early_january_is_prior_year_q4(self):
        assert next_due_date(date(2024, 1, 10)) == DueDate(date(2024, 1, 15), "Q4", 2023)

    def test_on_due_date_moves_to_next(self):
        assert next_due_date(date(2024, 4, 15)).date == date(2024, 6, 15)

    def test_after_september_wraps_to_january(self):
        assert next_due_date(date(2024, 10, 1)) == DueDate(date(2025, 1, 15), "Q4", 2024)

    def test_accepts_datetime(self):
        assert next_due_date(datetime(2024, 5, 1, 18, 30)).label == "Q2"

    def test_days_until(self):
        assert days_until_next_payment(date(2024, 5, 1)) == 45


class TestYearSchedule:

    def test_due_dates_for(self):
        dates = due_dates_for(2024)
        assert [d.label for d in dates] == ["Q1", "Q2", "Q3", "Q4"]
        assert dates[0].date == date(2024, 4, 15)
        assert dates[-1].date == date(2025, 1, 15)
        assert all(d.tax_year == 2024 for d in dates)

    def test_quarters_elapsed_counts_strictly_before(self):
        assert quarters_elapsed(2024, date(2024, 1, 1)) == 0
        assert quarters_elapsed(2024, date(2024, 4, 15)) == 0
        assert quarters_elapsed(2024, date(2024, 4, 16)) == 1
        assert quarters_elapsed(2024, date(2024, 9, 16)) == 3
        assert quarters_elapsed(2024, date(2025, 2, 1)) == 4

    def test_last_passed_due_date(self):
        assert last_passed_due_date(2024, date(2024, 7, 1)).label == "Q2"
        assert last_passed_due_date(2024, date(2024, 3, 1)) is None
