"""Period and status filters for income and tax records."""

from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional, Union

from .schemas import IncomeRecord, TaxPaymentRecord


class PeriodFilter(str, Enum):
    THIS_MONTH = "this-month"
    LAST_3_MONTHS = "last-3-months"
    THIS_YEAR = "this-year"
    ALL_TIME = "all-time"

    def matches(self, value: Union[date, datetime], today: Optional[date] = None) -> bool:
        """Whether a date falls in this period relative to today.

        "Last 3 months" starts at the first day of the month two months
        before the current one.
        """
        if isinstance(value, datetime):
            value = value.date()
        today = today or date.today()

        if self is PeriodFilter.THIS_MONTH:
            return (value.year, value.month) == (today.year, today.month)
        if self is PeriodFilter.LAST_3_MONTHS:
            month_index = today.year * 12 + (today.month - 1) - 2
            start = date(month_index // 12, month_index % 12 + 1, 1)
            return value >= start
        if self is PeriodFilter.THIS_YEAR:
            return value.year == today.year
        return True


class StatusFilter(str, Enum):
    ALL = "all"
    PAID = "paid"
    UNPAID = "unpaid"

    def matches(self, is_paid: bool) -> bool:
        if self is StatusFilter.PAID:
            return is_paid
        if self is StatusFilter.UNPAID:
            return not is_paid
        return True


def filter_income(
    records: Iterable[IncomeRecord],
    status: StatusFilter = StatusFilter.ALL,
    period: PeriodFilter = PeriodFilter.ALL_TIME,
    today: Optional[date] = None,
) -> List[IncomeRecord]:
    return [
        r for r in records
        if status.matches(r.is_paid) and period.matches(r.date, today)
    ]


def filter_tax_records(
    records: Iterable[TaxPaymentRecord],
    status: StatusFilter = StatusFilter.ALL,
    period: PeriodFilter = PeriodFilter.ALL_TIME,
    today: Optional[date] = None,
) -> List[TaxPaymentRecord]:
    return [
        r for r in records
        if status.matches(r.is_paid) and period.matches(r.period_start, today)
    ]
