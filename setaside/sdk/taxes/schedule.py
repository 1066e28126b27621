"""Quarterly estimated tax due dates (Form 1040-ES)."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union

# (month, day, label, year offset from the tax year)
DUE_DATES = (
    (4, 15, "Q1", 0),
    (6, 15, "Q2", 0),
    (9, 15, "Q3", 0),
    (1, 15, "Q4", 1),
)


@dataclass(frozen=True)
class DueDate:
    """An estimated payment due date for a tax year quarter."""

    date: date
    label: str
    tax_year: int


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def due_dates_for(tax_year: int) -> List[DueDate]:
    """The four due dates for a tax year, in calendar order."""
    return [
        DueDate(date(tax_year + offset, month, day), label, tax_year)
        for month, day, label, offset in DUE_DATES
    ]


def next_due_date(from_date: Union[date, datetime]) -> Optional[DueDate]:
    """First due date strictly after from_date.

    Covers the prior tax year's January Q4 payment, and wraps to the
    following January's Q4 once the September payment has passed.
    """
    current = _as_date(from_date)
    candidates = due_dates_for(current.year - 1) + due_dates_for(current.year)
    for due in sorted(candidates, key=lambda d: d.date):
        if due.date > current:
            return due
    return None


def days_until_next_payment(from_date: Union[date, datetime]) -> Optional[int]:
    """Whole days from from_date to the next due date."""
    due = next_due_date(from_date)
    if due is None:
        return None
    return (due.date - _as_date(from_date)).days


def quarters_elapsed(tax_year: int, as_of: Union[date, datetime]) -> int:
    """Number of the tax year's due dates strictly before as_of."""
    current = _as_date(as_of)
    return sum(1 for due in due_dates_for(tax_year) if due.date < current)


def last_passed_due_date(tax_year: int, as_of: Union[date, datetime]) -> Optional[DueDate]:
    """Most recent due date of the tax year strictly before as_of."""
    current = _as_date(as_of)
    passed = [due for due in due_dates_for(tax_year) if due.date < current]
    return passed[-1] if passed else None
