"""Monthly tax record regeneration from paid income.

Tax records are derived data: each calendar month with paid income gets one
TaxPaymentRecord whose amounts are recomputed from scratch every time. Only
identity and payment status (id, created_at, is_paid, paid_at) carry over
from a previous record for the same month.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from .schemas import IncomeRecord, TaxPaymentRecord, TaxProfile, new_id
from .taxes import estimate

logger = logging.getLogger(__name__)


def month_start(value: Union[date, datetime]) -> date:
    """First day of the calendar month containing value."""
    return date(value.year, value.month, 1)


def period_label(start: date) -> str:
    """Display label for a monthly period (e.g., "April 2024")."""
    return start.strftime("%B %Y")


def _latest_by_month(existing: Iterable[TaxPaymentRecord]) -> Dict[date, TaxPaymentRecord]:
    """Index existing records by month; the latest created_at wins on duplicates."""
    by_month: Dict[date, TaxPaymentRecord] = {}
    for item in existing:
        key = month_start(item.period_start)
        current = by_month.get(key)
        if current is None or item.created_at > current.created_at:
            by_month[key] = item
    return by_month


def regenerate_tax_records(
    income_records: Union[Mapping[str, IncomeRecord], Iterable[IncomeRecord]],
    existing_tax_records: Iterable[TaxPaymentRecord],
    profile: TaxProfile,
    now: Optional[datetime] = None,
    id_factory: Callable[[], str] = new_id,
) -> List[TaxPaymentRecord]:
    """Build the full replacement list of monthly tax records.

    Args:
        income_records: Income records, either a list or a mapping of id -> record
        existing_tax_records: Current tax records (identity/status is preserved)
        profile: Supplies the tax and reserve rates
        now: created_at for newly minted records (defaults to datetime.now())
        id_factory: Mints ids for new records

    Returns:
        Tax records ordered by period_start, newest first
    """
    if isinstance(income_records, Mapping):
        income_records = income_records.values()

    created_at = now or datetime.now()

    gross_by_month: Dict[date, float] = defaultdict(float)
    for record in income_records:
        if record.is_paid:
            gross_by_month[month_start(record.date)] += record.amount

    existing_by_month = _latest_by_month(existing_tax_records)

    generated = []
    for start in sorted(gross_by_month, reverse=True):
        result = estimate(
            gross_income=gross_by_month[start],
            deductions=0,
            tax_rate=profile.default_tax_rate,
            extra_reserve_rate=profile.default_reserve_extra_rate,
        )
        existing = existing_by_month.get(start)

        generated.append(TaxPaymentRecord(
            id=existing.id if existing else id_factory(),
            created_at=existing.created_at if existing else created_at,
            period_start=start,
            period_label=period_label(start),
            taxable_income=result.taxable_income,
            amount_due=result.total_set_aside,
            is_paid=existing.is_paid if existing else False,
            paid_at=existing.paid_at if existing else None,
        ))

    dropped = len(existing_by_month.keys() - gross_by_month.keys())
    logger.debug(f"regenerated {len(generated)} tax record(s), dropped {dropped} empty month(s)")
    return generated
