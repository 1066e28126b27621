"""
Record store for income and tax set-aside records.

This module contains all business logic for records storage. CLI and MCP
tools should be thin wrappers that call these functions.

Design
------

Commands and queries are plain functions over an immutable Snapshot
(records + the profile they are evaluated against). A command returns a new
Snapshot; it never touches disk. Persistence goes through a StorePort, and
Ledger ties the two together: load, apply a command, save.

Every command that changes income or the profile regenerates the monthly
tax records, so tax records are never edited for amounts, only for payment
status.

Store document (store.json in the data directory):

    {
      "schema_version": 1,
      "records": [...],
      "tax_records": [...]
    }

Documents without schema_version are the legacy flat-key layout
("incomeRecords", "taxRecords", "taxProfile") and are migrated on load.
"""

import json
import logging
import os
import re
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, TypeVar, Union

from pydantic import ValidationError

from .config import get_store_path
from .periods import PeriodFilter, filter_income
from .regenerate import month_start, regenerate_tax_records
from .schemas import (
    STORE_SCHEMA_VERSION,
    IncomeRecord,
    Snapshot,
    StoreDocument,
    TaxPaymentRecord,
    TaxProfile,
)

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

Record = TypeVar("Record", IncomeRecord, TaxPaymentRecord)


class StoreSchemaError(Exception):
    """Raised when the store document can't be read or is from a newer version."""
    pass


class RecordNotFoundError(KeyError):
    """Raised when a command addresses a record id that doesn't exist."""

    def __init__(self, record_id: str, message: Optional[str] = None):
        self.record_id = record_id
        super().__init__(message or f"No record with id {record_id}")

    def __str__(self):
        return self.args[0]


# =============================================================================
# QUERIES
# =============================================================================

def resolve_id(items: Sequence[Record], record_id: str) -> Record:
    """Find a record by full id or unique id prefix.

    Raises:
        RecordNotFoundError: If no record or more than one record matches
    """
    for item in items:
        if item.id == record_id:
            return item

    matches = [item for item in items if item.id.startswith(record_id)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise RecordNotFoundError(record_id, f"Id prefix {record_id} matches {len(matches)} records")
    raise RecordNotFoundError(record_id)


def period_total(
    records: Iterable[IncomeRecord],
    period: PeriodFilter = PeriodFilter.ALL_TIME,
    today: Optional[date] = None,
) -> float:
    """Sum of income amounts (paid and unpaid) within a period."""
    return sum(r.amount for r in filter_income(records, period=period, today=today))


def current_month_gross(snapshot: Snapshot, today: Optional[date] = None) -> float:
    """Income recorded this calendar month, paid or not."""
    return period_total(snapshot.records, PeriodFilter.THIS_MONTH, today)


def unpaid_tax_records(snapshot: Snapshot) -> List[TaxPaymentRecord]:
    return [t for t in snapshot.tax_records if not t.is_paid]


def paid_tax_records(snapshot: Snapshot) -> List[TaxPaymentRecord]:
    return [t for t in snapshot.tax_records if t.is_paid]


def next_unpaid_amount(snapshot: Snapshot) -> float:
    """Amount due on the most recent unpaid month (0 if all paid)."""
    unpaid = unpaid_tax_records(snapshot)
    return unpaid[0].amount_due if unpaid else 0.0


def outstanding_total(snapshot: Snapshot) -> float:
    return sum(t.amount_due for t in unpaid_tax_records(snapshot))


# =============================================================================
# COMMANDS
# =============================================================================

def _sorted_income(records: Iterable[IncomeRecord]) -> List[IncomeRecord]:
    return sorted(records, key=lambda r: r.date, reverse=True)


def with_regenerated(snapshot: Snapshot, now: Optional[datetime] = None) -> Snapshot:
    """Recompute monthly tax records from paid income."""
    tax_records = regenerate_tax_records(snapshot.records, snapshot.tax_records, snapshot.profile, now=now)
    return snapshot.model_copy(update={"tax_records": tax_records})


def add_income(snapshot: Snapshot, record: IncomeRecord, now: Optional[datetime] = None) -> Snapshot:
    records = _sorted_income([record, *snapshot.records])
    return with_regenerated(snapshot.model_copy(update={"records": records}), now)


def remove_income(snapshot: Snapshot, record_ids: Iterable[str], now: Optional[datetime] = None) -> Snapshot:
    doomed = {resolve_id(snapshot.records, rid).id for rid in record_ids}
    records = [r for r in snapshot.records if r.id not in doomed]
    return with_regenerated(snapshot.model_copy(update={"records": records}), now)


def toggle_income_paid(snapshot: Snapshot, record_id: str, now: Optional[datetime] = None) -> Snapshot:
    target = resolve_id(snapshot.records, record_id)
    records = [
        r.model_copy(update={"is_paid": not r.is_paid}) if r.id == target.id else r
        for r in snapshot.records
    ]
    return with_regenerated(snapshot.model_copy(update={"records": records}), now)


def update_profile(snapshot: Snapshot, profile: TaxProfile, now: Optional[datetime] = None) -> Snapshot:
    return with_regenerated(snapshot.model_copy(update={"profile": profile}), now)


def _replace_tax_record(snapshot: Snapshot, record_id: str, update: Callable[[TaxPaymentRecord], dict]) -> Snapshot:
    target = resolve_id(snapshot.tax_records, record_id)
    tax_records = [
        TaxPaymentRecord.model_validate({**t.model_dump(), **update(t)}) if t.id == target.id else t
        for t in snapshot.tax_records
    ]
    return snapshot.model_copy(update={"tax_records": tax_records})


def mark_tax_paid(snapshot: Snapshot, record_id: str, now: Optional[datetime] = None) -> Snapshot:
    paid_at = now or datetime.now()
    return _replace_tax_record(snapshot, record_id, lambda t: {"is_paid": True, "paid_at": paid_at})


def toggle_tax_paid(snapshot: Snapshot, record_id: str, now: Optional[datetime] = None) -> Snapshot:
    paid_at = now or datetime.now()
    return _replace_tax_record(
        snapshot, record_id,
        lambda t: {"is_paid": not t.is_paid, "paid_at": None if t.is_paid else paid_at},
    )


def remove_tax_records(snapshot: Snapshot, record_ids: Iterable[str]) -> Snapshot:
    doomed = {resolve_id(snapshot.tax_records, rid).id for rid in record_ids}
    tax_records = [t for t in snapshot.tax_records if t.id not in doomed]
    return snapshot.model_copy(update={"tax_records": tax_records})


# =============================================================================
# PERSISTENCE
# =============================================================================

# Legacy documents stored dates as seconds since 2001-01-01 UTC
_LEGACY_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)
_LEGACY_DATE_FIELDS = ("date", "created_at", "period_start", "paid_at")


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _legacy_datetime(value: Union[int, float, str]) -> str:
    if isinstance(value, (int, float)):
        return (_LEGACY_EPOCH + timedelta(seconds=value)).astimezone().replace(tzinfo=None).isoformat()
    return value


def _migrate_legacy_record(raw: dict) -> dict:
    record = {_snake_case(k): v for k, v in raw.items()}
    for field in _LEGACY_DATE_FIELDS:
        if record.get(field) is not None:
            record[field] = _legacy_datetime(record[field])
    if "date" in record:
        record["date"] = record["date"][:10]
    if "period_start" in record:
        record["period_start"] = month_start(datetime.fromisoformat(record["period_start"])).isoformat()
    record["id"] = str(record.get("id", "")).lower() or None
    return {k: v for k, v in record.items() if v is not None}


def migrate_document(document: dict) -> dict:
    """Bring a raw store document up to the current schema version.

    Raises:
        StoreSchemaError: If the document is from a newer version
    """
    version = document.get("schema_version")

    if version is None:
        logger.warning("Migrating legacy store layout to schema version %d", STORE_SCHEMA_VERSION)
        if "taxProfile" in document:
            logger.warning("Legacy taxProfile ignored; the profile now lives in profile.yaml")
        return {
            "schema_version": STORE_SCHEMA_VERSION,
            "records": [_migrate_legacy_record(r) for r in document.get("incomeRecords", [])],
            "tax_records": [_migrate_legacy_record(t) for t in document.get("taxRecords", [])],
        }

    if version > STORE_SCHEMA_VERSION:
        raise StoreSchemaError(
            f"Store schema version {version} is newer than supported version {STORE_SCHEMA_VERSION}"
        )
    return document


class StorePort(Protocol):
    """Persistence boundary for the store document."""

    def load(self) -> StoreDocument: ...

    def save(self, document: StoreDocument) -> None: ...


class JsonFileStore:
    """Store document persisted as a single JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else get_store_path()

    def load(self) -> StoreDocument:
        if not self.path.exists():
            logger.debug(f"No store at {self.path}, starting empty")
            return StoreDocument()

        try:
            with open(self.path) as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreSchemaError(f"Store file is not valid JSON: {self.path}: {e}") from e

        try:
            document = StoreDocument.model_validate(migrate_document(raw))
        except ValidationError as e:
            raise StoreSchemaError(f"Store file failed validation: {self.path}\n{e}") from e

        logger.debug(f"Loaded {len(document.records)} income and {len(document.tax_records)} tax records")
        return document

    def save(self, document: StoreDocument) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(document.model_dump(mode="json"), f, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug(f"Saved store to {self.path}")

    def clear(self) -> bool:
        """Delete the store file. Returns False if there was none."""
        if not self.path.exists():
            return False
        self.path.unlink()
        return True


class Ledger:
    """Loads a snapshot through a store port, applies commands and saves."""

    def __init__(self, port: StorePort, profile: TaxProfile):
        self.port = port
        self.profile = profile

    def snapshot(self) -> Snapshot:
        document = self.port.load()
        return Snapshot(
            profile=self.profile,
            records=_sorted_income(document.records),
            tax_records=document.tax_records,
        )

    def apply(self, command: Callable[..., Snapshot], *args, **kwargs) -> Snapshot:
        """Run command(snapshot, *args, **kwargs) and persist the result."""
        result = command(self.snapshot(), *args, **kwargs)
        self.port.save(StoreDocument(records=result.records, tax_records=result.tax_records))
        return result

    def refresh(self, now: Optional[datetime] = None) -> Snapshot:
        """Regenerate tax records against the current profile and persist."""
        return self.apply(with_regenerated, now=now)
