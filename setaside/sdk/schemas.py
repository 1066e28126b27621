"""Pydantic schemas for set-aside profile and records.

All persisted entities are frozen: commands produce updated copies with
model_copy() rather than mutating records in place. Schemas use
extra='forbid' so typos in profile.yaml cause clear errors rather than
silent ignoring.
"""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .taxes.schemas import FilingStatus


STORE_SCHEMA_VERSION = 1


def new_id() -> str:
    return str(uuid.uuid4())


class TaxationMode(str, Enum):
    FREELANCER = "freelancer"
    SELF_EMPLOYED = "self_employed"
    CONTRACTOR = "contractor"


def _clamped_int(value, low: int, high: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"expected a whole number, got {value!r}")
    return min(max(number, low), high)


class ReminderSettings(BaseModel):
    """Monthly tax payment reminder time.

    Out-of-range values are clamped, matching what a calendar trigger accepts
    (day 1-28 so every month has it).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    day: int = 10
    hour: int = 9
    minute: int = 0

    @field_validator("day", mode="before")
    @classmethod
    def _clamp_day(cls, v):
        return _clamped_int(v, 1, 28)

    @field_validator("hour", mode="before")
    @classmethod
    def _clamp_hour(cls, v):
        return _clamped_int(v, 0, 23)

    @field_validator("minute", mode="before")
    @classmethod
    def _clamp_minute(cls, v):
        return _clamped_int(v, 0, 59)


class DeductionEntry(BaseModel):
    """A deduction category declared in profile.yaml."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    amount: Optional[float] = Field(default=None, ge=0, description="Flat deduction amount")
    percent: Optional[float] = Field(default=None, ge=0, le=1, description="Fraction of income")
    cap: Optional[float] = Field(default=None, ge=0, description="Cap for percent-based deductions")


class TaxProfile(BaseModel):
    """User tax settings driving the set-aside estimates."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    country_code: str = "US"
    taxation_mode: TaxationMode = TaxationMode.FREELANCER
    default_tax_rate: float = Field(default=0.25, ge=0, le=1)
    default_reserve_extra_rate: float = Field(default=0.03, ge=0, le=1)
    currency_code: str = "USD"
    filing_status: FilingStatus = "single"
    reminder: ReminderSettings = Field(default_factory=ReminderSettings)
    deductions: List[DeductionEntry] = Field(default_factory=list)


class IncomeRecord(BaseModel):
    """A single income entry (invoice or payment from a client)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(default_factory=new_id)
    date: date
    client_name: str
    amount: float
    is_paid: bool = True
    note: str = ""


class TaxPaymentRecord(BaseModel):
    """Tax set-aside owed for one calendar month of paid income."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=datetime.now)
    period_start: date
    period_label: str = ""
    taxable_income: float = Field(..., ge=0)
    amount_due: float = Field(..., ge=0)
    is_paid: bool = False
    paid_at: Optional[datetime] = None

    @field_validator("created_at", "paid_at", mode="after")
    @classmethod
    def _naive_local(cls, v):
        """Store timestamps as naive local time so they compare with datetime.now()."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def _paid_at_matches_is_paid(self):
        if self.is_paid != (self.paid_at is not None):
            raise ValueError("paid_at must be set if and only if is_paid is true")
        return self


class StoreDocument(BaseModel):
    """Everything the store persists, as one versioned document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int = STORE_SCHEMA_VERSION
    records: List[IncomeRecord] = Field(default_factory=list)
    tax_records: List[TaxPaymentRecord] = Field(default_factory=list)


class Snapshot(BaseModel):
    """Records plus the profile they are evaluated against.

    Store commands and queries operate on snapshots; the profile comes from
    profile.yaml and is never written to the store document.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    profile: TaxProfile = Field(default_factory=TaxProfile)
    records: List[IncomeRecord] = Field(default_factory=list)
    tax_records: List[TaxPaymentRecord] = Field(default_factory=list)
