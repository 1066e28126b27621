"""Shared helpers for CLI commands."""

from datetime import date
from typing import Optional

import click

from setaside.sdk import ProfileValidationError, load_profile
from setaside.sdk.store import JsonFileStore, Ledger, RecordNotFoundError, StoreSchemaError


def money(amount: float) -> str:
    return f"${amount:,.2f}"


def percent(rate: float) -> str:
    return f"{rate * 100:.1f}%"


def open_ledger() -> Ledger:
    """Ledger over the configured store file and profile."""
    try:
        return Ledger(JsonFileStore(), load_profile())
    except ProfileValidationError as e:
        raise click.ClickException(str(e))


def apply(ledger: Ledger, command, *args, **kwargs):
    """Run a store command, converting store errors to CLI errors."""
    try:
        return ledger.apply(command, *args, **kwargs)
    except (RecordNotFoundError, StoreSchemaError) as e:
        raise click.ClickException(str(e))


def load_snapshot(ledger: Ledger, regenerate: bool = False):
    """Current snapshot, optionally regenerating tax records first."""
    try:
        return ledger.refresh() if regenerate else ledger.snapshot()
    except StoreSchemaError as e:
        raise click.ClickException(str(e))


def parse_date(value: Optional[str], param_name: str = "date") -> date:
    """Parse YYYY-MM-DD, defaulting to today."""
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid {param_name} '{value}'. Use YYYY-MM-DD.")
