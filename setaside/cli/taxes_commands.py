"""Taxes command group: monthly set-aside records and payment status."""

import json
from typing import Tuple

import click

from setaside.sdk import PeriodFilter, StatusFilter, TaxPaymentRecord, filter_tax_records, store

from .common import apply, load_snapshot, money, open_ledger

PERIOD_CHOICES = [p.value for p in PeriodFilter]
STATUS_CHOICES = [s.value for s in StatusFilter]


def format_tax_row(record: TaxPaymentRecord) -> str:
    status = "paid" if record.is_paid else "unpaid"
    paid_at = record.paid_at.strftime("%Y-%m-%d") if record.paid_at else "-"
    return (
        f"{record.id[:8]:<10} {record.period_label:<16} {money(record.taxable_income):>14} "
        f"{money(record.amount_due):>12} {status:<8} {paid_at:<10}"
    )


@click.group()
def taxes():
    """Monthly tax set-aside records.

    One record exists per month with paid income. Amounts are derived
    from income and the profile's rates; only payment status is edited.

    \b
    Examples:
      setaside taxes list --status unpaid
      setaside taxes pay 9b1e04d2
      setaside taxes toggle 9b1e04d2
      setaside taxes regenerate
    """
    pass


@taxes.command("list")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="all", help="Filter by payment status.")
@click.option("--period", type=click.Choice(PERIOD_CHOICES), default="all-time", help="Filter by month range.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def taxes_list(status: str, period: str, output_format: str):
    """List monthly tax records, newest first."""
    snapshot = load_snapshot(open_ledger(), regenerate=True)
    records = filter_tax_records(snapshot.tax_records, StatusFilter(status), PeriodFilter(period))

    if output_format == "json":
        click.echo(json.dumps({
            "tax_records": [r.model_dump(mode="json") for r in records],
            "next_unpaid_amount": store.next_unpaid_amount(snapshot),
            "outstanding_total": store.outstanding_total(snapshot),
        }, indent=2))
        return

    if not records:
        click.echo(f"No tax records found (status={status}, period={period})")
        return

    click.echo("-" * 76)
    click.echo(f"{'ID':<10} {'PERIOD':<16} {'TAXABLE':>14} {'DUE':>12} {'STATUS':<8} {'PAID':<10}")
    for record in records:
        click.echo(format_tax_row(record))
    click.echo("-" * 76)
    click.echo(f"Total: {len(records)} record(s)")
    click.echo(f"Next payment: {money(store.next_unpaid_amount(snapshot))}")
    click.echo(f"Outstanding: {money(store.outstanding_total(snapshot))}")


@taxes.command("pay")
@click.argument("record_id")
def taxes_pay(record_id: str):
    """Mark a monthly record as paid now."""
    snapshot = apply(open_ledger(), store.mark_tax_paid, record_id)
    record = store.resolve_id(snapshot.tax_records, record_id)
    click.echo(f"Paid {record.period_label}: {money(record.amount_due)}")


@taxes.command("toggle")
@click.argument("record_id")
def taxes_toggle(record_id: str):
    """Flip a monthly record between paid and unpaid."""
    snapshot = apply(open_ledger(), store.toggle_tax_paid, record_id)
    record = store.resolve_id(snapshot.tax_records, record_id)
    state = "paid" if record.is_paid else "unpaid"
    click.echo(f"{record.period_label} is now {state}")


@taxes.command("remove")
@click.argument("record_ids", nargs=-1, required=True)
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
def taxes_remove(record_ids: Tuple[str, ...], force: bool):
    """Remove monthly records by id or id prefix.

    A removed month comes back on the next income change or
    'setaside taxes regenerate' while it still has paid income.
    """
    ledger = open_ledger()
    snapshot = load_snapshot(ledger)

    try:
        doomed = [store.resolve_id(snapshot.tax_records, rid) for rid in record_ids]
    except store.RecordNotFoundError as e:
        raise click.ClickException(str(e))

    if not force:
        click.echo("Will remove:")
        for record in doomed:
            click.echo(f"  {format_tax_row(record)}")
        click.confirm("Proceed?", abort=True)

    apply(ledger, store.remove_tax_records, [r.id for r in doomed])
    click.echo(f"Removed {len(doomed)} tax record(s)")


@taxes.command("regenerate")
def taxes_regenerate():
    """Recompute all monthly records from income and the current profile."""
    snapshot = load_snapshot(open_ledger(), regenerate=True)
    click.echo(f"Regenerated {len(snapshot.tax_records)} tax record(s)")
    click.echo(f"Outstanding: {money(store.outstanding_total(snapshot))}")
