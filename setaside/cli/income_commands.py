"""Income command group: record client payments and invoices."""

import json
from typing import Optional, Tuple

import click

from setaside.sdk import IncomeRecord, PeriodFilter, StatusFilter, filter_income, store
from setaside.sdk.taxes import estimate

from .common import apply, load_snapshot, money, open_ledger, parse_date

PERIOD_CHOICES = [p.value for p in PeriodFilter]
STATUS_CHOICES = [s.value for s in StatusFilter]


def format_income_row(record: IncomeRecord) -> str:
    status = "paid" if record.is_paid else "unpaid"
    client = record.client_name[:24]
    return f"{record.id[:8]:<10} {record.date.isoformat():<12} {client:<24} {status:<8} {money(record.amount):>14}"


@click.group()
def income():
    """Record income and see what to set aside for it.

    Every change to income regenerates the monthly tax records
    (see 'setaside taxes list').

    \b
    Examples:
      setaside income add 2500 --client "Acme Corp"
      setaside income add 800 --client Globex --date 2024-03-02 --unpaid
      setaside income list --period this-year
      setaside income toggle 3f2a91c0
      setaside income remove 3f2a91c0
    """
    pass


@income.command("add")
@click.argument("amount", type=float)
@click.option("--client", "client_name", required=True, help="Client or payer name.")
@click.option("--date", "record_date", help="Date received or invoiced (YYYY-MM-DD, default today).")
@click.option("--unpaid", is_flag=True, help="Record as invoiced but not yet paid.")
@click.option("--note", default="", help="Free-form note.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def income_add(amount: float, client_name: str, record_date: Optional[str], unpaid: bool,
               note: str, output_format: str):
    """Add an income entry of AMOUNT.

    Negative amounts are recorded as zero.
    """
    ledger = open_ledger()
    record = IncomeRecord(
        date=parse_date(record_date),
        client_name=client_name.strip(),
        amount=max(0.0, amount),
        is_paid=not unpaid,
        note=note,
    )
    apply(ledger, store.add_income, record)

    profile = ledger.profile
    result = estimate(
        gross_income=record.amount,
        deductions=0,
        tax_rate=profile.default_tax_rate,
        extra_reserve_rate=profile.default_reserve_extra_rate,
    )

    if output_format == "json":
        click.echo(json.dumps({
            "record": record.model_dump(mode="json"),
            "set_aside": result.total_set_aside,
        }, indent=2))
        return

    click.echo(f"Added {record.id[:8]}: {money(record.amount)} from {record.client_name} on {record.date}")
    click.echo(f"Set aside: {money(result.total_set_aside)}")
    if unpaid:
        click.echo("Marked unpaid; it counts toward tax records once paid.")


@income.command("list")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="all", help="Filter by payment status.")
@click.option("--period", type=click.Choice(PERIOD_CHOICES), default="all-time", help="Filter by date range.")
@click.option("--count", "count_only", is_flag=True, help="Print only the number of matching entries.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def income_list(status: str, period: str, count_only: bool, output_format: str):
    """List income entries, newest first."""
    snapshot = load_snapshot(open_ledger())
    records = filter_income(snapshot.records, StatusFilter(status), PeriodFilter(period))

    if count_only:
        click.echo(len(records))
        return

    if output_format == "json":
        click.echo(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
        return

    if not records:
        click.echo(f"No income found (status={status}, period={period})")
        click.echo("\nRun 'setaside income add' to record income.")
        return

    click.echo("-" * 72)
    click.echo(f"{'ID':<10} {'DATE':<12} {'CLIENT':<24} {'STATUS':<8} {'AMOUNT':>14}")
    for record in records:
        click.echo(format_income_row(record))
    click.echo("-" * 72)
    click.echo(f"Total: {len(records)} record(s), {money(sum(r.amount for r in records))}")


@income.command("toggle")
@click.argument("record_id")
def income_toggle(record_id: str):
    """Flip an entry between paid and unpaid.

    RECORD_ID may be a unique prefix of the id.
    """
    ledger = open_ledger()
    snapshot = apply(ledger, store.toggle_income_paid, record_id)
    record = store.resolve_id(snapshot.records, record_id)
    state = "paid" if record.is_paid else "unpaid"
    click.echo(f"{record.id[:8]} ({record.client_name}, {money(record.amount)}) is now {state}")


@income.command("remove")
@click.argument("record_ids", nargs=-1, required=True)
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
def income_remove(record_ids: Tuple[str, ...], force: bool):
    """Remove one or more income entries by id or id prefix."""
    ledger = open_ledger()
    snapshot = load_snapshot(ledger)

    try:
        doomed = [store.resolve_id(snapshot.records, rid) for rid in record_ids]
    except store.RecordNotFoundError as e:
        raise click.ClickException(str(e))

    if not force:
        click.echo("Will remove:")
        for record in doomed:
            click.echo(f"  {format_income_row(record)}")
        click.confirm("Proceed?", abort=True)

    apply(ledger, store.remove_income, [r.id for r in doomed])
    click.echo(f"Removed {len(doomed)} record(s)")
