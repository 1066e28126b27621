"""Set-aside CLI - Income tracking and tax set-aside estimates."""

import json
from dataclasses import asdict
from datetime import datetime
from typing import Optional

import click

from setaside import __version__
from setaside.sdk import (
    IncomeProjection,
    ProfileValidationError,
    load_profile,
    next_reminder,
    set_profile_value,
    summarize_snapshot,
    ytd_income_by_period,
)
from setaside.sdk.store import JsonFileStore
from setaside.sdk.taxes import (
    BracketTable,
    PenaltyEstimator,
    days_until_next_payment,
    due_dates_for,
    estimate,
    load_tax_rules,
    next_due_date,
)

from .common import load_snapshot, money, open_ledger, parse_date, percent
from .income_commands import income as income_group
from .profile_commands import profile as profile_group
from .settings_commands import settings as settings_group
from .taxes_commands import taxes as taxes_group


@click.group()
@click.version_option(version=__version__, prog_name="setaside")
def cli():
    """Set-aside - Know how much of your freelance income to keep for taxes.

    Record income as it arrives; monthly tax records are generated from
    paid income using the rates in your profile.

    Configuration is loaded from (in order):

    \b
    1. SETASIDE_CONFIG_PATH environment variable
    2. settings.json 'profile' key (if set)
    3. ~/.config/setaside/profile.yaml (XDG default)

    Run 'setaside profile show' to see the active profile.
    """
    pass


cli.add_command(income_group)
cli.add_command(taxes_group)
cli.add_command(profile_group)
cli.add_command(settings_group)


def _load_profile():
    try:
        return load_profile()
    except ProfileValidationError as e:
        raise click.ClickException(str(e))


@cli.command("estimate")
@click.argument("gross", type=float)
@click.option("--deductions", type=float, default=0.0, help="Deductions to subtract from gross.")
@click.option("--tax-rate", type=float, help="Income tax rate in percent (default: profile).")
@click.option("--social-rate", type=float, default=0.0, help="Social contribution rate in percent, added to the tax rate.")
@click.option("--extra-rate", type=float, help="Extra reserve rate in percent (default: profile).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def estimate_cmd(gross: float, deductions: float, tax_rate: Optional[float], social_rate: float,
                 extra_rate: Optional[float], output_format: str):
    """Estimate the set-aside for a GROSS income amount.

    \b
    Examples:
      setaside estimate 5000
      setaside estimate 5000 --deductions 800 --tax-rate 22 --extra-rate 5
    """
    profile = _load_profile()
    rate = profile.default_tax_rate if tax_rate is None else tax_rate / 100
    extra = profile.default_reserve_extra_rate if extra_rate is None else extra_rate / 100
    rate += social_rate / 100

    result = estimate(gross_income=gross, deductions=deductions, tax_rate=rate, extra_reserve_rate=extra)

    if output_format == "json":
        click.echo(json.dumps(asdict(result), indent=2))
        return

    click.echo(f"Taxable income:  {money(result.taxable_income):>14}")
    click.echo(f"Estimated tax:   {money(result.estimated_tax):>14}  ({percent(rate)})")
    click.echo(f"Extra reserve:   {money(result.reserve_extra):>14}  ({percent(extra)})")
    click.echo("-" * 32)
    click.echo(f"Set aside:       {money(result.total_set_aside):>14}")


@cli.command("schedule")
@click.option("--from", "from_date", help="Reference date (YYYY-MM-DD, default today).")
@click.option("--year", type=int, help="Show all four due dates for a tax year.")
def schedule(from_date: Optional[str], year: Optional[int]):
    """Show quarterly estimated tax due dates."""
    reference = parse_date(from_date, "from date")

    if year is not None:
        click.echo(f"Estimated tax due dates for {year}")
        click.echo("-" * 36)
        for due in due_dates_for(year):
            days = (due.date - reference).days
            status = "passed" if days < 0 else f"in {days} day(s)"
            click.echo(f"{due.label:<4} {due.date.isoformat():<12} {status}")
        return

    due = next_due_date(reference)
    if due is None:
        raise click.ClickException(f"No due date found after {reference}")
    click.echo(f"Next payment: {due.label} {due.tax_year} due {due.date.isoformat()}")
    click.echo(f"Days remaining: {days_until_next_payment(reference)}")


def _summary_dict(summary, projection, annualized) -> dict:
    data = asdict(summary)
    data["as_of"] = summary.as_of.isoformat()
    data["total_tax"] = summary.total_tax
    data["effective_rate"] = summary.effective_rate
    data["self_employment"]["total"] = summary.self_employment.total
    data["adjustment"]["remaining"] = summary.adjustment.remaining
    data["adjustment"]["per_quarter"] = summary.adjustment.per_quarter
    if summary.safe_harbor is not None:
        data["safe_harbor"]["minimum_payment"] = summary.safe_harbor.minimum_payment
        data["safe_harbor"]["quarterly_minimum"] = summary.safe_harbor.quarterly_minimum
        data["safe_harbor"].pop("params", None)
    data["projected_annual_income"] = projection.projected_annual_income
    data["annualized_installments"] = [asdict(q) for q in annualized]
    return data


@cli.command("summary")
@click.argument("year", type=int, required=False)
@click.option("--prior-agi", type=float, help="Prior year adjusted gross income.")
@click.option("--prior-tax", type=float, help="Prior year total tax (enables safe harbor).")
@click.option("--as-of", "as_of", help="Evaluate as of this date (YYYY-MM-DD, default today).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def summary(year: Optional[int], prior_agi: Optional[float], prior_tax: Optional[float],
            as_of: Optional[str], output_format: str):
    """Advisory tax picture for YEAR (default: current year).

    Applies federal brackets and self-employment tax to the year's paid
    income after deductions. With --prior-tax, also checks safe harbor
    and estimates the underpayment penalty.
    """
    as_of_date = parse_date(as_of, "as-of date")
    year = year or as_of_date.year
    if year < 1900 or year > 9999:
        raise click.BadParameter(f"Invalid year '{year}'.")

    snapshot = load_snapshot(open_ledger())
    try:
        result = summarize_snapshot(snapshot, year, as_of_date, prior_agi, prior_tax)
        table = BracketTable.from_rules(load_tax_rules(year), snapshot.profile.filing_status)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))

    projection = IncomeProjection.from_records(snapshot.records, year, as_of_date)
    annualized = PenaltyEstimator().annualized_income_method(ytd_income_by_period(snapshot.records, year), table)

    if output_format == "json":
        click.echo(json.dumps(_summary_dict(result, projection, annualized), indent=2))
        return

    se = result.self_employment
    click.echo(f"Tax year {year} (as of {as_of_date})")
    click.echo("=" * 44)
    click.echo(f"Gross income:            {money(result.gross_income):>18}")
    click.echo(f"Business deductions:     {money(result.business_deductions):>18}")
    click.echo(f"Net earnings:            {money(result.net_earnings):>18}")
    click.echo(f"Self-employment tax:     {money(se.total):>18}")
    click.echo(f"Adjusted gross income:   {money(result.adjusted_gross_income):>18}")
    click.echo(f"Standard deduction:      {money(result.standard_deduction):>18}")
    click.echo(f"Taxable income:          {money(result.taxable_income):>18}")
    click.echo(f"Income tax:              {money(result.income_tax):>18}")
    click.echo("-" * 44)
    click.echo(f"Total tax:               {money(result.total_tax):>18}")
    click.echo(f"Effective rate:          {percent(result.effective_rate):>18}")
    click.echo(f"Projected annual income: {money(projection.projected_annual_income):>18}")
    click.echo()
    click.echo(f"Paid to date:            {money(result.paid_to_date):>18}")
    click.echo(f"Quarters elapsed:        {result.quarters_elapsed:>18}")
    click.echo(f"Still needed:            {money(result.adjustment.remaining):>18}")
    click.echo(f"Per remaining quarter:   {money(result.adjustment.per_quarter):>18}")

    if result.safe_harbor is not None:
        click.echo()
        click.echo(f"Safe harbor minimum:     {money(result.safe_harbor.minimum_payment):>18}")
        if result.penalty_risk:
            click.echo(click.style("Underpayment penalty risk", fg="yellow"))
            click.echo(f"Estimated penalty:       {money(result.estimated_penalty):>18}")
        else:
            click.echo("On track for safe harbor.")


@cli.group()
def reminder():
    """Monthly tax payment reminder settings."""
    pass


@reminder.command("show")
def reminder_show():
    """Show the reminder time and when it fires next."""
    settings = _load_profile().reminder
    click.echo(f"Reminder: day {settings.day} at {settings.hour:02d}:{settings.minute:02d}")
    click.echo(f"Next: {next_reminder(settings, datetime.now()):%Y-%m-%d %H:%M}")


@reminder.command("set")
@click.option("--day", type=int, help="Day of month (clamped to 1-28).")
@click.option("--hour", type=int, help="Hour (0-23).")
@click.option("--minute", type=int, help="Minute (0-59).")
def reminder_set(day: Optional[int], hour: Optional[int], minute: Optional[int]):
    """Change the monthly reminder time."""
    changes = {"day": day, "hour": hour, "minute": minute}
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        raise click.UsageError("Give at least one of --day, --hour, --minute.")

    try:
        for key, value in changes.items():
            set_profile_value(f"reminder.{key}", value)
    except ProfileValidationError as e:
        raise click.ClickException(str(e))

    settings = _load_profile().reminder
    click.echo(f"Reminder: day {settings.day} at {settings.hour:02d}:{settings.minute:02d}")
    click.echo(f"Next: {next_reminder(settings, datetime.now()):%Y-%m-%d %H:%M}")


@cli.command("reset")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
def reset(force: bool):
    """Delete all income and tax records.

    The profile and settings are kept.
    """
    port = JsonFileStore()
    if not port.path.exists():
        click.echo("No records to delete.")
        return

    if not force:
        click.echo(f"Will delete: {port.path}")
        click.confirm("Proceed?", abort=True)

    port.clear()
    click.echo("All records deleted.")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
