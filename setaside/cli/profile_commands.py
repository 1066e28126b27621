"""Profile CLI commands for Set-aside.

Manages the tax profile (profile.yaml) - rates, filing status, reminder, deductions.
"""

import click
import yaml

from setaside.sdk import (
    TaxProfile,
    ProfileValidationError,
    get_profile_path,
    get_profile_value,
    load_profile_dict,
    load_settings,
    save_profile,
    set_profile_value,
    store,
    validate_profile,
)

from .common import apply, open_ledger, percent


def _display_profile(profile: TaxProfile):
    click.echo(f"  Country: {profile.country_code} ({profile.currency_code})")
    click.echo(f"  Taxation mode: {profile.taxation_mode.value}")
    click.echo(f"  Filing status: {profile.filing_status}")
    click.echo(f"  Tax rate: {percent(profile.default_tax_rate)}")
    click.echo(f"  Extra reserve: {percent(profile.default_reserve_extra_rate)}")
    reminder = profile.reminder
    click.echo(f"  Reminder: day {reminder.day} at {reminder.hour:02d}:{reminder.minute:02d}")
    if profile.deductions:
        click.echo("  Deductions:")
        for entry in profile.deductions:
            if entry.percent is not None:
                cap = f", cap ${entry.cap:,.2f}" if entry.cap is not None else ""
                click.echo(f"    - {entry.name}: {percent(entry.percent)} of income{cap}")
            else:
                click.echo(f"    - {entry.name}: ${entry.amount or 0:,.2f}")


@click.group()
def profile():
    """Manage your tax profile (profile.yaml).

    The profile holds the rates used for every set-aside estimate and
    monthly tax record. Without a profile the defaults apply
    (25% tax, 3% extra reserve, single filer).
    """
    pass


@profile.command("show")
def profile_show():
    """Show the active profile and its location."""
    profile_path = get_profile_path(require_exists=False)
    custom = load_settings().get("profile")

    if custom:
        location = "custom"
    elif profile_path.exists():
        location = "central (default)"
    else:
        location = "not created (defaults in effect)"

    click.echo(f"Profile: {profile_path}")
    click.echo(f"Location: {location}")
    click.echo()

    try:
        active = validate_profile(load_profile_dict(), profile_path)
    except ProfileValidationError as e:
        raise click.ClickException(str(e))

    _display_profile(active)

    if not profile_path.exists():
        click.echo()
        click.echo("Create a profile with: setaside profile init")


@profile.command("get")
@click.argument("key")
def profile_get(key):
    """Get an effective profile value.

    KEY is a dot-notation path like 'reminder.day'.
    """
    try:
        value = get_profile_value(key)
    except ProfileValidationError as e:
        raise click.ClickException(str(e))

    if value is None:
        raise click.ClickException(f"Key '{key}' not found in profile")
    if isinstance(value, (dict, list)):
        raise click.ClickException(f"Key '{key}' is a complex value. Use 'setaside profile show' to view.")

    click.echo(value)


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key, value):
    """Set a profile value and regenerate tax records.

    KEY is a dot-notation path; VALUE is parsed as a YAML scalar.

    \b
    Examples:
        setaside profile set default_tax_rate 0.30
        setaside profile set filing_status mfj
        setaside profile set reminder.day 15
    """
    parsed_value = yaml.safe_load(value) if value else value

    try:
        profile_file = set_profile_value(key, parsed_value)
    except ProfileValidationError as e:
        raise click.ClickException(str(e))

    click.echo(f"Set {key} = {parsed_value}")
    click.echo(f"Saved to: {profile_file}")

    ledger = open_ledger()
    snapshot = apply(ledger, store.update_profile, ledger.profile)
    click.echo(f"Regenerated {len(snapshot.tax_records)} tax record(s)")


@profile.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing profile")
def profile_init(force):
    """Write a profile.yaml with the default settings."""
    profile_path = get_profile_path(require_exists=False)

    if profile_path.exists() and not force:
        raise click.ClickException(
            f"Profile already exists: {profile_path}\n"
            f"Use --force to overwrite."
        )

    saved = save_profile(TaxProfile(), profile_path)
    click.echo(f"Created profile: {saved}")
    _display_profile(TaxProfile())
