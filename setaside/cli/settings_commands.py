"""Settings CLI commands for Set-aside.

Manages settings.json - where the record store lives and which profile to use.
"""

from pathlib import Path

import click

from setaside.sdk import (
    get_data_path,
    get_setting,
    get_settings_path,
    get_store_path,
    load_settings,
    save_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage machine settings (settings.json).

    \b
    Available settings:
    - data_dir: directory holding store.json
    - profile: path to profile.yaml (if not in the config directory)
    """
    pass


@settings.command("show")
def settings_show():
    """Show settings.json contents and the effective store location."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if current:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")
    else:
        click.echo("No settings configured (using defaults).")

    suffix = "" if current.get("data_dir") else " (default)"
    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  data_dir: {get_data_path()}{suffix}")
    click.echo(f"  store: {get_store_path()}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Remove the custom data_dir and use the default")
def settings_data_dir(path, clear):
    """Show, set or clear the directory holding the record store.

    \b
    Examples:
        setaside settings data-dir ~/Documents/setaside
        setaside settings data-dir --clear
    """
    if clear:
        current = load_settings()
        if "data_dir" not in current:
            click.echo("data_dir was not set.")
            return
        del current["data_dir"]
        save_settings(current)
        click.echo("Cleared data_dir setting.")
        click.echo(f"Data directory is now: {get_data_path()} (default)")
        return

    if not path:
        current_data_dir = get_setting("data_dir")
        if current_data_dir:
            click.echo(f"Current data_dir: {current_data_dir}")
        else:
            click.echo(f"No custom data_dir set. Using default: {get_data_path()}")
        return

    data_path = Path(path).expanduser().resolve()
    if data_path.exists() and not data_path.is_dir():
        raise click.ClickException(f"Path exists but is not a directory: {data_path}")

    try:
        data_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise click.ClickException(f"Cannot create directory: {data_path}\n{e}")

    set_setting("data_dir", str(data_path))
    click.echo(f"Set data_dir: {data_path}")
    click.echo(f"Saved to: {get_settings_path()}")
