"""Settings commands for newslog CLI.

Commands:
- configure: Edit username, API key, vault and folder paths
- status: Show current settings and sync history
- reset: Clear highlight or daily bundle history
"""

from __future__ import annotations

import sys
from datetime import datetime

import click

from newslog.client.cli.config import mask_secret, open_store
from newslog.client.settings import Settings, SettingsError, SettingsStore


def _load_or_exit() -> tuple[SettingsStore, Settings]:
    store = open_store()
    try:
        settings = store.load()
    except SettingsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    return store, settings


@click.command()
@click.option("--username", default=None, help="Newslog username.")
@click.option("--api-key", default=None, help="Newslog API key.")
@click.option(
    "--vault",
    default=None,
    type=click.Path(file_okay=False),
    help="Local vault directory.",
)
@click.option("--output-folder", default=None, help="Vault folder for highlights.")
@click.option("--bundle-folder", default=None, help="Vault folder for daily bundles.")
@click.option("--server-url", default=None, help="Newslog service URL.")
@click.option("--keyring", "use_keyring", is_flag=True, help="Store the API key in the OS keyring.")
def configure(
    username: str | None,
    api_key: str | None,
    vault: str | None,
    output_folder: str | None,
    bundle_folder: str | None,
    server_url: str | None,
    use_keyring: bool,
) -> None:
    """Edit newslog settings.

    Only the given options are changed.
    """
    store, settings = _load_or_exit()

    if username is not None:
        settings.username = username.strip()
    if api_key is not None:
        settings.api_key = api_key.strip()
    if vault is not None:
        settings.vault_path = vault
    if output_folder is not None:
        settings.output_folder_path = output_folder
    if bundle_folder is not None:
        settings.bundle_folder_path = bundle_folder
    if server_url is not None:
        settings.server_url = server_url.rstrip("/")

    store.save(settings, use_keyring=use_keyring)
    click.echo(f"Settings saved to {store.path}")


@click.command()
def status() -> None:
    """Show settings and sync history."""
    store, settings = _load_or_exit()

    if settings.last_sync_date:
        try:
            last_sync = datetime.fromisoformat(
                settings.last_sync_date.replace("Z", "+00:00")
            ).astimezone().strftime("%Y-%m-%d %H:%M:%S")
        except ValueError:
            last_sync = settings.last_sync_date
    else:
        last_sync = "Never"

    click.echo(f"Config file:       {store.path}")
    click.echo(f"Server:            {settings.server_url}")
    click.echo(f"Username:          {settings.username or '(not set)'}")
    click.echo(f"API key:           {mask_secret(settings.api_key)}")
    click.echo(f"Vault:             {settings.vault_path or '(current directory)'}")
    click.echo(f"Highlights folder: {settings.output_folder_path or '(vault root)'}")
    click.echo(f"Bundle folder:     {settings.bundle_folder_path or '(vault root)'}")
    click.echo(f"Last highlights sync: {last_sync}")
    if settings.downloaded_dates:
        click.echo(f"Downloaded bundle dates: {', '.join(sorted(settings.downloaded_dates))}")
    else:
        click.echo("Downloaded bundle dates: none")


@click.group()
def reset() -> None:
    """Clear sync history."""


@reset.command("highlights")
def reset_highlights() -> None:
    """Re-download your entire highlight history on next sync."""
    from newslog.client.cli.sync import make_coordinator, run_action

    run_action(make_coordinator(quiet=True).reset_highlights)
    click.echo("Highlight history reset.")


@reset.command("bundles")
def reset_bundles() -> None:
    """Clear the downloaded dates of daily bundles."""
    from newslog.client.cli.sync import make_coordinator, run_action

    run_action(make_coordinator(quiet=True).reset_bundles)
    click.echo("Daily bundle download history reset.")
