"""Sync commands for newslog CLI.

Commands:
- upload: Upload a Kindle clippings file
- highlights: Download new highlights into the vault
- bundle: Download the daily bundles of a date
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import TypeVar

import click

from newslog.client.cli.config import open_store
from newslog.client.notifications import ConsoleNotifier, notify_error, notify_sync_complete
from newslog.client.settings import SettingsError
from newslog.client.sync import ConfigurationError, SyncCoordinator

T = TypeVar("T")

notify_option = click.option(
    "--notify", "desktop", is_flag=True, help="Also send a desktop notification when done."
)
quiet_option = click.option("--quiet", "-q", is_flag=True, help="Only print errors and the summary.")


def make_coordinator(quiet: bool = False) -> SyncCoordinator:
    """Build a coordinator wired to the config file and the terminal."""
    return SyncCoordinator(open_store(), ConsoleNotifier(quiet=quiet))


def run_action(action: Callable[..., T], *args: object) -> T:
    """Run a coordinator action, exiting on configuration errors."""
    try:
        return action(*args)
    except ConfigurationError:
        # Already reported by the coordinator
        click.echo("Run 'newslog configure --username ... --api-key ...' first.", err=True)
        sys.exit(1)
    except SettingsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@notify_option
@quiet_option
def upload(path: Path, desktop: bool, quiet: bool) -> None:
    """Upload a Kindle 'My Clippings.txt' file to the server."""
    coordinator = make_coordinator(quiet)
    if not run_action(coordinator.upload_clippings, path):
        if desktop:
            notify_error(f"Upload of {path.name} failed.")
        sys.exit(1)


@click.command()
@notify_option
@quiet_option
def highlights(desktop: bool, quiet: bool) -> None:
    """Download highlights added since the last sync."""
    coordinator = make_coordinator(quiet)
    result = run_action(coordinator.download_highlights)

    if not result.fetched:
        if desktop:
            notify_error("Could not fetch the list of highlighted articles.")
        sys.exit(1)

    if result.total:
        click.echo(f"Highlights: {result.succeeded} downloaded, {result.failed} failed")
    if desktop:
        notify_sync_complete(result.succeeded, result.failed)


@click.command()
@click.option(
    "--date",
    "day",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Bundle date as YYYY-MM-DD (default: today).",
)
@notify_option
@quiet_option
def bundle(day: datetime | None, desktop: bool, quiet: bool) -> None:
    """Download the daily bundles of a date."""
    target = day.date() if day else date.today()
    coordinator = make_coordinator(quiet)
    result = run_action(coordinator.download_bundle, target)

    if not result.fetched:
        if desktop:
            notify_error(f"Could not fetch bundles for {result.date}.")
        sys.exit(1)

    if result.bundles:
        click.echo(
            f"Bundles for {result.date}: {result.bundles} bundles, "
            f"{result.succeeded} files downloaded, {result.failed} failed"
        )
    if desktop:
        notify_sync_complete(result.succeeded, result.failed)
