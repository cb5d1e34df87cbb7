"""Command-line interface for newslog.

This module provides the main CLI entry point and assembles all commands.

Commands:
- configure: Edit username, API key, vault and folder paths
- status: Show settings and sync history
- reset: Clear highlight or daily bundle history
- upload: Upload a Kindle clippings file
- highlights: Download new highlights
- bundle: Download a date's daily bundles
"""

from __future__ import annotations

import logging

import click

from newslog.client.cli.config import get_config_dir, get_config_file, open_store
from newslog.client.cli.settings import configure, reset, status
from newslog.client.cli.sync import bundle, highlights, upload


@click.group()
@click.version_option(package_name="newslog-sync")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """Newslog - Sync reading highlights and daily bundles into a notes vault."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.basicConfig(level=logging.WARNING, format="%(message)s")


# Settings commands
cli.add_command(configure)
cli.add_command(status)
cli.add_command(reset)

# Sync commands
cli.add_command(upload)
cli.add_command(highlights)
cli.add_command(bundle)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "main",
    "get_config_dir",
    "get_config_file",
    "open_store",
]
