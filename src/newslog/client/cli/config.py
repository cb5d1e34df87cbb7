"""Configuration utilities for newslog CLI.

This module provides shared configuration functions used across CLI commands.
"""

from __future__ import annotations

import os
from pathlib import Path

from newslog.client.settings import SettingsStore

CONFIG_DIR_ENV = "NEWSLOG_CONFIG_DIR"


def get_config_dir() -> Path:
    """Get the configuration directory for newslog.

    Returns:
        Path from $NEWSLOG_CONFIG_DIR, or ~/.newslog.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".newslog"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def open_store() -> SettingsStore:
    """Open the settings store backed by the config file."""
    return SettingsStore(get_config_file())


def mask_secret(value: str) -> str:
    """Hide all but the last four characters of a secret."""
    if not value:
        return "(not set)"
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]
