"""Persisted settings and sync checkpoint.

This module provides:
- Settings: identity, folder paths and sync checkpoint
- SettingsStore: JSON persistence with keyring-backed API key lookup

The JSON file keeps the key names used by the Newslog plugin
(``apiKey``, ``lastSyncDate``, ``downloadedDates``...), so an existing plugin
data file can be used as-is.
"""

from __future__ import annotations

import contextlib
import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import keyring

from newslog.core.config import NEWSLOG_SERVER_URL, ServerConfig

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "newslog"

# Settings attribute -> JSON key
_FIELDS = {
    "username": "username",
    "api_key": "apiKey",
    "last_sync_date": "lastSyncDate",
    "output_folder_path": "outputFolderPath",
    "bundle_folder_path": "bundleFolderPath",
    "downloaded_dates": "downloadedDates",
    "vault_path": "vaultPath",
    "server_url": "serverUrl",
}


class SettingsError(Exception):
    """Raised when the settings file cannot be read."""


def utc_timestamp(now: datetime | None = None) -> str:
    """Format a timestamp the way the service expects for ``lastSync``.

    Args:
        now: Moment to format (default: current time).

    Returns:
        ISO-8601 UTC string with millisecond precision, e.g.
        "2024-01-01T12:00:00.000Z".
    """
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Settings:
    """User settings and sync checkpoint.

    Attributes:
        username: Newslog username.
        api_key: Newslog API key (may live in the OS keyring instead).
        last_sync_date: ISO timestamp of the last highlights sync, "" if never.
        output_folder_path: Vault folder for highlights.
        bundle_folder_path: Vault folder for daily bundles.
        downloaded_dates: Dates ("YYYY-MM-DD") whose bundles were downloaded.
        vault_path: Local directory holding the vault.
        server_url: Newslog service origin.
    """

    username: str = ""
    api_key: str = ""
    last_sync_date: str = ""
    output_folder_path: str = ""
    bundle_folder_path: str = ""
    downloaded_dates: list[str] = field(default_factory=list)
    vault_path: str = ""
    server_url: str = NEWSLOG_SERVER_URL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create from a config dictionary, ignoring unknown keys."""
        settings = cls()
        for attr, key in _FIELDS.items():
            value = data.get(key)
            if value is None:
                continue
            if attr == "downloaded_dates":
                if not isinstance(value, list):
                    raise SettingsError(f"'{key}' must be a list")
                settings.downloaded_dates = [str(d) for d in value]
            else:
                setattr(settings, attr, str(value))
        return settings

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the plugin's key names."""
        return {key: getattr(self, attr) for attr, key in _FIELDS.items()}

    @property
    def since(self) -> str | None:
        """Get the checkpoint to send to the server (None if never synced)."""
        return self.last_sync_date or None

    def server_config(self) -> ServerConfig:
        """Build the client connection settings."""
        return ServerConfig(
            username=self.username,
            api_key=self.api_key,
            server_url=self.server_url,
        )


def load_api_key(username: str) -> str:
    """Look up an API key in the OS keyring.

    Returns:
        The stored key, or "" if none is stored or the keyring is unavailable.
    """
    if not username:
        return ""
    with contextlib.suppress(Exception):
        return keyring.get_password(KEYRING_SERVICE, username) or ""
    return ""


def store_api_key(username: str, api_key: str) -> bool:
    """Store an API key in the OS keyring.

    Returns:
        True if the keyring accepted the key.
    """
    try:
        keyring.set_password(KEYRING_SERVICE, username, api_key)
    except Exception as e:
        logger.warning(f"Could not store API key in keyring: {e}")
        return False
    return True


class SettingsStore:
    """Loads and saves Settings as a JSON file.

    Keys the store does not know about are kept and written back on save.
    """

    def __init__(self, config_file: Path) -> None:
        """Initialize the store.

        Args:
            config_file: Path to the JSON settings file.
        """
        self._config_file = Path(config_file)
        self._extra: dict[str, Any] = {}
        # API key known to live in the keyring; never written to the file
        self._keyring_key = ""

    @property
    def path(self) -> Path:
        """Get the settings file path."""
        return self._config_file

    def _read(self) -> dict[str, Any]:
        if not self._config_file.exists():
            return {}
        try:
            data = json.loads(self._config_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise SettingsError(f"Cannot read settings from {self._config_file}: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self._config_file} is not a JSON object")
        return data

    def load(self) -> Settings:
        """Load settings, filling a missing API key from the keyring.

        Raises:
            SettingsError: If the file exists but is not valid.
        """
        data = self._read()
        known = set(_FIELDS.values())
        self._extra = {k: v for k, v in data.items() if k not in known}
        settings = Settings.from_dict(data)
        if not settings.api_key:
            settings.api_key = load_api_key(settings.username)
            self._keyring_key = settings.api_key
        return settings

    def save(self, settings: Settings, *, use_keyring: bool = False) -> None:
        """Write settings to disk.

        Args:
            settings: Settings to persist.
            use_keyring: Move the API key into the OS keyring. If the keyring
                rejects it, the key is written to the file instead.
        """
        if use_keyring and settings.api_key and store_api_key(settings.username, settings.api_key):
            self._keyring_key = settings.api_key

        data = {**self._extra, **settings.to_dict()}
        if settings.api_key and settings.api_key == self._keyring_key:
            data["apiKey"] = ""
        self._config_file.parent.mkdir(parents=True, exist_ok=True)
        self._config_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.debug(f"Saved settings to {self._config_file}")
