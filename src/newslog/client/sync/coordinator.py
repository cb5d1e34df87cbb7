"""Sync coordinator for the user-invocable actions.

This module provides:
- SyncCoordinator: runs upload, highlights and bundle flows one at a time

Each action reads the settings once at start, builds a client for the
configured identity, and lets the flow write the checkpoint back at the end.
All actions share one lock, so two triggers never interleave their
read-then-write of ``lastSyncDate`` or ``downloadedDates``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import date as date_type
from datetime import datetime
from pathlib import Path

from newslog.client.api import MISSING_IDENTITY, NewslogClient
from newslog.client.notifications import Notifier, error
from newslog.client.settings import Settings, SettingsStore
from newslog.client.sync.bundles import DailyBundleSync
from newslog.client.sync.highlights import HighlightsSync
from newslog.client.sync.types import BundleResult, ConfigurationError, HighlightsResult
from newslog.client.sync.upload import ClippingsUploader
from newslog.client.vault import LocalVault, Vault
from newslog.core.config import ServerConfig

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ServerConfig, Notifier], NewslogClient]
VaultFactory = Callable[[Path], Vault]


class SyncCoordinator:
    """Entry point for the three user actions.

    Usage:
        coordinator = SyncCoordinator(SettingsStore(config_file), notify)
        coordinator.download_highlights()
        coordinator.download_bundle(date(2024, 1, 1))
        coordinator.upload_clippings(Path("My Clippings.txt"))
    """

    def __init__(
        self,
        store: SettingsStore,
        notify: Notifier,
        client_factory: ClientFactory = NewslogClient,
        vault_factory: VaultFactory = LocalVault,
    ) -> None:
        """Initialize the coordinator.

        Args:
            store: Settings persistence.
            notify: Observer receiving user-facing messages.
            client_factory: Builds the HTTP client for a connection config.
            vault_factory: Builds the vault for a root directory.
        """
        self._store = store
        self._notify = notify
        self._client_factory = client_factory
        self._vault_factory = vault_factory
        self._lock = threading.Lock()

    def _load(self) -> Settings:
        """Load settings and check the identity before any network call.

        Raises:
            ConfigurationError: If username or API key is missing.
        """
        settings = self._store.load()
        if not settings.server_config().has_identity:
            self._notify(error(MISSING_IDENTITY))
            raise ConfigurationError(MISSING_IDENTITY)
        return settings

    def _vault(self, settings: Settings) -> Vault:
        return self._vault_factory(Path(settings.vault_path) if settings.vault_path else Path.cwd())

    def upload_clippings(self, path: Path) -> bool:
        """Upload a clippings file.

        Returns:
            True if the upload succeeded.

        Raises:
            ConfigurationError: If identity is not configured.
        """
        with self._lock:
            settings = self._load()
            with self._client_factory(settings.server_config(), self._notify) as client:
                return ClippingsUploader(client, self._notify).upload(path)

    def download_highlights(self, now: datetime | None = None) -> HighlightsResult:
        """Download highlights changed since the last sync.

        Raises:
            ConfigurationError: If identity is not configured.
        """
        with self._lock:
            settings = self._load()
            with self._client_factory(settings.server_config(), self._notify) as client:
                flow = HighlightsSync(client, self._vault(settings), self._store, self._notify)
                return flow.run(settings, now=now)

    def download_bundle(self, day: date_type | str) -> BundleResult:
        """Download the daily bundles of a date.

        Args:
            day: Date object or "YYYY-MM-DD" string.

        Raises:
            ConfigurationError: If identity is not configured.
        """
        target = day.strftime("%Y-%m-%d") if isinstance(day, date_type) else day
        with self._lock:
            settings = self._load()
            with self._client_factory(settings.server_config(), self._notify) as client:
                flow = DailyBundleSync(client, self._vault(settings), self._store, self._notify)
                return flow.run(settings, target)

    def reset_highlights(self) -> None:
        """Clear lastSyncDate so the next download fetches everything."""
        with self._lock:
            settings = self._store.load()
            settings.last_sync_date = ""
            self._store.save(settings)
            logger.info("Highlight history reset")

    def reset_bundles(self) -> None:
        """Clear the downloaded dates history."""
        with self._lock:
            settings = self._store.load()
            settings.downloaded_dates = []
            self._store.save(settings)
            logger.info("Daily bundle history reset")
