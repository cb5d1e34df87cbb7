"""Highlights download flow.

This module provides:
- parse_highlight_key: derive the vault location of a storage key
- HighlightsSync: download highlights changed since the last sync

Flow:
    list keys since checkpoint → per key: download URL → content → vault file
    → advance checkpoint if anything was listed

Items are processed one at a time. A failed item is counted and skipped,
it never aborts the batch.
"""

from __future__ import annotations

import logging
from datetime import datetime

from newslog.client.api import NewslogClient
from newslog.client.notifications import Notifier, info
from newslog.client.settings import Settings, SettingsStore, utc_timestamp
from newslog.client.sync.types import HighlightLocation, HighlightsResult
from newslog.client.vault import Vault, VaultError, join_path, write_artifact

logger = logging.getLogger(__name__)

# user_id / highlights / <grouping> / <filename>
MIN_KEY_SEGMENTS = 4


def parse_highlight_key(key: str) -> HighlightLocation | None:
    """Split a storage key into grouping folder and file name.

    Args:
        key: Storage key such as "u1/highlights/2024-01-01/article.md".

    Returns:
        HighlightLocation, or None if the key does not have the expected shape.
    """
    parts = key.split("/")
    if len(parts) < MIN_KEY_SEGMENTS:
        return None
    grouping, filename = parts[-2], parts[-1]
    if {grouping, filename} & {"", ".", ".."}:
        return None
    return HighlightLocation(grouping=grouping, filename=filename)


class HighlightsSync:
    """Downloads highlighted articles into the vault."""

    def __init__(
        self,
        client: NewslogClient,
        vault: Vault,
        store: SettingsStore,
        notify: Notifier,
    ) -> None:
        self._client = client
        self._vault = vault
        self._store = store
        self._notify = notify

    def run(self, settings: Settings, now: datetime | None = None) -> HighlightsResult:
        """Download every highlight changed since ``settings.last_sync_date``.

        Args:
            settings: Current settings. ``last_sync_date`` is updated in place.
            now: Invocation time used for the new checkpoint (default: now).

        Returns:
            HighlightsResult with per-item counts.
        """
        started = utc_timestamp(now)
        logger.info(f"Requesting articles since: {settings.since or 'beginning (full sync)'}")

        keys = self._client.list_changed_item_keys(settings.since)
        if not keys:
            self._notify(info("No highlighted articles found on the server."))
            return HighlightsResult(fetched=keys is not None)

        self._notify(info(f"Found {len(keys)} articles. Downloading..."))
        result = HighlightsResult(total=len(keys))
        root = join_path(settings.output_folder_path)

        try:
            self._vault.create_folder(root)
        except (OSError, VaultError) as e:
            # Every item will fail on its own below
            logger.error(f"Cannot create output folder {root!r}: {e}")

        for key in keys:
            if self._download_one(root, key):
                result.succeeded += 1
            else:
                result.failed += 1

        self._notify(info(
            f"Download complete! Successfully downloaded {result.succeeded} articles. "
            f"Failed to download {result.failed}."
        ))

        settings.last_sync_date = started
        self._store.save(settings)
        result.checkpoint = started
        logger.info(f"Updated lastSyncDate to: {started}")
        return result

    def _download_one(self, root: str, key: str) -> bool:
        """Download a single key into the vault.

        Returns:
            True if the file was written.
        """
        download_url = self._client.request_download_url(key)
        if not download_url:
            logger.warning(f"Skipping {key}: Failed to get download URL.")
            return False

        content = self._client.get_content(download_url)
        if content is None:
            logger.warning(f"Skipping {key}: Failed to download content.")
            return False

        location = parse_highlight_key(key)
        if location is None:
            logger.warning(f"Skipping {key}: Path does not have the expected structure.")
            return False

        folder = join_path(root, location.grouping)
        try:
            self._vault.create_folder(folder)
            write_artifact(self._vault, join_path(folder, location.filename), content)
        except (OSError, VaultError) as e:
            logger.warning(f"Skipping {key}: {e}")
            return False
        return True
