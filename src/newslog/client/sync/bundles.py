"""Daily bundle download flow.

Downloads every bundle published for a date into
``{bundle_folder_path}/{bundle_folder_name}/{filename}`` and records the date
in ``downloaded_dates``. File URLs come straight from the bundle listing, there
is no per-file URL request.

Existing files are overwritten, same as the highlights flow.
"""

from __future__ import annotations

import logging

from newslog.client.api import Bundle, NewslogClient
from newslog.client.notifications import Notifier, error, info
from newslog.client.settings import Settings, SettingsStore
from newslog.client.sync.types import BundleResult
from newslog.client.vault import Vault, VaultError, join_path, write_artifact

logger = logging.getLogger(__name__)


def _is_safe_segment(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name


class DailyBundleSync:
    """Downloads the daily bundles of a date into the vault."""

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

    def run(self, settings: Settings, date: str) -> BundleResult:
        """Download the bundles of ``date``.

        A date already in ``settings.downloaded_dates`` is downloaded again
        but not recorded twice.

        Args:
            settings: Current settings. ``downloaded_dates`` is updated in place.
            date: Target date, "YYYY-MM-DD".

        Returns:
            BundleResult with per-file counts.
        """
        bundles = self._client.list_daily_bundles(date)
        if bundles is None:
            self._notify(error(f"Failed to fetch bundles for {date}."))
            return BundleResult(date=date, fetched=False)
        if not bundles:
            self._notify(info(f"No bundles found for {date}."))
            return BundleResult(date=date)

        result = BundleResult(date=date, bundles=len(bundles))
        root = join_path(settings.bundle_folder_path)

        for bundle in bundles:
            succeeded, failed = self._download_bundle(root, bundle)
            result.succeeded += succeeded
            result.failed += failed

        self._notify(info(
            f"Downloaded {result.succeeded} files from {result.bundles} bundles for {date}."
            + (f" Failed to download {result.failed}." if result.failed else "")
        ))

        if result.recorded and date not in settings.downloaded_dates:
            settings.downloaded_dates.append(date)
            self._store.save(settings)
            logger.info(f"Recorded {date} in downloadedDates")
        return result

    def _download_bundle(self, root: str, bundle: Bundle) -> tuple[int, int]:
        """Download all files of one bundle.

        Returns:
            Tuple of (succeeded, failed) file counts.
        """
        if not _is_safe_segment(bundle.folder_name):
            logger.warning(f"Skipping bundle with invalid folder name {bundle.folder_name!r}")
            return 0, len(bundle.files)

        folder = join_path(root, bundle.folder_name)
        try:
            self._vault.create_folder(folder)
        except (OSError, VaultError) as e:
            logger.warning(f"Skipping bundle {bundle.folder_name}: {e}")
            return 0, len(bundle.files)

        succeeded = failed = 0
        for bundle_file in bundle.files:
            if not _is_safe_segment(bundle_file.filename):
                logger.warning(f"Skipping file with invalid name {bundle_file.filename!r}")
                failed += 1
                continue

            content = self._client.get_content(bundle_file.url)
            if content is None:
                logger.warning(f"Skipping {bundle_file.filename}: Failed to download content.")
                failed += 1
                continue

            try:
                write_artifact(self._vault, join_path(folder, bundle_file.filename), content)
            except (OSError, VaultError) as e:
                logger.warning(f"Skipping {bundle_file.filename}: {e}")
                failed += 1
                continue
            succeeded += 1
        return succeeded, failed
