"""Sync operations between the Newslog service and the local vault.

Architecture:
    SyncCoordinator → flow (HighlightsSync / DailyBundleSync / ClippingsUploader)
    → NewslogClient → Vault

Components:
- **SyncCoordinator**: serializes the user actions and loads settings
- **HighlightsSync**: downloads highlights changed since the checkpoint
- **DailyBundleSync**: downloads the bundles of one date
- **ClippingsUploader**: uploads a clippings file via presigned URL
"""

from newslog.client.sync.bundles import DailyBundleSync
from newslog.client.sync.coordinator import SyncCoordinator
from newslog.client.sync.highlights import HighlightsSync, parse_highlight_key
from newslog.client.sync.types import (
    BundleResult,
    ConfigurationError,
    HighlightLocation,
    HighlightsResult,
    SyncError,
)
from newslog.client.sync.upload import ClippingsUploader, guess_content_type

__all__ = [
    # Flows
    "ClippingsUploader",
    "DailyBundleSync",
    "HighlightsSync",
    "SyncCoordinator",
    # Helpers
    "guess_content_type",
    "parse_highlight_key",
    # Types
    "BundleResult",
    "ConfigurationError",
    "HighlightLocation",
    "HighlightsResult",
    "SyncError",
]
