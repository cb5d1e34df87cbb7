"""Shared types and dataclasses for sync operations.

This module provides:
- SyncError, ConfigurationError: Exception classes
- HighlightsResult, BundleResult: Operation result dataclasses
- HighlightLocation: Where a highlight key lands in the vault
"""

from __future__ import annotations

from dataclasses import dataclass


class SyncError(Exception):
    """Base exception for sync errors."""


class ConfigurationError(SyncError):
    """Identity or another required setting is missing."""


@dataclass(frozen=True)
class HighlightLocation:
    """Grouping folder and file name derived from a storage key."""

    grouping: str
    filename: str


@dataclass
class HighlightsResult:
    """Result of a highlights download."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    checkpoint: str | None = None  # New lastSyncDate, None if not advanced
    fetched: bool = True  # False when the key list could not be fetched


@dataclass
class BundleResult:
    """Result of a daily bundle download."""

    date: str
    bundles: int = 0
    succeeded: int = 0
    failed: int = 0
    fetched: bool = True  # False when the bundle list could not be fetched

    @property
    def recorded(self) -> bool:
        """True when the date was processed and belongs in downloadedDates."""
        return self.fetched and self.bundles > 0
