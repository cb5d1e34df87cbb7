"""Newslog - Sync reading highlights and daily bundles into a notes vault."""

__version__ = "0.1.0"
