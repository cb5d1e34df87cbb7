"""Shared types for newslog."""

from __future__ import annotations

from enum import Enum


class NodeKind(str, Enum):
    """Kind of object found at a vault path."""

    FILE = "file"
    FOLDER = "folder"


class WriteOutcome(str, Enum):
    """What happened when an artifact was written to the vault."""

    CREATED = "created"
    UPDATED = "updated"
