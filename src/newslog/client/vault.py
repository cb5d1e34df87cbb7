"""Local vault storage for downloaded notes.

This module provides:
- Vault: abstract hierarchical store queried by path
- LocalVault: filesystem implementation rooted at a directory
- write_artifact: overwrite-on-exists write policy shared by the sync flows

Paths are vault-relative POSIX strings ("Highlights/2024-01-01/article.md").
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from newslog.core.types import NodeKind, WriteOutcome

logger = logging.getLogger(__name__)


class VaultError(Exception):
    """Raised when a vault path is invalid or occupied by the wrong kind of node."""


def join_path(*parts: str) -> str:
    """Join vault path segments, dropping empty ones.

    Args:
        *parts: Path fragments, each possibly containing slashes.

    Returns:
        Normalized relative path ("" for the vault root).
    """
    segments: list[str] = []
    for part in parts:
        segments.extend(s for s in part.replace("\\", "/").split("/") if s and s != ".")
    return "/".join(segments)


class Vault(ABC):
    """Abstract interface for the note store."""

    @abstractmethod
    def exists(self, path: str) -> NodeKind | None:
        """Check what occupies a path.

        Args:
            path: Vault-relative path.

        Returns:
            NodeKind of the node, or None if nothing is there.
        """

    @abstractmethod
    def create_folder(self, path: str) -> None:
        """Create a folder (and its parents) if it does not exist.

        Raises:
            VaultError: If a file occupies the path.
        """

    @abstractmethod
    def create_file(self, path: str, content: str) -> None:
        """Create a new file.

        Raises:
            VaultError: If anything already exists at the path.
        """

    @abstractmethod
    def overwrite(self, path: str, content: str) -> None:
        """Replace the content of an existing file.

        Raises:
            VaultError: If no file exists at the path.
        """


class LocalVault(Vault):
    """Vault backed by a directory on the local filesystem."""

    def __init__(self, base_path: Path | str) -> None:
        """Initialize the vault.

        Args:
            base_path: Root directory of the vault.
        """
        self._base_path = Path(base_path).expanduser().resolve()

    @property
    def base_path(self) -> Path:
        """Get the vault root directory."""
        return self._base_path

    def _resolve(self, path: str) -> Path:
        """Map a vault path to a filesystem path inside the root."""
        relative = PurePosixPath(join_path(path))
        if ".." in relative.parts:
            raise VaultError(f"Path escapes the vault: {path}")
        return self._base_path.joinpath(*relative.parts)

    def exists(self, path: str) -> NodeKind | None:
        target = self._resolve(path)
        if target.is_dir():
            return NodeKind.FOLDER
        if target.exists():
            return NodeKind.FILE
        return None

    def create_folder(self, path: str) -> None:
        target = self._resolve(path)
        if target.exists() and not target.is_dir():
            raise VaultError(f"Path {path} exists but is not a folder")
        if not target.exists():
            target.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created folder: {path}")

    def create_file(self, path: str, content: str) -> None:
        target = self._resolve(path)
        if target.exists():
            raise VaultError(f"Path {path} already exists")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def overwrite(self, path: str, content: str) -> None:
        target = self._resolve(path)
        if not target.is_file():
            raise VaultError(f"No file to overwrite at {path}")
        target.write_text(content, encoding="utf-8")


def write_artifact(vault: Vault, path: str, content: str) -> WriteOutcome:
    """Write a downloaded file, overwriting an existing one.

    Args:
        vault: Target vault.
        path: Vault-relative file path.
        content: Text content.

    Returns:
        CREATED for a new file, UPDATED when an existing file was replaced.

    Raises:
        VaultError: If a folder occupies the path.
    """
    kind = vault.exists(path)
    if kind is NodeKind.FILE:
        vault.overwrite(path, content)
        logger.info(f"Updated existing file: {path}")
        return WriteOutcome.UPDATED
    if kind is NodeKind.FOLDER:
        raise VaultError(f"Path {path} exists but is not a file")
    vault.create_file(path, content)
    logger.info(f"Created new file: {path}")
    return WriteOutcome.CREATED
