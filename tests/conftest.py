"""Shared pytest fixtures for newslog tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from newslog.client.api import NewslogClient
from newslog.client.notifications import Notification
from newslog.client.settings import Settings, SettingsStore
from newslog.client.vault import LocalVault
from newslog.core.config import ServerConfig

SERVER_URL = "http://test"


@pytest.fixture(autouse=True)
def fake_keyring() -> Generator[MagicMock, None, None]:
    """Keep tests away from the real OS keyring."""
    with patch("newslog.client.settings.keyring") as mock_keyring:
        mock_keyring.get_password.return_value = None
        yield mock_keyring


@pytest.fixture
def api_url() -> Callable[..., str]:
    """Build a full API URL with query parameters."""

    def _build(endpoint: str, **params: str) -> str:
        return str(httpx.URL(f"{SERVER_URL}{endpoint}", params=params))

    return _build


@pytest.fixture
def server_config() -> ServerConfig:
    """Connection settings with a valid identity."""
    return ServerConfig(username="u1", api_key="secret", server_url=SERVER_URL)


@pytest.fixture
def notices() -> list[Notification]:
    """Collect notifications sent by the code under test."""
    return []


@pytest.fixture
def client(
    server_config: ServerConfig, notices: list[Notification]
) -> Generator[NewslogClient, None, None]:
    """HTTP client reporting into ``notices``."""
    with NewslogClient(server_config, notify=notices.append) as c:
        yield c


@pytest.fixture
def vault(tmp_path: Path) -> LocalVault:
    """Empty vault directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return LocalVault(root)


@pytest.fixture
def store(tmp_path: Path) -> SettingsStore:
    """Settings store in a temp directory."""
    return SettingsStore(tmp_path / "config" / "config.json")


@pytest.fixture
def settings(vault: LocalVault) -> Settings:
    """Configured settings pointing at the test vault."""
    return Settings(
        username="u1",
        api_key="secret",
        output_folder_path="Highlights",
        bundle_folder_path="Bundles",
        vault_path=str(vault.base_path),
        server_url=SERVER_URL,
    )
