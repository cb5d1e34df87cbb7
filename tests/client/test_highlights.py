"""Tests for the highlights download flow."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from newslog.client.api import NewslogClient
from newslog.client.notifications import Notification
from newslog.client.settings import Settings, SettingsStore
from newslog.client.sync import HighlightLocation, HighlightsSync, parse_highlight_key
from newslog.client.vault import LocalVault

NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)
NOW_STAMP = "2024-03-01T12:00:00.000Z"


class TestParseHighlightKey:
    """Tests for storage key parsing."""

    def test_grouping_and_filename(self) -> None:
        assert parse_highlight_key("u1/highlights/2024-01-01/article.md") == HighlightLocation(
            grouping="2024-01-01", filename="article.md"
        )

    def test_deeper_keys_use_last_two_segments(self) -> None:
        location = parse_highlight_key("u1/highlights/x/2024-01-01/article.md")
        assert location == HighlightLocation(grouping="2024-01-01", filename="article.md")

    @pytest.mark.parametrize(
        "key",
        [
            "a/b.md",
            "u1/highlights/a.md",
            "",
            "u1/highlights/2024-01-01/",
            "u1/h/../a.md",
            "u1/highlights/./a.md",
            "u1/highlights/2024-01-01/.",
        ],
    )
    def test_invalid_keys(self, key: str) -> None:
        assert parse_highlight_key(key) is None


class HighlightsServer:
    """Registers highlight endpoints on httpx_mock."""

    def __init__(self, httpx_mock, api_url: Callable[..., str]) -> None:  # type: ignore[no-untyped-def]
        self.httpx_mock = httpx_mock
        self.api_url = api_url

    def listing(self, keys: list[str], since: str | None = None) -> None:
        params = {"lastSync": since} if since else {}
        self.httpx_mock.add_response(
            url=self.api_url("/clippings/highlights/list", **params),
            json={"s3Keys": keys},
        )

    def item(self, key: str, content: str | None, url_status: int = 200) -> None:
        presigned = f"https://s3.test/{key}?sig=1"
        self.httpx_mock.add_response(
            url=self.api_url("/clippings/highlights/download", s3Key=key),
            status_code=url_status,
            json={"downloadUrl": presigned},
        )
        if url_status != 200:
            return
        if content is None:
            self.httpx_mock.add_response(url=presigned, status_code=403)
        else:
            self.httpx_mock.add_response(url=presigned, text=content)


@pytest.fixture
def server(httpx_mock, api_url: Callable[..., str]) -> HighlightsServer:  # type: ignore[no-untyped-def]
    return HighlightsServer(httpx_mock, api_url)


@pytest.fixture
def flow(
    client: NewslogClient,
    vault: LocalVault,
    store: SettingsStore,
    notices: list[Notification],
) -> HighlightsSync:
    return HighlightsSync(client, vault, store, notices.append)


class TestHighlightsSync:
    """Tests for HighlightsSync.run."""

    def test_downloads_into_grouping_folder(
        self,
        server: HighlightsServer,
        flow: HighlightsSync,
        settings: Settings,
        store: SettingsStore,
        vault: LocalVault,
    ) -> None:
        """Key u1/highlights/2024-01-01/article.md lands in {root}/2024-01-01/article.md."""
        key = "u1/highlights/2024-01-01/article.md"
        server.listing([key])
        server.item(key, "# Article")

        result = flow.run(settings, now=NOW)

        assert (vault.base_path / "Highlights" / "2024-01-01" / "article.md").read_text() == "# Article"
        assert (result.total, result.succeeded, result.failed) == (1, 1, 0)
        assert result.checkpoint == NOW_STAMP
        assert settings.last_sync_date == NOW_STAMP
        assert store.load().last_sync_date == NOW_STAMP

    def test_empty_root_writes_to_vault_root(
        self, server: HighlightsServer, flow: HighlightsSync, settings: Settings, vault: LocalVault
    ) -> None:
        key = "u1/highlights/2024-01-01/article.md"
        settings.output_folder_path = ""
        server.listing([key])
        server.item(key, "x")

        flow.run(settings, now=NOW)

        assert (vault.base_path / "2024-01-01" / "article.md").exists()

    def test_counts_every_key(
        self, server: HighlightsServer, flow: HighlightsSync, settings: Settings, vault: LocalVault
    ) -> None:
        """N keys give exactly N attempts and succeeded + failed == N."""
        keys = [
            "u1/highlights/d1/ok.md",
            "u1/highlights/d1/no-url.md",
            "u1/highlights/d1/no-content.md",
            "a/b.md",
            "u1/highlights/d2/ok2.md",
        ]
        server.listing(keys)
        server.item(keys[0], "one")
        server.item(keys[1], None, url_status=500)
        server.item(keys[2], None)
        server.item(keys[3], "short key")
        server.item(keys[4], "two")

        result = flow.run(settings, now=NOW)

        assert result.total == 5
        assert result.succeeded == 2
        assert result.failed == 3
        assert result.succeeded + result.failed == len(keys)
        assert not (vault.base_path / "Highlights" / "b.md").exists()

    def test_short_key_writes_nothing(
        self, server: HighlightsServer, flow: HighlightsSync, settings: Settings, vault: LocalVault
    ) -> None:
        """A key with fewer than 4 segments fails and no file is written."""
        server.listing(["a/b.md"])
        server.item("a/b.md", "content")

        result = flow.run(settings, now=NOW)

        assert result.failed == 1
        files = [p for p in vault.base_path.rglob("*") if p.is_file()]
        assert files == []

    def test_dot_grouping_writes_nothing(
        self,
        httpx_mock,  # type: ignore[no-untyped-def]
        api_url: Callable[..., str],
        server: HighlightsServer,
        flow: HighlightsSync,
        settings: Settings,
        vault: LocalVault,
    ) -> None:
        """A '.' grouping would collapse into the root folder, so it fails."""
        key = "u1/highlights/./a.md"
        server.listing([key])
        httpx_mock.add_response(
            url=api_url("/clippings/highlights/download", s3Key=key),
            json={"downloadUrl": "https://s3.test/dot?sig=1"},
        )
        httpx_mock.add_response(url="https://s3.test/dot?sig=1", text="content")

        result = flow.run(settings, now=NOW)

        assert (result.succeeded, result.failed) == (0, 1)
        assert not (vault.base_path / "Highlights" / "a.md").exists()

    def test_checkpoint_advances_even_if_all_fail(
        self, server: HighlightsServer, flow: HighlightsSync, settings: Settings, store: SettingsStore
    ) -> None:
        key = "u1/highlights/d/a.md"
        server.listing([key])
        server.item(key, None)

        result = flow.run(settings, now=NOW)

        assert result.succeeded == 0
        assert store.load().last_sync_date == NOW_STAMP

    def test_no_keys_leaves_checkpoint(
        self,
        server: HighlightsServer,
        flow: HighlightsSync,
        settings: Settings,
        store: SettingsStore,
        notices: list[Notification],
    ) -> None:
        """Zero keys: nothing to do, checkpoint unchanged."""
        settings.last_sync_date = "2024-01-01T00:00:00.000Z"
        store.save(settings)
        server.listing([], since="2024-01-01T00:00:00.000Z")

        result = flow.run(settings, now=NOW)

        assert result.total == 0
        assert result.fetched
        assert result.checkpoint is None
        assert store.load().last_sync_date == "2024-01-01T00:00:00.000Z"
        assert any("No highlighted articles" in n.message for n in notices)

    def test_listing_failure_leaves_checkpoint(
        self,
        httpx_mock,  # type: ignore[no-untyped-def]
        api_url: Callable[..., str],
        flow: HighlightsSync,
        settings: Settings,
        store: SettingsStore,
    ) -> None:
        httpx_mock.add_response(url=api_url("/clippings/highlights/list"), status_code=502)

        result = flow.run(settings, now=NOW)

        assert not result.fetched
        assert settings.last_sync_date == ""
        assert not store.path.exists()

    def test_redownload_overwrites(
        self, server: HighlightsServer, flow: HighlightsSync, settings: Settings, vault: LocalVault
    ) -> None:
        """Downloading the same key again replaces the existing file."""
        key = "u1/highlights/2024-01-01/article.md"
        target = vault.base_path / "Highlights" / "2024-01-01" / "article.md"
        target.parent.mkdir(parents=True)
        target.write_text("old highlights")
        server.listing([key])
        server.item(key, "new highlights")

        result = flow.run(settings, now=NOW)

        assert result.succeeded == 1
        assert target.read_text() == "new highlights"

    def test_folder_at_file_path_fails_item(
        self, server: HighlightsServer, flow: HighlightsSync, settings: Settings, vault: LocalVault
    ) -> None:
        """A folder occupying the target path is a per-item failure."""
        key = "u1/highlights/2024-01-01/article.md"
        (vault.base_path / "Highlights" / "2024-01-01" / "article.md").mkdir(parents=True)
        other = "u1/highlights/2024-01-01/other.md"
        server.listing([key, other])
        server.item(key, "x")
        server.item(other, "y")

        result = flow.run(settings, now=NOW)

        assert (result.succeeded, result.failed) == (1, 1)
        assert (vault.base_path / "Highlights" / "2024-01-01" / "other.md").read_text() == "y"

    def test_sends_checkpoint_as_last_sync(
        self, server: HighlightsServer, flow: HighlightsSync, settings: Settings, httpx_mock  # type: ignore[no-untyped-def]
    ) -> None:
        settings.last_sync_date = "2024-02-01T08:30:00.000Z"
        server.listing([], since="2024-02-01T08:30:00.000Z")

        flow.run(settings, now=NOW)

        assert httpx_mock.get_requests()[0].url.params["lastSync"] == "2024-02-01T08:30:00.000Z"
