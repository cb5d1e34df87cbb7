"""HTTP client for the Newslog service API.

This module provides:
- NewslogClient: HTTP client for the clippings and highlights endpoints
- Presigned URL transfers (upload and download)
- Bundle, BundleFile: daily bundle metadata

Every operation is non-throwing. Failures are reported to the notifier and
the operation returns None (or False for uploads).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import httpx

from newslog.client.notifications import Notifier, error, info, send_notification
from newslog.core.config import ServerConfig

logger = logging.getLogger(__name__)

MISSING_IDENTITY = "Username or API Key not configured in settings."


class MalformedResponseError(Exception):
    """The server answered 200 with an unexpected body."""


@dataclass
class BundleFile:
    """A single downloadable file of a daily bundle."""

    filename: str
    url: str
    content: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BundleFile:
        """Create from API response dictionary.

        Raises:
            MalformedResponseError: If ``filename`` or ``url`` is not a string.
        """
        filename = _require(data, "filename", str)
        url = _require(data, "url", str)
        content = data.get("content")
        return cls(
            filename=filename,
            url=url,
            content=content if isinstance(content, str) else "",
        )


@dataclass
class Bundle:
    """A named group of files for one date."""

    folder_name: str
    files: list[BundleFile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Bundle:
        """Create from API response dictionary.

        Raises:
            MalformedResponseError: If the folder name or a file entry is invalid.
        """
        folder_name = _require(data, "bundle_folder_name", str)
        files = data.get("files") or []
        if not isinstance(files, list):
            raise MalformedResponseError("'files' is not a list")
        return cls(
            folder_name=folder_name,
            files=[BundleFile.from_dict(f) for f in files],
        )


def _redact(url: str) -> str:
    """Strip the query string (presigned signature) from a URL for logging."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}{parts.path}"


def _require(data: Any, key: str, kind: type) -> Any:
    """Extract a typed field from a JSON object or raise MalformedResponseError."""
    if not isinstance(data, dict) or not isinstance(data.get(key), kind):
        raise MalformedResponseError(f"'{key}' missing or invalid in response")
    return data[key]


class NewslogClient:
    """HTTP client for the Newslog service."""

    def __init__(
        self,
        config: ServerConfig,
        notify: Notifier = send_notification,
    ) -> None:
        """Initialize the client.

        Args:
            config: Server connection settings and identity.
            notify: Observer receiving user-facing messages.
        """
        self._config = config
        self._notify = notify
        self._client = httpx.Client(
            base_url=config.server_url,
            timeout=config.timeout,
            verify=config.verify_ssl,
        )
        # Presigned URLs carry their own authorization
        self._transfer = httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
        )

    @property
    def config(self) -> ServerConfig:
        """Get the connection settings."""
        return self._config

    def close(self) -> None:
        """Close the HTTP clients."""
        self._client.close()
        self._transfer.close()

    def __enter__(self) -> NewslogClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def _check_identity(self) -> bool:
        if self._config.has_identity:
            return True
        self._notify(error(MISSING_IDENTITY))
        return False

    def _request(
        self,
        endpoint: str,
        params: dict[str, str | None] | None = None,
        notice: str = "",
    ) -> Any | None:
        """Make an authenticated GET request and return the decoded JSON.

        Args:
            endpoint: API path (e.g. "/clippings/get-upload-url").
            params: Query parameters. Empty values are dropped.
            notice: Message shown to the user before the request, if any.

        Returns:
            Decoded JSON body, or None if the request failed.
        """
        if not self._check_identity():
            return None

        query = {k: v for k, v in (params or {}).items() if v}
        logger.debug(f"Requesting {endpoint} with params {sorted(query)}")
        if notice:
            self._notify(info(notice))

        try:
            response = self._client.get(
                endpoint,
                params=query,
                headers=self._config.identity_headers,
            )
        except httpx.HTTPError as e:
            logger.error(f"Network error from {endpoint}: {e}")
            self._notify(error("Network error. See log for details."))
            return None

        if response.status_code != 200:
            logger.error(f"Error from {endpoint}: {response.status_code} {response.text}")
            self._notify(error(f"Server error: {response.status_code}. See log for details."))
            return None

        try:
            return response.json()
        except ValueError:
            logger.error(f"Invalid JSON from {endpoint}: {response.text[:200]}")
            self._notify(error("Server returned an invalid response."))
            return None

    # === Upload ===

    def request_upload_url(self, filename: str) -> str | None:
        """Get a presigned URL for uploading a clippings file.

        Args:
            filename: Name of the file to upload.

        Returns:
            Presigned upload URL, or None on failure.
        """
        if not self._check_identity():
            return None
        if not filename or not filename.strip():
            self._notify(error("Filename is empty."))
            return None

        data = self._request(
            "/clippings/get-upload-url",
            params={"fileName": filename},
            notice=f"Requesting upload URL for {filename}...",
        )
        if data is None:
            return None
        try:
            url: str = _require(data, "uploadUrl", str)
        except MalformedResponseError as e:
            logger.error(f"Upload URL not found in response: {e}")
            self._notify(error("Error: Upload URL not provided by server."))
            return None
        logger.info("Received upload URL")
        return url

    def put_content(
        self,
        url: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> bool:
        """Upload raw bytes to a presigned URL.

        Args:
            url: Presigned upload URL.
            data: File content.
            content_type: MIME type sent as Content-Type.

        Returns:
            True if the server answered 200.
        """
        if not self._check_identity():
            return False

        logger.info(f"Uploading {len(data)} bytes to {_redact(url)}")
        try:
            response = self._transfer.put(
                url,
                content=data,
                headers={"Content-Type": content_type or "application/octet-stream"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Network error uploading file: {e}")
            self._notify(error("Network error uploading file. See log for details."))
            return False

        if response.status_code != 200:
            logger.error(f"Error uploading file: {response.status_code} {response.text}")
            self._notify(error(f"Error uploading file: {response.status_code}. See log for details."))
            return False
        return True

    # === Highlights ===

    def list_changed_item_keys(self, since: str | None = None) -> list[str] | None:
        """List highlighted article keys changed since a checkpoint.

        Args:
            since: ISO timestamp of the last sync. None requests the full set.

        Returns:
            List of storage keys, or None on failure.
        """
        data = self._request(
            "/clippings/highlights/list",
            params={"lastSync": since},
            notice="Fetching list of highlighted articles...",
        )
        if data is None:
            return None
        try:
            keys = _require(data, "s3Keys", list)
            if not all(isinstance(k, str) for k in keys):
                raise MalformedResponseError("'s3Keys' must contain strings")
        except MalformedResponseError as e:
            logger.error(f"Keys not found in response or invalid format: {e}")
            self._notify(error("Error: Keys not provided by server or invalid format."))
            return None
        logger.info(f"Received {len(keys)} highlighted article keys")
        return list(keys)

    def request_download_url(self, key: str) -> str | None:
        """Get a presigned URL for downloading one highlighted article.

        Args:
            key: Storage key (e.g. "user_id/highlights/2024-01-01/article.md").

        Returns:
            Presigned download URL, or None on failure.
        """
        if not self._check_identity():
            return None
        if not key or not key.strip():
            self._notify(error("Key is empty for download."))
            return None

        # Called in a loop, so no notice
        data = self._request("/clippings/highlights/download", params={"s3Key": key})
        if data is None:
            return None
        try:
            url: str = _require(data, "downloadUrl", str)
        except MalformedResponseError as e:
            logger.error(f"Download URL not found in response for {key}: {e}")
            self._notify(error("Error: Download URL not provided by server."))
            return None
        return url

    def get_content(self, url: str) -> str | None:
        """Download text content from a presigned URL.

        Args:
            url: Presigned download URL.

        Returns:
            File content, or None on failure.
        """
        if not self._check_identity():
            return None

        logger.debug(f"Downloading file content from {_redact(url)}")
        try:
            response = self._transfer.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Network error downloading file content: {e}")
            self._notify(error("Network error downloading file content. See log for details."))
            return None

        if response.status_code != 200:
            logger.error(f"Error downloading file content: {response.status_code} {response.text}")
            self._notify(error(f"Error downloading file content: {response.status_code}. See log for details."))
            return None
        return response.text

    # === Daily bundles ===

    def list_daily_bundles(self, date: str) -> list[Bundle] | None:
        """Get the bundles published for a date.

        Args:
            date: Target date in "YYYY-MM-DD" format.

        Returns:
            List of bundles, or None on failure.
        """
        if not self._check_identity():
            return None
        if not date:
            self._notify(error("Date is missing."))
            return None

        data = self._request(
            "/clippings/daily-bundle",
            params={"date": date},
            notice=f"Fetching newslog bundle for {date}...",
        )
        if data is None:
            return None
        try:
            raw = _require(data, "bundles", list)
            bundles = [Bundle.from_dict(b) for b in raw]
        except MalformedResponseError as e:
            logger.error(f"Bundles not found in response or invalid format: {e}")
            self._notify(error("Error: Bundles not provided by server or invalid format."))
            return None
        logger.info(f"Received {len(bundles)} bundles for {date}")
        return bundles
