"""Clippings file upload.

Sends a Kindle "My Clippings.txt" file to the service in two steps:
request a presigned URL, then PUT the bytes to it.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

from newslog.client.api import NewslogClient
from newslog.client.notifications import Notifier, error, info, warning

logger = logging.getLogger(__name__)

CLIPPINGS_FILENAME = "my clippings.txt"


def guess_content_type(path: Path) -> str:
    """Guess the Content-Type of a file from its name."""
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type or "application/octet-stream"


class ClippingsUploader:
    """Uploads a clippings file through a presigned URL."""

    def __init__(self, client: NewslogClient, notify: Notifier) -> None:
        self._client = client
        self._notify = notify

    def upload(self, path: Path) -> bool:
        """Upload a local file.

        Args:
            path: Path to the clippings file.

        Returns:
            True if the file was uploaded.
        """
        path = Path(path)
        if path.name.lower() != CLIPPINGS_FILENAME:
            self._notify(warning('Warning: Selected file is not named "My Clippings.txt"'))

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error(f"Error reading clippings file {path}: {e}")
            self._notify(error(f"Error reading clippings file {path.name}."))
            return False

        upload_url = self._client.request_upload_url(path.name)
        if not upload_url:
            self._notify(error("Failed to get upload URL. See log for details."))
            return False

        self._notify(info(f"Uploading {path.name}..."))
        if not self._client.put_content(upload_url, data, guess_content_type(path)):
            self._notify(error("File upload failed. See log for details."))
            return False

        logger.info(f"Uploaded {path.name} ({len(data)} bytes)")
        self._notify(info(
            f"Successfully uploaded {path.name}! Processing will continue on the server."
        ))
        return True
