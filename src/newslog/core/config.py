"""Shared configuration classes for newslog.

This module defines the connection settings used by the HTTP client.
"""

from __future__ import annotations

from dataclasses import dataclass

NEWSLOG_SERVER_URL = "https://ifkf2fi17a.execute-api.us-east-2.amazonaws.com"


@dataclass
class ServerConfig:
    """Configuration for connecting to the Newslog service.

    Attributes:
        username: Newslog user identifier, sent as ``x-user-id``.
        api_key: Secret credential, sent as ``x-user-secret``.
        server_url: Base URL of the service.
        timeout: Request timeout in seconds.
        verify_ssl: Whether to verify SSL certificates (default True).
    """

    username: str
    api_key: str
    server_url: str = NEWSLOG_SERVER_URL
    timeout: float = 30.0
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        """Normalize server URL."""
        self.server_url = (self.server_url or NEWSLOG_SERVER_URL).rstrip("/")

    @property
    def has_identity(self) -> bool:
        """Check that both the username and the API key are set."""
        return bool(self.username) and bool(self.api_key)

    @property
    def identity_headers(self) -> dict[str, str]:
        """Get the headers that authenticate a request.

        Returns:
            Header mapping with user id and secret.
        """
        return {
            "x-user-id": self.username,
            "x-user-secret": self.api_key,
        }
