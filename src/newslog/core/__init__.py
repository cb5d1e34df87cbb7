"""Core module - Shared configuration and types."""

from newslog.core.config import NEWSLOG_SERVER_URL, ServerConfig
from newslog.core.types import NodeKind, WriteOutcome

__all__ = [
    # Config
    "NEWSLOG_SERVER_URL",
    "ServerConfig",
    # Types
    "NodeKind",
    "WriteOutcome",
]
