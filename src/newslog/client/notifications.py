"""User-facing notifications for newslog.

This module provides:
- Notification: an ephemeral message for the user
- Native OS notifications (Windows toast, macOS notification center, Linux notify-send)
- ConsoleNotifier: terminal output used by the CLI
"""

from __future__ import annotations

import logging
import platform
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from xml.sax.saxutils import escape

import click

logger = logging.getLogger(__name__)


class NotificationType(Enum):
    """Type of notification."""

    INFO = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass
class Notification:
    """Represents a notification to display."""

    title: str
    message: str
    type: NotificationType = NotificationType.INFO


# Anything that accepts a Notification can observe client and sync failures.
Notifier = Callable[[Notification], object]


def info(message: str) -> Notification:
    """Build an informational notification."""
    return Notification(title="Newslog", message=message, type=NotificationType.INFO)


def warning(message: str) -> Notification:
    """Build a warning notification."""
    return Notification(title="Newslog", message=message, type=NotificationType.WARNING)


def error(message: str) -> Notification:
    """Build an error notification."""
    return Notification(title="Newslog - Error", message=message, type=NotificationType.ERROR)


class ConsoleNotifier:
    """Print notifications to the terminal.

    Errors and warnings go to stderr. Informational messages can be muted
    with ``quiet``.
    """

    def __init__(self, quiet: bool = False) -> None:
        self._quiet = quiet

    def __call__(self, notification: Notification) -> None:
        if notification.type == NotificationType.ERROR:
            click.echo(click.style(notification.message, fg="red"), err=True)
        elif notification.type == NotificationType.WARNING:
            click.echo(click.style(notification.message, fg="yellow"), err=True)
        elif not self._quiet:
            click.echo(notification.message)


# Single-binding toast, shown under the "Newslog" app id
_TOAST_XML = (
    '<toast><visual><binding template="ToastText02">'
    '<text id="1">{title}</text><text id="2">{message}</text>'
    "</binding></visual></toast>"
)

_TOAST_SCRIPT = (
    "$null = [Windows.UI.Notifications.ToastNotificationManager, "
    "Windows.UI.Notifications, ContentType = WindowsRuntime]; "
    "$xml = New-Object Windows.Data.Xml.Dom.XmlDocument; "
    "$xml.LoadXml('{xml}'); "
    "[Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier('Newslog')"
    ".Show([Windows.UI.Notifications.ToastNotification]::new($xml))"
)


def _toast_command(notification: Notification) -> list[str]:
    xml = _TOAST_XML.format(
        title=escape(notification.title),
        message=escape(notification.message),
    )
    # Single quotes are doubled inside a PowerShell literal string
    script = _TOAST_SCRIPT.format(xml=xml.replace("'", "''"))
    return ["powershell", "-NoProfile", "-ExecutionPolicy", "Bypass", "-Command", script]


def _osascript_command(notification: Notification) -> list[str]:
    title = notification.title.replace('"', '\\"')
    message = notification.message.replace('"', '\\"')
    return ["osascript", "-e", f'display notification "{message}" with title "{title}"']


def _notify_send_command(notification: Notification) -> list[str]:
    urgency = "critical" if notification.type == NotificationType.ERROR else "normal"
    return [
        "notify-send",
        "--urgency", urgency,
        "--app-name", "Newslog",
        notification.title,
        notification.message,
    ]


_COMMANDS: dict[str, Callable[[Notification], list[str]]] = {
    "Windows": _toast_command,
    "Darwin": _osascript_command,
    "Linux": _notify_send_command,
}


def send_notification(notification: Notification) -> bool:
    """Send a desktop notification.

    Uses the native notifier of the platform: a PowerShell toast on Windows,
    osascript on macOS and notify-send on Linux.

    Args:
        notification: The notification to send.

    Returns:
        True if notification was sent, False if failed or unavailable.
    """
    system = platform.system()
    build = _COMMANDS.get(system)
    if build is None:
        logger.warning(f"Notifications not supported on {system}")
        return False

    command = build(notification)
    try:
        subprocess.run(command, capture_output=True, check=True)
    except FileNotFoundError:
        logger.debug(f"{command[0]} not found")
        return False
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"{system} notification failed: {e}")
        return False
    return True


def notify_sync_complete(succeeded: int, failed: int) -> bool:
    """Send a download complete notification.

    Args:
        succeeded: Number of files written to the vault.
        failed: Number of files that could not be downloaded.

    Returns:
        True if notification was sent.
    """
    if succeeded == 0 and failed == 0:
        return False

    return send_notification(Notification(
        title="Newslog - Download Complete",
        message=f"{succeeded} downloaded, {failed} failed",
        type=NotificationType.ERROR if failed and not succeeded else NotificationType.INFO,
    ))


def notify_error(message: str) -> bool:
    """Send an error notification.

    Args:
        message: Error message.

    Returns:
        True if notification was sent.
    """
    return send_notification(error(message))
