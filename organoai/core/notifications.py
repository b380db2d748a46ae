"""Local notification side channel.

Notifications are best-effort: a failing notifier is logged and ignored so it
can never hold up a scan.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

SCAN_STARTED = ("Escaneo iniciado", "Procesando imágenes...")
SCAN_COMPLETE = ("Escaneo completo", "Se analizaron todas las imágenes.")


class Notifier(Protocol):
    def show(self, title: str, body: str) -> None:
        ...


class LoggingNotifier:
    """Writes notifications to the log."""

    def show(self, title: str, body: str) -> None:
        logger.info("%s: %s", title, body)


class NullNotifier:
    def show(self, title: str, body: str) -> None:
        pass


def notify(notifier: Notifier, title: str, body: str) -> bool:
    """Send a notification, swallowing any failure. Returns True if sent."""
    try:
        notifier.show(title, body)
        return True
    except Exception as e:
        logger.warning("Notification %r failed: %s", title, e)
        return False
