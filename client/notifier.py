import asyncio
import logging
from typing import Set
from plyer import notification

logger = logging.getLogger(__name__)

APP_NAME = "TaskMeUp"

class DesktopNotifier:
    """
    Local delivery collaborator backed by plyer.

    A notification whose tag is still being shown is coalesced: the second
    display() call returns False without showing anything.
    """

    def __init__(self, timeout_seconds: int = 10) -> None:
        self._timeout = timeout_seconds
        self._in_flight: Set[str] = set()

    async def display(self, title: str, body: str, tag: str) -> bool:
        if tag in self._in_flight:
            logger.debug(f"Notification '{tag}' already in flight, coalescing")
            return False

        self._in_flight.add(tag)
        try:
            await asyncio.to_thread(
                notification.notify,
                title=title,
                message=body,
                app_name=APP_NAME,
                timeout=self._timeout,
            )
            return True
        except Exception:
            # plyer raises backend-specific errors (NotImplementedError, dbus, ...)
            logger.exception(f"Desktop notification failed: {title}")
            return False
        finally:
            self._in_flight.discard(tag)
