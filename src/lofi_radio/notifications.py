"""Desktop notification helpers for Lofi Radio."""

import asyncio
import shutil
import subprocess
from typing import Literal, Optional, Protocol

from loguru import logger

TIMER_NOTIFICATION_ID = "timer_completed"


def notify(
    title: str, message: str, urgency: Literal["low", "normal", "critical"] = "normal"
) -> bool:
    """
    Show a desktop notification using notify-send.

    Args:
        title: Notification title
        message: Notification message body
        urgency: Urgency level ('low', 'normal', 'critical')

    Returns:
        True if notify-send ran, False if it is unavailable or failed
    """
    if not shutil.which("notify-send"):
        logger.debug("notify-send not available, skipping notification")
        return False

    try:
        subprocess.run(
            [
                "notify-send",
                "--urgency",
                urgency,
                "--app-name",
                "Lofi Radio",
                title,
                message,
            ],
            check=False,
            timeout=2.0,
            capture_output=True,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.warning(f"Failed to show notification: {e}")
        return False
    return True


class NotificationScheduler(Protocol):
    """Delayed notifications keyed by id."""

    def schedule_completion(
        self, after_seconds: float, message: str, notification_id: str = TIMER_NOTIFICATION_ID
    ) -> None: ...

    def cancel_pending(self, notification_id: str = TIMER_NOTIFICATION_ID) -> None: ...

    def deliver_now(self, title: str, message: str) -> None: ...


class DesktopNotifier:
    """NotificationScheduler that fires notify-send from the event loop."""

    def __init__(self, title: str = "Focus Session Complete!", enabled: bool = True):
        self.title = title
        self.enabled = enabled
        self._pending: dict[str, asyncio.TimerHandle] = {}

    @property
    def pending_ids(self) -> list[str]:
        return list(self._pending)

    def schedule_completion(
        self, after_seconds: float, message: str, notification_id: str = TIMER_NOTIFICATION_ID
    ) -> None:
        """Replace any pending notification with the same id.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        self.cancel_pending(notification_id)
        if not self.enabled:
            return

        loop = asyncio.get_running_loop()
        self._pending[notification_id] = loop.call_later(
            max(0.0, after_seconds), self._fire, notification_id, message
        )
        logger.debug(f"Scheduled notification {notification_id} in {after_seconds:.0f}s")

    def cancel_pending(self, notification_id: str = TIMER_NOTIFICATION_ID) -> None:
        handle = self._pending.pop(notification_id, None)
        if handle is not None:
            handle.cancel()
            logger.debug(f"Cancelled notification {notification_id}")

    def deliver_now(self, title: str, message: str) -> None:
        if self.enabled:
            notify(title, message)

    def _fire(self, notification_id: str, message: str) -> None:
        self._pending.pop(notification_id, None)
        notify(self.title, message)

    def close(self) -> None:
        for notification_id in list(self._pending):
            self.cancel_pending(notification_id)


class NullNotifier:
    """NotificationScheduler that does nothing (notifications disabled)."""

    def schedule_completion(
        self, after_seconds: float, message: str, notification_id: Optional[str] = None
    ) -> None:
        pass

    def cancel_pending(self, notification_id: Optional[str] = None) -> None:
        pass

    def deliver_now(self, title: str, message: str) -> None:
        pass
