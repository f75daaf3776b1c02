"""Notifications - Transient banners raised by user actions.

Only the latest banner is kept. It disappears on its own once its
duration has passed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from ..core.models import Notification, Severity


logger = logging.getLogger(__name__)

DISMISS_AFTER = timedelta(seconds=3)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Notifier:
    """Holds the current banner, evaluated against a clock."""

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        duration: timedelta = DISMISS_AFTER,
    ) -> None:
        self._clock = clock
        self._duration = duration
        self._current: Notification | None = None

    def show(self, message: str, severity: Severity = "default") -> Notification:
        """Replace the banner with a new message."""
        self._current = Notification(
            message=message,
            severity=severity,
            shown_at=self._clock(),
            duration=self._duration,
        )
        logger.debug("Notification (%s): %s", severity, message)
        return self._current

    def current(self) -> Notification | None:
        """The banner still on screen, if any."""
        if self._current is None:
            return None
        if self._clock() - self._current.shown_at >= self._current.duration:
            self._current = None
        return self._current

    def dismiss(self) -> None:
        self._current = None
