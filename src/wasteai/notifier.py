"""Single-slot transient notifications with automatic expiry."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from wasteai.session import Notification, Severity

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS: float = 5.0


class Notifier:
    """Holds at most one live notification.

    Showing a new notification cancels the expiry timer of the previous one
    (cancel-and-replace). Timers are scheduled on the running event loop, so
    ``show`` must be called from within a coroutine or loop callback.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        on_change: Callable[[Notification | None], None] | None = None,
    ) -> None:
        self._ttl = ttl
        self._on_change = on_change
        self._current: Notification | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def current(self) -> Notification | None:
        """The notification currently displayed, if any."""
        return self._current

    @property
    def ttl(self) -> float:
        return self._ttl

    def show(self, severity: Severity, text: str) -> Notification:
        """Replace the current notification and restart the expiry timer."""
        self._cancel_timer()
        notification = Notification(severity=Severity(severity), text=text)
        self._set(notification)
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._ttl, self._expire, notification)
        logger.debug("Notification shown (%s): %s", notification.severity, text)
        return notification

    def dismiss(self) -> None:
        """Clear the current notification immediately."""
        self._cancel_timer()
        if self._current is not None:
            self._set(None)

    def _expire(self, notification: Notification) -> None:
        # A stale timer must not clear a newer notification.
        if self._current is not notification:
            return
        self._timer = None
        self._set(None)
        logger.debug("Notification expired: %s", notification.text)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set(self, notification: Notification | None) -> None:
        self._current = notification
        if self._on_change is not None:
            self._on_change(notification)
