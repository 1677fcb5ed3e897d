"""Single-slot transient notifications (success / error banners).

Created: 2026-10-19

The channel owns all timing. A notification is VISIBLE for
``display_seconds``, then EXITING for ``exit_seconds`` (the window a
front-end uses for its exit transition), then gone. Showing a new one
replaces the current one and cancels its timer first, so a stale timer
can never clear a newer message. Display components subscribe and only
render ``current``; they call ``dismiss()`` to close early.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_SECONDS = 2.7
DEFAULT_EXIT_SECONDS = 0.3


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class NotificationPhase(str, Enum):
    VISIBLE = "visible"
    EXITING = "exiting"


@dataclass(frozen=True)
class Notification:
    message: str
    kind: NotificationKind
    phase: NotificationPhase = NotificationPhase.VISIBLE


Listener = Callable[[Notification | None], None]


class NotificationChannel:
    """Holds at most one notification and exactly one live timer for it."""

    def __init__(
        self,
        display_seconds: float = DEFAULT_DISPLAY_SECONDS,
        exit_seconds: float = DEFAULT_EXIT_SECONDS,
    ):
        self.display_seconds = display_seconds
        self.exit_seconds = exit_seconds
        self._current: Notification | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._listeners: list[Listener] = []

    @property
    def current(self) -> Notification | None:
        return self._current

    @property
    def pending_timers(self) -> int:
        return 0 if self._timer is None or self._timer.cancelled() else 1

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def show(self, message: str, kind: NotificationKind) -> Notification:
        """Replace whatever is shown with *message* and restart the clock.

        Must be called from within a running event loop.
        """
        loop = asyncio.get_running_loop()
        self._cancel_timer()
        self._current = Notification(message=message, kind=kind)
        self._timer = loop.call_later(self.display_seconds, self._begin_exit)
        logger.debug("Notification (%s): %s", kind.value, message)
        self._publish()
        return self._current

    def success(self, message: str) -> Notification:
        return self.show(message, NotificationKind.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.show(message, NotificationKind.ERROR)

    def dismiss(self) -> None:
        self._cancel_timer()
        if self._current is not None:
            self._current = None
            self._publish()

    # -- timer callbacks --

    def _begin_exit(self) -> None:
        self._timer = None
        if self._current is None:
            return
        self._current = replace(self._current, phase=NotificationPhase.EXITING)
        self._timer = asyncio.get_running_loop().call_later(self.exit_seconds, self._clear)
        self._publish()

    def _clear(self) -> None:
        self._timer = None
        self._current = None
        self._publish()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _publish(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._current)
            except Exception:
                logger.warning("Notification listener failed", exc_info=True)
