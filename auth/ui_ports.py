"""
Hand-offs to the UI layer: navigation and transient notices.

The auth workflow never renders anything. It tells a Navigator where the
user should be and a Notifier what to flash, and the UI layer reads both
back (see api/routes.py GET /ui).
"""

import logging
from typing import Protocol

from auth.types import Notice, NoticeKind
from core.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    def go_to(self, route: str) -> None:
        ...


class Notifier(Protocol):
    def show_transient(
        self,
        kind: NoticeKind,
        message: str,
        duration_ms: int,
        title: str = "",
    ) -> None:
        ...


class RouteTracker:
    """Navigator that records the current route and history."""

    def __init__(self, initial_route: str = "/"):
        self.current_route = initial_route
        self.history: list[str] = [initial_route]

    def go_to(self, route: str) -> None:
        logger.info(f"Navigating to {route}")
        self.current_route = route
        self.history.append(route)


class NoticeBoard:
    """Notifier holding notices until their duration elapses."""

    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._notices: list[tuple[Notice, TimerHandle]] = []

    def show_transient(
        self,
        kind: NoticeKind,
        message: str,
        duration_ms: int,
        title: str = "",
    ) -> None:
        notice = Notice(
            kind=kind,
            title=title or kind.value.title(),
            message=message,
            duration_ms=duration_ms,
            shown_at_ms=self._scheduler.now_ms(),
        )
        timer = self._scheduler.schedule_once(duration_ms, lambda: self._dismiss(notice))
        self._notices.append((notice, timer))
        logger.info(f"Notice shown ({kind.value}): {message}")

    def _dismiss(self, notice: Notice) -> None:
        self._notices = [(n, t) for n, t in self._notices if n is not notice]

    def active(self) -> list[Notice]:
        """Notices currently visible, oldest first."""
        return [notice for notice, _ in self._notices]

    def clear(self) -> None:
        """Drop all notices and cancel their dismissal timers."""
        for _, timer in self._notices:
            timer.cancel()
        self._notices = []
