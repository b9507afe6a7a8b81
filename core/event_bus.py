"""
In-process pub/sub for auth domain events.

Delivery is synchronous: publish() returns after every handler has run.
A failing handler is logged and skipped. The transition that produced the
event has already happened, so the publisher never sees handler errors.
"""

import logging
from typing import Callable

from core.events import AuthEvent

logger = logging.getLogger(__name__)

Handler = Callable[[AuthEvent], None]


class EventBus:
    """
    Routes events to handlers registered under the event's class name.

    Usage:
        bus.subscribe("SessionExpired", on_expired)
        bus.publish(SessionExpired.create(expires_at_ms))
    """

    def __init__(self):
        self._handlers: dict[str, list[Handler]] = {}

    def subscribe(self, event_type: str, handler: Handler) -> None:
        """Register handler for the exact class name event_type (no subclass matching)."""
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: AuthEvent) -> None:
        """Run every handler for this event's type, in subscription order."""
        event_type = type(event).__name__

        # Copy: handlers may unsubscribe themselves while being called
        for handler in list(self._handlers.get(event_type, ())):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (event_id=%s)",
                    getattr(handler, "__name__", repr(handler)),
                    event_type,
                    event.event_id,
                )
