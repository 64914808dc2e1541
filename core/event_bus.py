"""
Event bus for configurator events.

Synchronous in-process pub/sub. Handlers run immediately in the publisher's
thread, in subscription order. A failing handler is logged and skipped; it
never breaks the recomputation that published the event.
"""

import logging
from typing import Callable

from core.events import ConfiguratorEvent

logger = logging.getLogger(__name__)


class EventBus:
    """
    In-process event bus keyed by event class name.

    Usage:
        bus = EventBus()
        bus.subscribe("BreakdownUpdated", render_breakdown)
        bus.publish(BreakdownUpdated.create(...))
    """

    def __init__(self):
        self._subscribers: dict[str, list[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable) -> None:
        self._subscribers.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: str, callback: Callable) -> bool:
        """
        Remove a previously subscribed callback.

        Returns:
            True if the callback was subscribed, False otherwise
        """
        callbacks = self._subscribers.get(event_type, [])
        if callback not in callbacks:
            return False
        callbacks.remove(callback)
        return True

    def publish(self, event: ConfiguratorEvent) -> None:
        """
        Deliver an event to every subscriber of its type.

        Handler errors are logged with the event id and swallowed.
        """
        event_type = event.__class__.__name__

        for callback in list(self._subscribers.get(event_type, [])):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (event_id=%s)",
                    getattr(callback, "__name__", repr(callback)),
                    event_type,
                    event.event_id,
                )
