"""Synchronous event bus for simulation lifecycle events.

The controller publishes domain events (generation completed, mutation
activated, simulation completed, ...) here. The UI layer, the backend and
tests subscribe to react to them without the engine knowing who listens.

Dispatch is synchronous and in registration order, which keeps event
delivery deterministic alongside the seeded simulation.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventBus:
    """Dispatches events to handlers registered for their exact type.

    Example:
        bus = EventBus()
        bus.subscribe(SimulationCompletedEvent, show_dialog)
        bus.emit(SimulationCompletedEvent(reason="extinction", generation=12, live_count=0))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = defaultdict(list)

    def emit(self, event: object) -> int:
        """Deliver ``event`` to every handler subscribed to its type.

        Returns:
            Number of handlers the event was delivered to
        """
        handlers = self._handlers.get(type(event))
        if not handlers:
            return 0
        for handler in list(handlers):
            handler(event)
        return len(handlers)

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> bool:
        """Remove a handler.

        Returns:
            True if the handler was registered and has been removed
        """
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def subscriber_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, []))

    def clear_subscribers(self) -> None:
        logger.debug("EventBus: clearing %d event types", len(self._handlers))
        self._handlers.clear()
