"""Synchronous publish/subscribe bus shared by the ShotSolve components."""

import logging
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, List, Optional

from core.interfaces.events import Event, EventType

logger = logging.getLogger(__name__)

Handler = Callable[[Event], None]


class EventBus:
    """Delivers queue, capture and request-state events to listeners.

    The application context creates one bus and passes it to the queue,
    the capture controller and the request state. Handlers run
    synchronously on the publishing thread, in the order they subscribed,
    so a listener always sees changes in the order they happened.

    Example:
        bus = EventBus()
        bus.subscribe(EventType.QUEUE_CHANGED, on_queue_changed)
        queue = ScreenshotQueue(event_bus=bus)
    """

    def __init__(self, max_history: int = 1000):
        """Initialize the bus.

        Args:
            max_history: Number of recent events kept for inspection
        """
        self._handlers: Dict[EventType, List[Handler]] = defaultdict(list)
        self._history: Deque[Event] = deque(maxlen=max_history)

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        """Register ``handler`` for ``event_type``; repeats are ignored."""
        handlers = self._handlers[event_type]
        if handler in handlers:
            return
        handlers.append(handler)
        logger.debug(f"{event_type.value}: {len(handlers)} subscriber(s)")

    def unsubscribe(self, event_type: EventType, handler: Handler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            logger.debug(f"{event_type.value}: {len(handlers)} subscriber(s)")

    def publish(self, event: Event) -> None:
        """Record ``event`` and hand it to every subscriber of its type.

        A handler that raises is logged and skipped; the remaining
        handlers still receive the event.
        """
        self._history.append(event)
        logger.debug(f"{event.source} -> {event.type.value}")

        # Handlers may unsubscribe themselves during delivery
        for handler in tuple(self._handlers.get(event.type, ())):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Handler {getattr(handler, '__qualname__', handler)} failed "
                    f"on {event.type.value}: {e}",
                    exc_info=True
                )

    def get_history(self, event_type: Optional[EventType] = None, limit: int = 100) -> List[Event]:
        """Recent events, newest first.

        Args:
            event_type: Only events of this type (None = all)
            limit: Maximum number of events returned

        Returns:
            Events, most recent first
        """
        matching = [
            event for event in reversed(self._history)
            if event_type is None or event.type == event_type
        ]
        return matching[:limit]

    def clear_history(self) -> None:
        self._history.clear()

    def subscriber_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, ()))
