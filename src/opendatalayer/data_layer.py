"""Data layer — event storage, event bus, middleware and ambient context.

``push()`` is the only way events come into existence:

1. Build the event (id, timestamp, spec version).
2. Attach a snapshot of the current context.
3. Run it through the middleware pipeline.
4. If the chain completes, append it to the log and emit it on the bus.
5. Return the event, whether or not it was stored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from opendatalayer.bus.event_bus import EventBus, EventHandler
from opendatalayer.context.manager import ContextManager
from opendatalayer.core.events import CustomDimensionValue, Event, EventSource
from opendatalayer.observability.logger import bind_event
from opendatalayer.pipeline.middleware import MiddlewareFn, MiddlewarePipeline

logger = logging.getLogger(__name__)


class DataLayer:
    """Composes context, middleware and pub-sub around an in-memory event log.

    Parameters
    ----------
    source
        Optional application metadata copied onto every event.
    """

    def __init__(self, source: EventSource | None = None) -> None:
        self._events: list[Event] = []
        self._bus = EventBus()
        self._middleware = MiddlewarePipeline()
        self._context = ContextManager()
        self._source = source

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def push(
        self,
        event_name: str,
        data: dict[str, Any] | None = None,
        custom_dimensions: dict[str, CustomDimensionValue] | None = None,
    ) -> Event:
        """Create, process, store and emit an event.

        If a middleware stops the chain the event is neither stored nor
        emitted, but it is still returned as it was when the chain stopped.
        Callers that need to know whether it was delivered must look at
        ``get_events()`` or their subscriptions.
        """
        fields: dict[str, Any] = {
            "event": event_name,
            "context": self._context.snapshot(),
        }
        if data is not None:
            fields["data"] = data
        if custom_dimensions is not None:
            fields["custom_dimensions"] = custom_dimensions
        if self._source is not None:
            fields["source"] = self._source.model_copy()
        event = Event(**fields)

        delivered = False

        def store_and_emit(processed: Event) -> None:
            nonlocal delivered
            delivered = True
            self._events.append(processed)
            self._bus.emit(processed)

        with bind_event(event.id, event_name):
            self._middleware.execute(event, store_and_emit)
            if not delivered:
                logger.debug("Event %s dropped by middleware", event_name)
        return event

    def get_events(self) -> list[Event]:
        """Return the stored events in insertion order (a copy of the log)."""
        return list(self._events)

    def get_last_event(self) -> Event | None:
        """Return the most recently stored event, or None if there is none."""
        return self._events[-1] if self._events else None

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def on(self, pattern: str, handler: EventHandler) -> Callable[[], None]:
        """Subscribe to stored events matching *pattern*.

        Returns an unsubscribe callable.
        """
        return self._bus.on(pattern, handler)

    def off(self, pattern: str, handler: EventHandler) -> None:
        self._bus.off(pattern, handler)

    # ------------------------------------------------------------------
    # Middleware
    # ------------------------------------------------------------------

    def use(self, fn: MiddlewareFn) -> None:
        """Append a middleware function to the pipeline."""
        self._middleware.use(fn)

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def get_context(self) -> dict[str, Any]:
        return self._context.get()

    def set_context(self, key: str, value: Any) -> None:
        self._context.set(key, value)

    def update_context(self, key: str, partial: Any) -> None:
        self._context.update(key, partial)

    def remove_context(self, key: str) -> None:
        self._context.remove(key)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Clear stored events and context.  Middleware and subscriptions stay."""
        self._events.clear()
        self._context.reset()
