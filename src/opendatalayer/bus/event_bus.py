"""In-process event bus with wildcard pattern subscriptions.

Patterns
--------
- ``"*"`` matches every event name.
- ``"ns.*"`` matches names whose literal prefix is ``"ns."``
  (``"eco.*"`` does not match ``"ecommerce.purchase"``).
- Anything else is an exact match.

Handlers are called synchronously, in subscription order.  A handler that
raises is logged and counted, and never blocks the remaining handlers or the
caller of ``emit()``.

``emit()`` dispatches over the subscriptions that existed when it started:
handlers added during an emit first see the next event, and handlers removed
during an emit still receive the event in flight.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass

from opendatalayer.core.events import Event

logger = logging.getLogger(__name__)

EventHandler = Callable[[Event], None]
HandlerErrorCallback = Callable[[str, Event, Exception], None]


def match_pattern(pattern: str, event_name: str) -> bool:
    """Return True when *event_name* matches the subscription *pattern*."""
    if pattern == "*":
        return True
    if pattern.endswith(".*"):
        return event_name.startswith(pattern[:-1])
    return pattern == event_name


@dataclass(eq=False)
class _Subscription:
    pattern: str
    handler: EventHandler


class EventBus:
    """Synchronous wildcard publish/subscribe.

    Parameters
    ----------
    on_handler_error
        Optional callback ``(pattern, event, exc)`` invoked when a handler
        raises.  Useful for external metrics.  Errors raised by the callback
        itself are logged and dropped.
    """

    def __init__(
        self,
        on_handler_error: HandlerErrorCallback | None = None,
    ) -> None:
        self._subscriptions: list[_Subscription] = []
        self._on_handler_error = on_handler_error
        self._error_counts: dict[str, int] = defaultdict(int)

    # -- Core API ----------------------------------------------------------

    def on(self, pattern: str, handler: EventHandler) -> Callable[[], None]:
        """Subscribe *handler* to *pattern*.

        Returns an unsubscribe callable.  Calling it more than once is safe;
        it only ever removes the subscription it was created for.
        """
        subscription = _Subscription(pattern, handler)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            self._remove(subscription)

        return unsubscribe

    def off(self, pattern: str, handler: EventHandler) -> None:
        """Remove one subscription of *handler* under exactly *pattern*."""
        for subscription in self._subscriptions:
            if subscription.pattern == pattern and subscription.handler == handler:
                self._remove(subscription)
                return

    def emit(self, event: Event) -> None:
        """Deliver *event* to every handler whose pattern matches its name."""
        for subscription in list(self._subscriptions):
            if not match_pattern(subscription.pattern, event.event):
                continue
            try:
                subscription.handler(event)
            except Exception as exc:
                self._error_counts[subscription.pattern] += 1
                logger.exception(
                    "Handler error on pattern=%s event=%s",
                    subscription.pattern,
                    event.event,
                )
                if self._on_handler_error is not None:
                    try:
                        self._on_handler_error(subscription.pattern, event, exc)
                    except Exception:
                        logger.warning(
                            "on_handler_error callback failed",
                            exc_info=True,
                        )

    # -- Observability -----------------------------------------------------

    @property
    def handler_count(self) -> int:
        """Number of live subscriptions."""
        return len(self._subscriptions)

    def get_error_counts(self) -> dict[str, int]:
        """Return per-pattern handler failure counts."""
        return dict(self._error_counts)

    def clear(self) -> None:
        """Drop every subscription and reset error counts."""
        self._subscriptions.clear()
        self._error_counts.clear()

    # -- Internals ---------------------------------------------------------

    def _remove(self, subscription: _Subscription) -> None:
        for index, candidate in enumerate(self._subscriptions):
            if candidate is subscription:
                del self._subscriptions[index]
                return
