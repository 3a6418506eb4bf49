"""Debug plugin: log every delivered event.

Useful during development for watching the event stream in real time.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from opendatalayer.core.events import Event
from opendatalayer.observability.logger import get_logger
from opendatalayer.plugins.types import Plugin

LogFn = Callable[..., Any]


def debug(log: LogFn | None = None, verbose: bool = False) -> Plugin:
    """Create a plugin that logs each event after it has been emitted.

    Args:
        log: Callable invoked as ``log(message, **fields)``.  Defaults to
            ``debug`` on the ``opendatalayer.debug`` structured logger.
        verbose: Also include the event's context snapshot.
    """
    emit = log or get_logger("opendatalayer.debug").debug

    def after_event(event: Event) -> None:
        fields: dict[str, Any] = {
            "id": event.id,
            "timestamp": event.timestamp,
            "namespace": event.namespace,
        }
        if event.data:
            fields["data"] = event.data
        if event.custom_dimensions:
            fields["custom_dimensions"] = event.custom_dimensions
        if verbose and event.context:
            fields["context"] = event.context
        emit(f"[ODL] {event.event}", **fields)

    return Plugin(name="debug", after_event=after_event)
