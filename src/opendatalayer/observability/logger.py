"""Structured JSON logging with event correlation.

Uses structlog for structured logging with JSON or console output.
While an event is being pushed through the pipeline, every log entry,
from structlog or plain ``logging``, carries its ``event_id`` and ``event_name``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import IO, Any

import structlog

# (event_id, event_name) of the event currently in the pipeline
_current_event: ContextVar[tuple[str, str] | None] = ContextVar(
    "current_event", default=None
)


def get_current_event() -> tuple[str, str] | None:
    """Return ``(event_id, event_name)`` of the event being pushed, if any."""
    return _current_event.get()


@contextmanager
def bind_event(event_id: str, event_name: str) -> Iterator[None]:
    """Mark *event_id* as the event in flight for the duration of the block.

    Nested pushes restore the outer binding on exit.
    """
    token = _current_event.set((event_id, event_name))
    try:
        yield
    finally:
        _current_event.reset(token)


def _add_event(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add the in-flight event id and name."""
    current = _current_event.get()
    if current is not None:
        event_dict.setdefault("event_id", current[0])
        event_dict.setdefault("event_name", current[1])
    return event_dict


_HANDLER_NAME = "opendatalayer"


def _shared_processors() -> list[Any]:
    """Processors applied to structlog and plain ``logging`` records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        _add_event,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    stream: IO[str] | None = None,
) -> None:
    """Route structlog and stdlib logging through one structured handler.

    Library modules log with ``logging.getLogger(__name__)``; their records
    pass through the same processors as structlog entries, so both carry
    the in-flight ``event_id`` / ``event_name``.  Calling this again
    replaces the handler installed by the previous call.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for machine-readable lines, "console" for development.
        stream: Destination; ``sys.stderr`` at call time when omitted.
    """
    shared = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    final: list[Any] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if format == "json":
        final += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final.append(structlog.dev.ConsoleRenderer())

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared, processors=final)
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
