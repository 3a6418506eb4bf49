"""Test helpers: an event spy and builders for events and context.

``EventSpy`` patterns differ from bus patterns: ``*`` matches exactly one
dot-free segment and ``**`` matches one or more segments, anywhere in the
pattern (``"ecommerce.*"``, ``"*.view"``, ``"**"``).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from opendatalayer.core.events import Event

if TYPE_CHECKING:
    from opendatalayer.odl import OpenDataLayer


def _pattern_to_regex(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**", i):
            parts.append(".+")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^.]+")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("^" + "".join(parts) + "$")


class EventSpy:
    """Captures events for assertions."""

    def __init__(self) -> None:
        self._events: list[Event] = []
        self._unsubscribe: Callable[[], None] | None = None

    def record(self, event: Event) -> None:
        self._events.append(event)

    def handler(self) -> Callable[[Event], None]:
        """Return a handler suitable for ``odl.on("*", ...)``."""
        return self.record

    def attach(self, odl: OpenDataLayer, pattern: str = "*") -> EventSpy:
        """Subscribe to *odl* and remember how to unsubscribe."""
        self.disconnect()
        self._unsubscribe = odl.on(pattern, self.record)
        return self

    def disconnect(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def get_events(self) -> list[Event]:
        return list(self._events)

    def get_last_event(self) -> Event | None:
        return self._events[-1] if self._events else None

    def get_by_name(self, event_name: str) -> list[Event]:
        return [e for e in self._events if e.event == event_name]

    def get_by_pattern(self, pattern: str) -> list[Event]:
        regex = _pattern_to_regex(pattern)
        return [e for e in self._events if regex.match(e.event)]

    def has_event(self, event_name: str) -> bool:
        return any(e.event == event_name for e in self._events)

    @property
    def count(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        self._events.clear()


def deterministic_uuid(seed: int = 0) -> str:
    """Reproducible UUID v4-formatted string derived from *seed*."""

    def hex8(n: int) -> str:
        return format((n * 2654435761) & 0xFFFFFFFF, "08x")

    a, b, c, d = (hex8(seed + k) for k in range(4))
    variant = format((int(c[4], 16) & 0x3) | 0x8, "x")
    return "-".join([a, b[:4], "4" + c[1:4], variant + c[5:8], d + a[:4]])


def make_event(**overrides: Any) -> Event:
    """Minimal valid event with fixed id and timestamp."""
    fields: dict[str, Any] = {
        "event": "test.event",
        "id": deterministic_uuid(0),
        "timestamp": "2024-01-15T10:30:00.000Z",
    }
    fields.update(overrides)
    return Event(**fields)


def make_page_context(**overrides: Any) -> dict[str, Any]:
    return {
        "url": "https://example.com/products/widget",
        "path": "/products/widget",
        "title": "Widget - Example Store",
        "referrer": "https://example.com/",
        **overrides,
    }


def make_user_context(**overrides: Any) -> dict[str, Any]:
    return {
        "id": "user-12345",
        "anonymousId": deterministic_uuid(10),
        "isAuthenticated": True,
        "traits": {
            "email": "test@example.com",
            "name": "Test User",
            "plan": "premium",
        },
        **overrides,
    }


def make_consent_context(**overrides: Any) -> dict[str, Any]:
    return {
        "status": "granted",
        "purposes": {
            "analytics": True,
            "marketing": True,
            "functional": True,
            "personalization": False,
        },
        "updatedAt": "2024-01-15T10:00:00.000Z",
        **overrides,
    }
