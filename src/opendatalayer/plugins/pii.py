"""PII filter plugin: scrub event payloads before they are stored."""

from __future__ import annotations

from collections.abc import Iterable

from opendatalayer.core.events import Event
from opendatalayer.plugins.types import Plugin
from opendatalayer.utils.sanitize import sanitize_string, strip_pii


def pii_filter(
    fields: Iterable[str] | None = None,
    max_string_length: int | None = None,
) -> Plugin:
    """Create a plugin that removes PII keys from ``event.data``.

    Args:
        fields: Keys to strip (case-insensitive).  Defaults to
            ``DEFAULT_PII_FIELDS``.
        max_string_length: When set, top-level string values left in
            ``data`` are trimmed and truncated to this length.
    """
    pii_fields = None if fields is None else tuple(fields)

    def before_event(event: Event) -> Event:
        if not event.data:
            return event
        data = strip_pii(event.data, pii_fields)
        if max_string_length is not None:
            data = {
                key: sanitize_string(value, max_string_length) if isinstance(value, str) else value
                for key, value in data.items()
            }
        return event.model_copy(update={"data": data})

    return Plugin(name="pii-filter", before_event=before_event)
