"""Canonical ID and timestamp factories for the data layer.

All modules import from here instead of defining local _uuid()/_now() copies.

Timestamp Rule
--------------
Event timestamps are ISO-8601 strings in UTC with millisecond precision and
a ``Z`` suffix (``2024-11-15T08:30:00.123Z``), the shape analytics vendors
expect on the wire.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Generate a new UUID v4 string.  Use for all event IDs."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime | None = None) -> str:
    """Format *moment* (default: now) as a millisecond ISO-8601 UTC string.

    Naive datetimes are assumed to already be in UTC.
    """
    moment = moment or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
