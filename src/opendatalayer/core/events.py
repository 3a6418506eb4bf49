"""Event schema for the data layer.

An ``Event`` is the canonical record of a tracked action.  It is a mutable
Pydantic model: middleware and plugins may change fields in place or attach
extra keys before the event is stored and emitted.

The wire shape produced by ``to_dict()`` uses camelCase keys
(``specVersion``, ``customDimensions``) and omits optional fields that were
never supplied.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import EventError
from .ids import iso_timestamp, new_id

SPEC_VERSION = "1.0.0"

CustomDimensionValue = str | bool | int | float

# (attribute, record key) for fields left out of the record when None
_OPTIONAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("context", "context"),
    ("data", "data"),
    ("custom_dimensions", "customDimensions"),
    ("source", "source"),
)


class EventSource(BaseModel):
    """Application that produced an event."""

    name: str
    version: str


class Event(BaseModel):
    """A single event flowing through the data layer."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    event: str
    id: str = Field(default_factory=new_id)
    timestamp: str = Field(default_factory=iso_timestamp)
    spec_version: str = Field(default=SPEC_VERSION, alias="specVersion")
    context: dict[str, Any] | None = None
    data: dict[str, Any] | None = None
    custom_dimensions: dict[str, CustomDimensionValue] | None = Field(
        default=None, alias="customDimensions"
    )
    source: EventSource | None = None

    @property
    def namespace(self) -> str:
        """Leading dot segment of the event name (``""`` if there is none)."""
        head, sep, _ = self.event.partition(".")
        return head if sep else ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-shaped record.  Unset optional fields are absent."""
        record: dict[str, Any] = {
            "event": self.event,
            "id": self.id,
            "timestamp": self.timestamp,
            "specVersion": self.spec_version,
        }
        for attr, key in _OPTIONAL_FIELDS:
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, BaseModel):
                value = value.model_dump()
            record[key] = value
        if self.model_extra:
            record.update(self.model_extra)
        return record

    def update_from(self, other: Event) -> None:
        """Copy the fields *other* explicitly set, and its extra keys, onto this event.

        Fields *other* only holds as defaults (a fresh ``id``, an unset
        ``context``) leave this event untouched.
        """
        fields = type(self).model_fields
        for name in other.model_fields_set:
            if name in fields:
                setattr(self, name, getattr(other, name))
        for key, value in (other.model_extra or {}).items():
            setattr(self, key, value)

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> Event:
        """Build an event from a record, raising ``EventError`` if malformed."""
        try:
            return cls.model_validate(dict(record))
        except ValidationError as exc:
            raise EventError(f"Malformed event record: {exc}") from exc
