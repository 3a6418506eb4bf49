"""Wildcard publish/subscribe."""

from opendatalayer.bus.event_bus import EventBus

__all__ = ["EventBus"]
