"""OpenDataLayer — in-process analytics event pipeline.

Ambient context, wildcard pub-sub, a cancellable middleware chain and the
plugin lifecycle that vendor adapters plug into.
"""

from opendatalayer.bus.event_bus import EventBus, match_pattern
from opendatalayer.context.manager import ContextManager
from opendatalayer.core.errors import ConfigError, DataLayerError, EventError, PluginError
from opendatalayer.core.events import SPEC_VERSION, Event, EventSource
from opendatalayer.data_layer import DataLayer
from opendatalayer.odl import OpenDataLayer
from opendatalayer.pipeline.middleware import MiddlewareFn, MiddlewarePipeline
from opendatalayer.plugins import Plugin, debug, pii_filter

__all__ = [
    "OpenDataLayer",
    "DataLayer",
    "EventBus",
    "ContextManager",
    "MiddlewarePipeline",
    "MiddlewareFn",
    "Event",
    "EventSource",
    "SPEC_VERSION",
    "Plugin",
    "debug",
    "pii_filter",
    "match_pattern",
    "DataLayerError",
    "ConfigError",
    "EventError",
    "PluginError",
]
