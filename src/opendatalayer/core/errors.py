"""Custom exception hierarchy for the data layer."""


class DataLayerError(Exception):
    """Base exception for all data layer errors."""


# --- Configuration ---
class ConfigError(DataLayerError):
    """Invalid or missing configuration."""


# --- Plugins ---
class PluginError(DataLayerError):
    """A plugin could not be registered."""

    def __init__(self, plugin: object, reason: str):
        self.plugin = plugin
        self.reason = reason
        super().__init__(f"Invalid plugin {plugin!r}: {reason}")


# --- Events ---
class EventError(DataLayerError):
    """A record could not be turned into an event."""
