"""Plugin contract and built-in plugins."""

from opendatalayer.plugins.debug import debug
from opendatalayer.plugins.pii import pii_filter
from opendatalayer.plugins.types import Plugin

__all__ = ["Plugin", "debug", "pii_filter"]
