"""Context Manager — ambient state attached to every event.

Context is a flat mapping of **keys** to arbitrary values.  Each key usually
names a context domain (``"page"``, ``"user"``, ``"consent"``, ...).  The
store is shared and mutable; ``snapshot()`` is the only isolation boundary.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from opendatalayer.utils.deep_merge import deep_merge, is_plain_object

logger = logging.getLogger(__name__)


class ContextManager:
    """Owns the ambient context store of one data layer."""

    def __init__(self) -> None:
        self._context: dict[str, Any] = {}

    def get(self) -> dict[str, Any]:
        """Return the live context mapping (by reference).

        Prefer ``snapshot()`` when an isolated copy is needed.
        """
        return self._context

    def set(self, key: str, value: Any) -> None:
        """Replace whatever is stored under *key* with *value*."""
        self._context[key] = value

    def update(self, key: str, partial: Any) -> None:
        """Deep-merge *partial* into the plain dict stored under *key*.

        When either side is not a plain dict (missing key, ``None``,
        primitive, list, class instance) the stored value is replaced by
        *partial* instead.
        """
        existing = self._context.get(key)
        if is_plain_object(existing) and is_plain_object(partial):
            self._context[key] = deep_merge(existing, partial)
        elif is_plain_object(partial):
            self._context[key] = dict(partial)
        else:
            self._context[key] = partial

    def remove(self, key: str) -> None:
        """Remove *key* from the context.  No-op when absent."""
        self._context.pop(key, None)

    def reset(self) -> None:
        """Clear all context."""
        self._context.clear()
        logger.debug("Context cleared")

    def snapshot(self) -> dict[str, Any]:
        """Deep clone of the current context."""
        return copy.deepcopy(self._context)

    def __contains__(self, key: object) -> bool:
        return key in self._context

    def __len__(self) -> int:
        return len(self._context)
