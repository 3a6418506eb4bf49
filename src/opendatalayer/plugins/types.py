"""Plugin contract.

A plugin is a capability set: a ``name`` plus any subset of four hooks.
``Plugin`` is a ready-made container for function-based plugins; any object
that exposes the same attributes (e.g. a class with ``before_event`` and
``after_event`` methods) is accepted as well.  Missing or ``None`` hooks are
skipped.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from opendatalayer.core.events import Event

if TYPE_CHECKING:
    from opendatalayer.data_layer import DataLayer

InitializeHook = Callable[["DataLayer"], None]
BeforeEventHook = Callable[[Event], "Event | None"]
AfterEventHook = Callable[[Event], None]
DestroyHook = Callable[[], None]


@dataclass
class Plugin:
    """Function-based plugin.

    - ``initialize(data_layer)``: called once on registration.
    - ``before_event(event)``: return the (optionally transformed) event, or
      ``None`` to cancel it.
    - ``after_event(event)``: called for every event that was stored and
      emitted.
    - ``destroy()``: release listeners or other resources.
    """

    name: str
    initialize: InitializeHook | None = None
    before_event: BeforeEventHook | None = None
    after_event: AfterEventHook | None = None
    destroy: DestroyHook | None = None


def plugin_name(plugin: Any) -> str:
    """Best-effort display name of a plugin for log messages."""
    return getattr(plugin, "name", None) or type(plugin).__name__


def get_hook(plugin: Any, hook: str) -> Callable[..., Any] | None:
    """Return the named hook of *plugin*, or None when it does not provide one."""
    fn = getattr(plugin, hook, None)
    return fn if callable(fn) else None
