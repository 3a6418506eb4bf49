"""OpenDataLayer — public façade with plugin lifecycle management.

Wraps a ``DataLayer`` and wires registered plugins into it:

- every plugin's ``before_event`` runs, in registration order, inside one
  middleware installed first in the pipeline.  The first hook returning
  ``None`` cancels the event.  Errors raised here propagate to the caller;
- ``after_event`` hooks run from a single ``"*"`` subscription, so they only
  see events that were stored and emitted.  Errors are logged per plugin;
- ``destroy()`` tears every plugin down (errors logged per plugin), then
  clears the plugin list and resets the data layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from opendatalayer.bus.event_bus import EventHandler
from opendatalayer.core.errors import PluginError
from opendatalayer.core.events import CustomDimensionValue, Event, EventSource
from opendatalayer.data_layer import DataLayer
from opendatalayer.pipeline.middleware import MiddlewareFn, Next
from opendatalayer.plugins.types import get_hook, plugin_name

if TYPE_CHECKING:
    from opendatalayer.core.config import Settings

logger = logging.getLogger(__name__)


class OpenDataLayer:
    """Public API: ``track()`` events, manage context, register plugins.

    Parameters
    ----------
    plugins
        Plugins registered (and initialized) on construction, in order.
    context
        Initial ambient context, applied key by key before any plugin is
        initialized.
    source
        Application metadata attached to every event, as an ``EventSource``
        or a ``{"name": ..., "version": ...}`` mapping.
    """

    def __init__(
        self,
        *,
        plugins: Iterable[Any] | None = None,
        context: Mapping[str, Any] | None = None,
        source: EventSource | Mapping[str, str] | None = None,
    ) -> None:
        if source is not None and not isinstance(source, EventSource):
            source = EventSource.model_validate(dict(source))
        self._data_layer = DataLayer(source)
        self._plugins: list[Any] = []

        self._data_layer.use(self._run_before_event)
        self._data_layer.on("*", self._run_after_event)

        for key, value in (context or {}).items():
            self._data_layer.set_context(key, value)

        for plugin in plugins or ():
            self.use(plugin)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        plugins: Iterable[Any] | None = None,
    ) -> OpenDataLayer:
        """Build a data layer from ``Settings``.

        The debug plugin is registered first when ``settings.debug`` is set.
        """
        registered: list[Any] = []
        if settings.debug:
            from opendatalayer.plugins.debug import debug

            registered.append(debug())
        registered.extend(plugins or ())

        source = None
        if settings.source is not None:
            source = EventSource(
                name=settings.source.name, version=settings.source.version
            )
        return cls(plugins=registered, context=settings.context, source=source)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def track(
        self,
        event_name: str,
        data: dict[str, Any] | None = None,
        custom_dimensions: dict[str, CustomDimensionValue] | None = None,
    ) -> Event:
        """Track an event.  See ``DataLayer.push``."""
        return self._data_layer.push(event_name, data, custom_dimensions)

    def get_events(self) -> list[Event]:
        return self._data_layer.get_events()

    def get_last_event(self) -> Event | None:
        return self._data_layer.get_last_event()

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def set_context(self, key: str, value: Any) -> None:
        self._data_layer.set_context(key, value)

    def update_context(self, key: str, partial: Any) -> None:
        self._data_layer.update_context(key, partial)

    def get_context(self) -> dict[str, Any]:
        return self._data_layer.get_context()

    def remove_context(self, key: str) -> None:
        self._data_layer.remove_context(key)

    # ------------------------------------------------------------------
    # Subscription & middleware
    # ------------------------------------------------------------------

    def on(self, pattern: str, handler: EventHandler) -> Callable[[], None]:
        """Subscribe to events matching *pattern*.  Returns an unsubscribe callable."""
        return self._data_layer.on(pattern, handler)

    def off(self, pattern: str, handler: EventHandler) -> None:
        self._data_layer.off(pattern, handler)

    def add_middleware(self, fn: MiddlewareFn) -> None:
        """Append a raw middleware after the plugin hooks.

        Plugin authors should prefer ``before_event`` / ``after_event``.
        """
        self._data_layer.use(fn)

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    @property
    def plugins(self) -> tuple[Any, ...]:
        return tuple(self._plugins)

    @property
    def data_layer(self) -> DataLayer:
        return self._data_layer

    def use(self, plugin: Any) -> None:
        """Register *plugin* and call its ``initialize`` hook with the data layer."""
        name = getattr(plugin, "name", None)
        if not isinstance(name, str) or not name:
            raise PluginError(plugin, "a plugin needs a non-empty string name")

        self._plugins.append(plugin)
        logger.debug("Registered plugin %s", name)

        initialize = get_hook(plugin, "initialize")
        if initialize is not None:
            initialize(self._data_layer)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Clear stored events and context."""
        self._data_layer.reset()

    def destroy(self) -> None:
        """Tear down all plugins and clear state.  Safe to call repeatedly."""
        for plugin in self._plugins:
            hook = get_hook(plugin, "destroy")
            if hook is None:
                continue
            try:
                hook()
            except Exception:
                logger.exception("destroy hook failed for plugin %s", plugin_name(plugin))
        self._plugins = []
        self._data_layer.reset()

    # ------------------------------------------------------------------
    # Hook dispatch
    # ------------------------------------------------------------------

    def _run_before_event(self, event: Event, next_: Next) -> None:
        current: Event | None = event
        for plugin in list(self._plugins):
            hook = get_hook(plugin, "before_event")
            if hook is None:
                continue
            result = hook(current)
            if result is None:
                logger.debug(
                    "Event %s cancelled by plugin %s", event.event, plugin_name(plugin)
                )
                return
            if isinstance(result, Mapping):
                result = Event.from_dict(result)
            current = result

        if current is not event:
            event.update_from(current)
        next_()

    def _run_after_event(self, event: Event) -> None:
        for plugin in list(self._plugins):
            hook = get_hook(plugin, "after_event")
            if hook is None:
                continue
            try:
                hook(event)
            except Exception:
                logger.exception("after_event hook failed for plugin %s", plugin_name(plugin))
