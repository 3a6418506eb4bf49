"""Middleware pipeline — ordered, cancellable chain over a mutable event.

A middleware receives the event and a ``next_`` continuation:

- call ``next_()`` to pass control to the following middleware (or to the
  final handler once the chain is exhausted);
- return without calling it to cancel the event.  Cancellation is silent:
  ``execute()`` returns normally either way;
- mutate the event in place to transform it for every later stage.
"""

from __future__ import annotations

from collections.abc import Callable

from opendatalayer.core.events import Event

Next = Callable[[], None]
MiddlewareFn = Callable[[Event, Next], None]
FinalHandler = Callable[[Event], None]


class MiddlewarePipeline:
    """Runs an ordered list of middleware functions for each event."""

    def __init__(self) -> None:
        self._middlewares: list[MiddlewareFn] = []

    def use(self, fn: MiddlewareFn) -> None:
        """Append *fn* to the pipeline."""
        self._middlewares.append(fn)

    def execute(self, event: Event, final_handler: FinalHandler) -> None:
        """Run the chain for *event*, ending in *final_handler*.

        The cursor lives in this call's closure, so nested ``execute()``
        calls on the same pipeline (e.g. a middleware pushing another event)
        each walk the chain independently.
        """
        stages = tuple(self._middlewares)
        index = 0

        def next_() -> None:
            nonlocal index
            if index < len(stages):
                stage = stages[index]
                index += 1
                stage(event, next_)
            else:
                final_handler(event)

        next_()

    def __len__(self) -> int:
        return len(self._middlewares)
