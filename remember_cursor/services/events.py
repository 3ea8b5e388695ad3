"""Named-event dispatch between the editor host and the services."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

DOCUMENT_OPEN = "document-open"
RENAME = "rename"
DELETE = "delete"
TIMER_TICK = "timer-tick"
SHUTDOWN = "shutdown"
SELECTION_CHANGED = "selection-changed"

EVENT_NAMES = frozenset(
    {DOCUMENT_OPEN, RENAME, DELETE, TIMER_TICK, SHUTDOWN, SELECTION_CHANGED}
)

Handler = Callable[..., Any]


class EventDispatcher:
    """Registry of handlers per event name.

    Handlers run in registration order. A failing handler is logged and
    doesn't stop the others.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def on(self, event: str, handler: Handler) -> None:
        if event not in EVENT_NAMES:
            raise ValueError(f"Unknown event: {event}")
        if handler not in self._handlers[event]:
            self._handlers[event].append(handler)

    def off(self, event: str, handler: Handler) -> None:
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    def handlers(self, event: str) -> list[Handler]:
        return list(self._handlers.get(event, []))

    def emit(self, event: str, *args: Any) -> list[Any]:
        """Call the handlers for event from synchronous code.

        Coroutine handlers are scheduled on the running loop and their
        tasks are returned alongside plain results.
        """
        results = []
        for handler in self.handlers(event):
            try:
                result = handler(*args)
            except Exception as e:
                logger.error(f"Error in {event} handler {handler!r}: {e}", exc_info=True)
                continue
            if inspect.isawaitable(result):
                result = asyncio.ensure_future(result)
            results.append(result)
        return results

    async def emit_async(self, event: str, *args: Any) -> list[Any]:
        """Call the handlers for event and wait for coroutine handlers."""
        results = []
        for handler in self.handlers(event):
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                logger.error(f"Error in {event} handler {handler!r}: {e}", exc_info=True)
                continue
            results.append(result)
        return results
