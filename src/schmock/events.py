"""Lifecycle event bus: synchronous publish/subscribe per mock instance.

The dispatch engine emits ``request:start``, ``request:end`` and
``error`` while answering ``handle()``. Listeners run synchronously, in
registration order, and can never break the request they observe.

Free-threading safety:
    - Event is a frozen dataclass (immutable, safe to share)
    - EventBus uses a Lock to protect the listener lists
    - emit() iterates a snapshot, so listeners may call on()/off()
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from schmock._internal.types import EventHandler

REQUEST_START = "request:start"
REQUEST_END = "request:end"
ERROR = "error"

logger = logging.getLogger("schmock.events")


@dataclass(frozen=True, slots=True)
class Event:
    """A single lifecycle notification."""

    type: str
    payload: dict[str, Any] = field(default_factory=dict)


class EventBus:
    """Per-instance listener registry.

    Usage::

        bus = EventBus()
        bus.on("request:end", lambda event: print(event.payload["status"]))
        bus.emit("request:end", {"method": "GET", "path": "/", "status": 200})

    A listener that raises while handling any event other than ``error``
    triggers ``emit("error", {"error": exc, "event": type})``. A listener
    that raises while handling ``error`` is logged and dropped, so an
    emission never propagates back to its caller and never recurses.
    """

    __slots__ = ("_listeners", "_lock")

    def __init__(self) -> None:
        self._listeners: dict[str, list[EventHandler]] = {}
        self._lock = threading.Lock()

    def on(self, event_type: str, handler: EventHandler) -> None:
        """Register *handler* for *event_type*."""
        with self._lock:
            self._listeners.setdefault(event_type, []).append(handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        """Remove the first registration of *handler* (by identity)."""
        with self._lock:
            handlers = self._listeners.get(event_type)
            if not handlers:
                return
            for index, registered in enumerate(handlers):
                if registered is handler:
                    del handlers[index]
                    return

    def listeners(self, event_type: str) -> tuple[EventHandler, ...]:
        with self._lock:
            return tuple(self._listeners.get(event_type, ()))

    def emit(self, event_type: str, payload: dict[str, Any] | None = None) -> None:
        """Call every listener of *event_type* with an ``Event``."""
        event = Event(type=event_type, payload=payload or {})
        for handler in self.listeners(event_type):
            try:
                handler(event)
            except Exception as exc:
                if event_type == ERROR:
                    logger.exception("Listener %r failed while handling an error event", handler)
                    continue
                self.emit(ERROR, {"error": exc, "event": event_type})
