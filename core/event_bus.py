"""In-process event bus for task lifecycle events."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Callable
from typing import Any

EventHandler = Callable[[str, dict[str, Any]], None]

TASK_EVENTS = (
    "run_started",
    "run_completed",
    "run_failed",
    "task_started",
    "task_completed",
    "task_failed",
    "task_skipped",
)


class EventBus:
    """Dispatches events to subscribers by event name.

    Events can be emitted from group worker threads; handlers are called on the
    emitting thread and must guard their own shared state.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        with self._lock:
            self._handlers[event_name].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Register a callback for every task lifecycle event."""
        for event_name in TASK_EVENTS:
            self.subscribe(event_name, handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers."""
        with self._lock:
            handlers = list(self._handlers.get(event_name, []))
        for handler in handlers:
            handler(event_name, payload)
