"""Per-invocation execution record."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum

from core.errors import TaskError


class TaskState(str, Enum):
    """Lifecycle of one task within one run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TaskEntry:
    """State slot for a task that has been reached in this run."""

    name: str
    state: TaskState = TaskState.PENDING
    error: TaskError | None = None
    done: threading.Event = field(default_factory=threading.Event)


class ExecutionRecord:
    """Tracks which tasks ran in one top-level invocation.

    Owned by a single ``run`` call. Group members touch it from worker threads,
    so every state change goes through the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, TaskEntry] = {}
        self._completed: list[str] = []
        self._failure: TaskError | None = None

    def claim(self, name: str) -> tuple[bool, TaskEntry]:
        """Reserve ``name`` for the caller.

        Returns ``(True, entry)`` when the caller must run the task, or
        ``(False, entry)`` when another path already owns it.
        """
        with self._lock:
            entry = self._entries.get(name)
            if entry is not None and entry.state is not TaskState.PENDING:
                return False, entry
            if entry is None:
                entry = TaskEntry(name=name)
                self._entries[name] = entry
            entry.state = TaskState.RUNNING
            return True, entry

    def complete(self, name: str) -> None:
        with self._lock:
            entry = self._entries[name]
            entry.state = TaskState.COMPLETED
            self._completed.append(name)
        entry.done.set()

    def fail(self, name: str, error: TaskError) -> None:
        """Mark ``name`` failed; the first failure of the run is kept."""
        with self._lock:
            entry = self._entries[name]
            entry.state = TaskState.FAILED
            entry.error = error
            if self._failure is None:
                self._failure = error
        entry.done.set()

    def state_of(self, name: str) -> TaskState:
        with self._lock:
            entry = self._entries.get(name)
            return entry.state if entry else TaskState.PENDING

    @property
    def aborted(self) -> bool:
        with self._lock:
            return self._failure is not None

    @property
    def failure(self) -> TaskError | None:
        with self._lock:
            return self._failure

    @property
    def completed(self) -> list[str]:
        with self._lock:
            return list(self._completed)


@dataclass
class ExecutionPlan:
    """Ordered stages of a task run, for previews."""

    goal: str
    stages: list[list[str]] = field(default_factory=list)
