"""Task graph error taxonomy."""

from __future__ import annotations


class TaskError(Exception):
    """Base class for every error raised while resolving or running tasks."""


class TaskNotFound(TaskError):
    """A requested or depended-upon task name is not registered."""

    def __init__(self, name: str, required_by: str | None = None) -> None:
        self.name = name
        self.required_by = required_by
        if required_by:
            message = f"Task '{name}' is not registered (required by '{required_by}')."
        else:
            message = f"Task '{name}' is not registered."
        super().__init__(message)


class CycleDetected(TaskError):
    """The dependency closure of a task loops back on itself."""

    def __init__(self, path: list[str]) -> None:
        self.path = list(path)
        super().__init__(f"Dependency cycle: {' -> '.join(self.path)}")


class TaskFailure(TaskError):
    """A task did not complete. Carries the failing task name."""

    def __init__(self, message: str, task: str | None = None) -> None:
        self.message = message
        self.task = task
        super().__init__(message)

    def __str__(self) -> str:
        if self.task:
            return f"Task '{self.task}' failed: {self.message}"
        return self.message


class ActionFailure(TaskFailure):
    """A task action reported failure (bad exit code, raised error)."""


class PreconditionFailure(TaskFailure):
    """A guard task refused to let the run proceed."""
