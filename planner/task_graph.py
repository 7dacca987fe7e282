"""Task registry and dependency graph."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.errors import CycleDetected, TaskNotFound

if TYPE_CHECKING:
    from core.build_context import BuildContext

TaskAction = Callable[["BuildContext"], None]
Group = str | frozenset[str]
DependencyEntry = str | Iterable[str]


def normalize_group(entry: DependencyEntry) -> Group:
    """Turn a registration-time dependency entry into a group.

    A string is a single sequential dependency; any other iterable is a set of
    names run concurrently. A one-element set collapses to a plain name.
    """
    if isinstance(entry, str):
        return entry
    names = frozenset(str(name) for name in entry)
    if not names:
        raise ValueError("Dependency group must name at least one task.")
    if len(names) == 1:
        return next(iter(names))
    return names


def group_members(group: Group) -> list[str]:
    if isinstance(group, str):
        return [group]
    return sorted(group)


@dataclass
class Task:
    """A named unit of work with ordered dependency groups."""

    name: str
    dependencies: list[Group] = field(default_factory=list)
    action: TaskAction | None = None
    description: str = ""

    def dependency_names(self) -> list[str]:
        names: list[str] = []
        for group in self.dependencies:
            names.extend(group_members(group))
        return names


@dataclass
class RegisteredTask:
    """Metadata for task listing output."""

    name: str
    description: str
    dependencies: list[str]


class TaskRegistry:
    """In-memory registry of tasks keyed by name."""

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def register(
        self,
        name: str,
        dependencies: Iterable[DependencyEntry] = (),
        action: TaskAction | None = None,
        description: str = "",
    ) -> Task:
        """Add or replace a task. Unknown dependency names are resolved at run time."""
        task = Task(
            name=name,
            dependencies=[normalize_group(entry) for entry in dependencies],
            action=action,
            description=description,
        )
        self._tasks[name] = task
        return task

    def lookup(self, name: str) -> Task:
        task = self._tasks.get(name)
        if task is None:
            raise TaskNotFound(name)
        return task

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def names(self) -> list[str]:
        return sorted(self._tasks)

    def list_tasks(self) -> list[RegisteredTask]:
        return [
            RegisteredTask(
                name=name,
                description=task.description,
                dependencies=task.dependency_names(),
            )
            for name, task in sorted(self._tasks.items())
        ]

    def validate(self, name: str) -> None:
        """Check that the closure of ``name`` resolves and is acyclic."""
        self.lookup(name)
        done: set[str] = set()
        stack: list[str] = []

        def visit(current: str, parent: str | None) -> None:
            if current in done:
                return
            if current in stack:
                start = stack.index(current)
                raise CycleDetected(stack[start:] + [current])
            if current not in self._tasks:
                raise TaskNotFound(current, required_by=parent)
            stack.append(current)
            for dep in self._tasks[current].dependency_names():
                visit(dep, current)
            stack.pop()
            done.add(current)

        visit(name, None)

    def plan(self, name: str) -> list[list[str]]:
        """Return the stages a run of ``name`` would start, in order.

        A stage holds the members of one concurrent group, or a single task.
        Dependencies of group members are listed before the group. Tasks
        reached again after their first appearance are left out.
        """
        self.validate(name)
        seen: set[str] = set()

        def expand(current: str) -> list[list[str]]:
            if current in seen:
                return []
            seen.add(current)
            return expand_dependencies(current) + [[current]]

        def expand_dependencies(current: str) -> list[list[str]]:
            out: list[list[str]] = []
            for group in self._tasks[current].dependencies:
                if isinstance(group, str):
                    out.extend(expand(group))
                    continue
                fresh = [member for member in sorted(group) if member not in seen]
                seen.update(fresh)
                for member in fresh:
                    out.extend(expand_dependencies(member))
                if fresh:
                    out.append(fresh)
            return out

        return expand(name)
