"""Dependency-ordered task runner.

Runs a task's dependency groups depth-first, then its own action:

- a single-name group runs inline and must finish before the next group;
- a multi-name group runs its members on a thread pool and joins on all of
  them before the next group;
- every task runs at most once per ``run`` call, however many paths reach it;
- after the first failure no further group or action is started, while group
  members already running are left to finish and their outcome is dropped.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from core.build_context import BuildContext
from core.errors import ActionFailure, TaskError, TaskFailure
from core.event_bus import EventBus
from planner.execution_plan import ExecutionPlan, ExecutionRecord, TaskState
from planner.task_graph import Group, Task, TaskRegistry, group_members

logger = logging.getLogger("rk.runner")


@dataclass
class RunResult:
    """Outcome of a successful top-level run."""

    task: str
    completed: list[str] = field(default_factory=list)
    duration_s: float = 0.0


class TaskRunner:
    """Executes tasks from a registry against one build context."""

    def __init__(
        self,
        registry: TaskRegistry,
        context: BuildContext,
        event_bus: EventBus | None = None,
    ) -> None:
        self.registry = registry
        self.context = context
        self.event_bus = event_bus or EventBus()

    def plan(self, name: str) -> ExecutionPlan:
        """Preview the stages of ``name`` without running anything."""
        return ExecutionPlan(goal=name, stages=self.registry.plan(name))

    def run(self, name: str) -> RunResult:
        """Run ``name`` with its full dependency closure.

        Raises the first failure of the run. Unknown names and cycles are
        reported before any action starts.
        """
        self.registry.validate(name)
        record = ExecutionRecord()
        started = time.perf_counter()
        self.event_bus.emit("run_started", {"task": name})
        logger.info("Running '%s'", name)
        try:
            self._run_task(name, record)
        except TaskError as exc:
            failure = record.failure or exc
            self.event_bus.emit(
                "run_failed",
                {"task": name, "error": str(failure), "completed": record.completed},
            )
            if failure is exc:
                raise
            raise failure from None

        result = RunResult(
            task=name,
            completed=record.completed,
            duration_s=time.perf_counter() - started,
        )
        self.event_bus.emit(
            "run_completed",
            {"task": name, "completed": result.completed, "duration_s": result.duration_s},
        )
        logger.info("Finished '%s' in %.2fs", name, result.duration_s)
        return result

    def _run_task(self, name: str, record: ExecutionRecord) -> None:
        owner, entry = record.claim(name)
        if not owner:
            entry.done.wait()
            if entry.state is TaskState.FAILED and entry.error is not None:
                raise entry.error
            self.event_bus.emit("task_skipped", {"task": name})
            return

        try:
            task = self.registry.lookup(name)
            for group in task.dependencies:
                self._raise_if_aborted(record)
                self._run_group(group, record)
            self._raise_if_aborted(record)
            self._invoke(task)
        except TaskError as exc:
            record.fail(name, exc)
            raise
        except Exception as exc:
            failure = ActionFailure(str(exc) or exc.__class__.__name__, task=name)
            record.fail(name, failure)
            raise failure from exc
        record.complete(name)

    def _run_group(self, group: Group, record: ExecutionRecord) -> None:
        members = group_members(group)
        if len(members) == 1:
            self._run_task(members[0], record)
            return

        with ThreadPoolExecutor(max_workers=len(members), thread_name_prefix="rk-group") as pool:
            futures = [pool.submit(self._run_task, member, record) for member in members]
        errors = [future.exception() for future in futures if future.exception() is not None]
        if not errors:
            return
        failure = record.failure
        if failure is not None:
            raise failure
        raise errors[0]

    def _invoke(self, task: Task) -> None:
        action = task.action
        if action is None:
            return
        self.event_bus.emit("task_started", {"task": task.name})
        logger.info("Starting '%s'...", task.name)
        started = time.perf_counter()
        try:
            action(self.context)
        except TaskFailure as exc:
            if exc.task is None:
                exc.task = task.name
            self._report_failure(task.name, exc, started)
            raise
        except TaskError as exc:
            self._report_failure(task.name, exc, started)
            raise
        except Exception as exc:
            failure = ActionFailure(str(exc) or exc.__class__.__name__, task=task.name)
            self._report_failure(task.name, failure, started)
            raise failure from exc

        duration = time.perf_counter() - started
        self.event_bus.emit("task_completed", {"task": task.name, "duration_s": duration})
        logger.info("Finished '%s' after %.2fs", task.name, duration)

    def _report_failure(self, name: str, error: TaskError, started: float) -> None:
        duration = time.perf_counter() - started
        self.event_bus.emit(
            "task_failed",
            {"task": name, "error": str(error), "duration_s": duration},
        )
        logger.error("'%s' errored after %.2fs: %s", name, duration, error)

    @staticmethod
    def _raise_if_aborted(record: ExecutionRecord) -> None:
        failure = record.failure
        if failure is not None:
            raise failure
