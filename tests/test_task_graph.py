"""Registry, validation and plan preview tests."""

from __future__ import annotations

import pytest

from core.errors import CycleDetected, TaskNotFound
from planner.execution_plan import ExecutionRecord, TaskState
from planner.task_graph import TaskRegistry, normalize_group
from tools.tool_registry import build_release_registry


def test_register_allows_late_binding_and_overwrites() -> None:
    registry = TaskRegistry()
    registry.register("build", ["lint"], description="first")
    registry.register("build", ["lint", "copy"], description="second")

    task = registry.lookup("build")
    assert task.description == "second"
    assert task.dependencies == ["lint", "copy"]
    with pytest.raises(TaskNotFound):
        registry.validate("build")


def test_lookup_unknown_raises() -> None:
    with pytest.raises(TaskNotFound, match="ghost"):
        TaskRegistry().lookup("ghost")


def test_normalize_group() -> None:
    assert normalize_group("a") == "a"
    assert normalize_group(["a"]) == "a"
    assert normalize_group(("a", "b")) == frozenset({"a", "b"})
    with pytest.raises(ValueError):
        normalize_group([])


def test_self_dependency_is_a_cycle() -> None:
    registry = TaskRegistry()
    registry.register("loop", [["loop", "other"]])
    registry.register("other")

    with pytest.raises(CycleDetected) as excinfo:
        registry.validate("loop")
    assert excinfo.value.path == ["loop", "loop"]


def test_diamond_is_not_a_cycle() -> None:
    registry = TaskRegistry()
    registry.register("A")
    registry.register("B", ["A"])
    registry.register("C", ["A"])
    registry.register("D", [["B", "C"]])

    registry.validate("D")
    assert registry.plan("D") == [["A"], ["B", "C"], ["D"]]


def test_release_plan_lists_each_task_once() -> None:
    registry = build_release_registry()

    stages = registry.plan("release")
    names = [name for stage in stages for name in stage]

    assert stages[0] == ["fail-if-dirty", "fail-if-not-branch"]
    assert names.count("git-add") == 1
    assert names.count("fail-if-dirty") == 1
    assert names.index("git-add") < names.index("git-commit") < names.index("git-push")
    assert names.index("bump") < names.index("header")
    assert names[-1] == "release"


def test_release_graph_closures_resolve() -> None:
    registry = build_release_registry()
    for name in registry.names():
        registry.validate(name)


def test_execution_record_claims_once() -> None:
    record = ExecutionRecord()

    owner, entry = record.claim("A")
    again, same = record.claim("A")
    record.complete("A")

    assert owner is True
    assert again is False
    assert same is entry
    assert record.state_of("A") is TaskState.COMPLETED
    assert record.state_of("B") is TaskState.PENDING
    assert record.completed == ["A"]
    assert record.aborted is False
