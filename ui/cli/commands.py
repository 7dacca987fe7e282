"""Typer command handlers."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError

from core.errors import CycleDetected, TaskFailure, TaskNotFound
from core.orchestrator import Orchestrator, RuntimeBundle
from core.settings import BumpKind
from tools.tool_registry import list_tools

EXIT_FAILURE = 1
EXIT_USAGE = 2


def _runtime(root: Path | None = None, bump: BumpKind | None = None) -> RuntimeBundle:
    try:
        return Orchestrator(root=root).build(bump=bump)
    except (ValueError, ValidationError) as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=EXIT_USAGE) from exc


def configure_logging(level: str, verbose: bool = False) -> None:
    """Send rk.* logs to stderr at the configured level."""
    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(message)s", datefmt="%H:%M:%S"))
    logger = logging.getLogger("rk")
    logger.handlers = [handler]
    logger.setLevel(resolved)
    logger.propagate = False


def _print_plan(bundle: RuntimeBundle, task: str) -> None:
    plan = bundle.runner.plan(task)
    for index, stage in enumerate(plan.stages, start=1):
        marker = " & ".join(stage)
        typer.echo(f"{index:>3}. {marker}")


def run_task(
    task: str,
    bump: BumpKind | None = None,
    root: Path | None = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> None:
    """Run one task with its dependencies."""
    bundle = _runtime(root, bump)
    configure_logging(bundle.settings.logging.level, verbose)
    try:
        if dry_run:
            _print_plan(bundle, task)
            return
        result = bundle.runner.run(task)
    except (TaskNotFound, CycleDetected) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_USAGE) from exc
    except TaskFailure as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_FAILURE) from exc
    typer.echo(f"'{task}' done: {len(result.completed)} tasks in {result.duration_s:.2f}s")


def plan_task(task: str, root: Path | None = None) -> None:
    """Print the stages a task would run."""
    bundle = _runtime(root)
    try:
        _print_plan(bundle, task)
    except (TaskNotFound, CycleDetected) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_USAGE) from exc


def tasks_list(root: Path | None = None) -> None:
    """List tasks with their dependencies."""
    bundle = _runtime(root)
    for task in bundle.registry.list_tasks():
        deps = f" <- {', '.join(task.dependencies)}" if task.dependencies else ""
        typer.echo(f"{task.name}: {task.description}{deps}")


def tools_list(root: Path | None = None) -> None:
    """List tools and the tasks they provide."""
    bundle = _runtime(root)
    for tool in list_tools(bundle.tools):
        typer.echo(f"{tool.name}: {', '.join(tool.tasks)}")


def config_show(root: Path | None = None) -> None:
    """Show effective runtime config."""
    bundle = _runtime(root)
    typer.echo(json.dumps(bundle.settings.model_dump(mode="json"), indent=2))
