"""CLI entrypoint for releasekit."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from core.settings import BumpKind
from ui.cli import commands

app = typer.Typer(help="Build and release tasks for a JavaScript library", no_args_is_help=True)
config_app = typer.Typer(help="Configuration commands")
tools_app = typer.Typer(help="Tool commands")

ROOT_OPTION = typer.Option(None, "--root", help="Project root (defaults to the current directory)")


@app.command("run")
def run_cmd(
    task: str = typer.Argument(..., help="Task to run, e.g. build, test, release, publish"),
    bump: Optional[BumpKind] = typer.Option(
        None, "--type", help="Version increment for bump (default: patch, or releasekit.yaml)"
    ),
    root: Optional[Path] = ROOT_OPTION,
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the plan without running"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run a task and everything it depends on."""
    commands.run_task(task=task, bump=bump, root=root, dry_run=dry_run, verbose=verbose)


@app.command("plan")
def plan_cmd(
    task: str = typer.Argument(..., help="Task to preview"),
    root: Optional[Path] = ROOT_OPTION,
) -> None:
    """Show the execution stages of a task."""
    commands.plan_task(task=task, root=root)


@app.command("list")
def list_cmd(root: Optional[Path] = ROOT_OPTION) -> None:
    """List registered tasks."""
    commands.tasks_list(root=root)


@tools_app.command("list")
def tools_list_cmd(root: Optional[Path] = ROOT_OPTION) -> None:
    """List tools and the tasks they provide."""
    commands.tools_list(root=root)


@config_app.command("show")
def config_show_cmd(root: Optional[Path] = ROOT_OPTION) -> None:
    """Show effective configuration."""
    commands.config_show(root=root)


app.add_typer(config_app, name="config")
app.add_typer(tools_app, name="tools")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
