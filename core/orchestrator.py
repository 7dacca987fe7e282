"""Top-level application orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.build_context import BuildContext
from core.event_bus import EventBus
from core.policy_runtime import ensure_runtime_dirs, load_effective_config
from core.settings import BumpKind, ReleaseSettings
from core.task_runner import TaskRunner
from executor.command_executor import CommandExecutor
from governance.audit_logger import AuditLogger
from planner.task_graph import TaskRegistry
from tools.base_tool import BaseTool
from tools.tool_registry import build_release_registry, default_tools


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    settings: ReleaseSettings
    context: BuildContext
    registry: TaskRegistry
    runner: TaskRunner
    event_bus: EventBus
    tools: list[BaseTool]


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(
        self,
        root: Path | None = None,
        config_dir: Path | None = None,
        commands: CommandExecutor | None = None,
    ) -> None:
        self.root = (root or Path.cwd()).resolve()
        self.config_dir = config_dir
        self.commands = commands

    def build(self, bump: BumpKind | str | None = None) -> RuntimeBundle:
        overrides = {"bump": BumpKind(bump).value} if bump else None
        config = load_effective_config(self.root, self.config_dir, overrides)
        settings = ReleaseSettings.from_config(config)
        paths = ensure_runtime_dirs(self.root, config)

        context = BuildContext(
            root=self.root,
            settings=settings,
            commands=self.commands or CommandExecutor(cwd=self.root),
            bump=settings.bump,
        )
        event_bus = EventBus()
        if "audit_log_path" in paths:
            AuditLogger(paths["audit_log_path"]).attach(event_bus)

        tools = default_tools()
        registry = build_release_registry(tools)
        runner = TaskRunner(registry=registry, context=context, event_bus=event_bus)

        return RuntimeBundle(
            config=config,
            settings=settings,
            context=context,
            registry=registry,
            runner=runner,
            event_bus=event_bus,
            tools=tools,
        )
