"""Shared fixtures: a throwaway JS project and a build context over it."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from core.build_context import BuildContext
from core.settings import ReleaseSettings
from executor.command_executor import CommandExecutor
from fakes import ok


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "needle"
    (root / "src").mkdir(parents=True)
    (root / "src" / "needle.js").write_text("var needle = 1;\n", encoding="utf-8")
    (root / "src" / "needle.lite.js").write_text("var lite = 1;\n", encoding="utf-8")
    (root / "package.json").write_text(
        json.dumps({"name": "needle", "version": "1.2.3"}, indent=2) + "\n", encoding="utf-8"
    )
    (root / "bower.json").write_text(
        json.dumps({"name": "needle", "version": "1.2.3", "main": "dist/needle.js"}, indent=4),
        encoding="utf-8",
    )
    (root / "LICENSE").write_text("Copyright (c) 2013 Jay Salvat\n", encoding="utf-8")
    (root / "README.md").write_text("# Needle\n\n(c) 2014 Jay Salvat\n", encoding="utf-8")
    return root


@pytest.fixture
def commands() -> MagicMock:
    executor = MagicMock(spec=CommandExecutor)
    executor.run.return_value = ok()
    executor.check.return_value = ok()
    return executor


@pytest.fixture
def ctx(project: Path, commands: MagicMock) -> BuildContext:
    return BuildContext(
        root=project,
        settings=ReleaseSettings(),
        commands=commands,
        now=datetime(2026, 10, 19, 9, 30),
    )
