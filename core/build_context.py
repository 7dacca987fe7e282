"""Per-invocation build context passed into every task action."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from core.settings import BumpKind, ReleaseSettings
from executor.command_executor import CommandExecutor


@dataclass
class BuildContext:
    """Settings, project root and clock for one run.

    Actions receive this object instead of reading process-wide state. The
    version is always re-read from the package descriptor so tasks that run
    after ``bump`` see the new value.
    """

    root: Path
    settings: ReleaseSettings
    commands: CommandExecutor
    bump: BumpKind = BumpKind.PATCH
    now: datetime = field(default_factory=datetime.now)

    def path(self, relative: str | Path) -> Path:
        return self.root / relative

    @property
    def src_dir(self) -> Path:
        return self.path(self.settings.paths.src_dir)

    @property
    def dist_dir(self) -> Path:
        return self.path(self.settings.paths.dist_dir)

    @property
    def tmp_dir(self) -> Path:
        return self.path(self.settings.paths.tmp_dir)

    @property
    def package_path(self) -> Path:
        return self.path(self.settings.files.manifests[0])

    def read_package(self) -> dict[str, Any]:
        with self.package_path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"Package descriptor must be a JSON object: {self.package_path}")
        return data

    @property
    def version(self) -> str:
        return str(self.read_package().get("version", "0.0.0"))

    @property
    def tag(self) -> str:
        return f"v{self.version}"

    @property
    def year(self) -> str:
        return self.now.strftime("%Y")

    @property
    def timestamp(self) -> str:
        return self.now.strftime(self.settings.banner.date_format)
