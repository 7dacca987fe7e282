"""Version bump and release metadata tasks."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from core.build_context import BuildContext
from core.errors import ActionFailure
from core.settings import BumpKind
from tools.base_tool import BaseTool

SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)


def bump_version(version: str, kind: BumpKind | str) -> str:
    """Increment a semantic version.

    A pre-release is promoted to its release when the fields below ``kind``
    are already zero, e.g. ``1.3.0-beta`` bumped by minor gives ``1.3.0``.
    Build metadata is dropped.
    """
    match = SEMVER_RE.match(version.strip())
    if not match:
        raise ValueError(f"Not a semantic version: {version!r}")
    kind = BumpKind(kind)
    major, minor, patch = (int(match.group(k)) for k in ("major", "minor", "patch"))
    pre = match.group("pre")

    if kind is BumpKind.MAJOR:
        if not (pre and minor == 0 and patch == 0):
            major += 1
        minor = patch = 0
    elif kind is BumpKind.MINOR:
        if not (pre and patch == 0):
            minor += 1
        patch = 0
    elif not pre:
        patch += 1
    return f"{major}.{minor}.{patch}"


def detect_indent(text: str) -> int | str:
    for line in text.splitlines()[1:]:
        stripped = line.lstrip(" \t")
        if stripped and stripped != line:
            lead = line[: len(line) - len(stripped)]
            return "\t" if lead.startswith("\t") else len(lead)
    return 2


def read_json(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ActionFailure(f"{path.name} must contain a JSON object.")
    return data


class VersionTool(BaseTool):
    """Reads and bumps manifest versions, writes release metadata."""

    def __init__(self) -> None:
        super().__init__("version_tool")

    def actions(self):
        return {
            "bump": self.bump,
            "meta": self.meta,
        }

    def bump(self, ctx: BuildContext) -> None:
        """Bump ``version`` in every manifest that exists, keeping its layout."""
        manifests = [ctx.path(name) for name in ctx.settings.files.manifests]
        present = [path for path in manifests if path.is_file()]
        if not present:
            raise ActionFailure(
                "No package descriptor found: " + ", ".join(ctx.settings.files.manifests)
            )
        for path in present:
            text = path.read_text(encoding="utf-8")
            data = read_json(path)
            current = str(data.get("version", ""))
            try:
                data["version"] = bump_version(current, ctx.bump)
            except ValueError as exc:
                raise ActionFailure(f"{path.name}: {exc}") from exc
            rendered = json.dumps(data, indent=detect_indent(text), ensure_ascii=False)
            if text.endswith("\n"):
                rendered += "\n"
            path.write_text(rendered, encoding="utf-8")
            self.logger.info("Bumped %s to %s (%s)", path.name, data["version"], ctx.bump.value)

    def metadata(self, ctx: BuildContext) -> dict[str, str]:
        return {"date": ctx.timestamp, "version": ctx.tag}

    def meta(self, ctx: BuildContext) -> None:
        """Write tmp/metadata.json and its JSONP twin tmp/metadata.js."""
        payload = json.dumps(self.metadata(ctx), indent=4)
        ctx.tmp_dir.mkdir(parents=True, exist_ok=True)
        (ctx.tmp_dir / "metadata.json").write_text(payload, encoding="utf-8")
        (ctx.tmp_dir / "metadata.js").write_text(f"__metadata({payload});", encoding="utf-8")
