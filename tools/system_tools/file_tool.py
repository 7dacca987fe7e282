"""Project-local file tasks: clean, copy, staging and archive."""

from __future__ import annotations

import shutil
import zipfile
from pathlib import Path

from core.build_context import BuildContext
from core.errors import ActionFailure
from tools.base_tool import BaseTool


def remove_path(target: Path) -> bool:
    """Delete a file or directory tree. Returns False when nothing was there."""
    if target.is_symlink() or target.is_file():
        target.unlink()
        return True
    if target.is_dir():
        shutil.rmtree(target)
        return True
    return False


class FileTool(BaseTool):
    """Deletes, copies and packages files inside the project root."""

    def __init__(self) -> None:
        super().__init__("file_tool")

    def actions(self):
        return {
            "clean": self.clean,
            "tmp-clean": self.tmp_clean,
            "tmp-create": self.tmp_create,
            "copy": self.copy_sources,
            "tmp-copy": self.tmp_copy,
            "zip": self.zip_dist,
        }

    def _resolve_target(self, ctx: BuildContext, target: Path) -> Path:
        resolved = target.resolve()
        try:
            resolved.relative_to(ctx.root.resolve())
        except ValueError as exc:
            raise ActionFailure(f"Path traversal blocked: {resolved} is outside project.") from exc
        return resolved

    def clean(self, ctx: BuildContext) -> None:
        target = self._resolve_target(ctx, ctx.dist_dir)
        if remove_path(target):
            self.logger.info("Deleted %s", target)

    def tmp_clean(self, ctx: BuildContext) -> None:
        target = self._resolve_target(ctx, ctx.tmp_dir)
        if remove_path(target):
            self.logger.info("Deleted %s", target)

    def tmp_create(self, ctx: BuildContext) -> None:
        self._resolve_target(ctx, ctx.tmp_dir).mkdir(parents=True, exist_ok=True)

    def copy_sources(self, ctx: BuildContext) -> None:
        dist = self._resolve_target(ctx, ctx.dist_dir)
        dist.mkdir(parents=True, exist_ok=True)
        for source_name in ctx.settings.files.sources:
            source = self._resolve_target(ctx, ctx.path(source_name))
            if not source.is_file():
                raise ActionFailure(f"Source file not found: {source_name}")
            shutil.copy2(source, dist / source.name)
            self.logger.debug("Copied %s -> %s", source_name, dist / source.name)

    def tmp_copy(self, ctx: BuildContext) -> None:
        dist = self._resolve_target(ctx, ctx.dist_dir)
        tmp = self._resolve_target(ctx, ctx.tmp_dir)
        tmp.mkdir(parents=True, exist_ok=True)
        for path in sorted(dist.glob("*")):
            if path.is_file():
                shutil.copy2(path, tmp / path.name)

    def zip_dist(self, ctx: BuildContext) -> None:
        """Archive every file in dist/ flat into tmp/<out>.zip."""
        dist = self._resolve_target(ctx, ctx.dist_dir)
        tmp = self._resolve_target(ctx, ctx.tmp_dir)
        tmp.mkdir(parents=True, exist_ok=True)
        archive = tmp / f"{ctx.settings.files.out}.zip"
        files = [path for path in sorted(dist.glob("*")) if path.is_file()]
        if not files:
            raise ActionFailure(f"Nothing to archive in {dist}")
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in files:
                zf.write(path, arcname=path.name)
        self.logger.info("Wrote %s (%d files)", archive.name, len(files))
