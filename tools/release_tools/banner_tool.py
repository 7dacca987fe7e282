"""License year and banner header tasks."""

from __future__ import annotations

import re

from core.build_context import BuildContext
from core.errors import ActionFailure
from tools.base_tool import BaseTool

COPYRIGHT_RE = re.compile(r"\(c\) (\d{4})")


def update_copyright_year(text: str, year: str) -> str:
    return COPYRIGHT_RE.sub(f"(c) {year}", text)


class BannerTool(BaseTool):
    """Keeps copyright years current and stamps dist scripts."""

    def __init__(self) -> None:
        super().__init__("banner_tool")

    def actions(self):
        return {
            "license": self.license,
            "header": self.header,
        }

    def license(self, ctx: BuildContext) -> None:
        for name in ctx.settings.files.license_files:
            path = ctx.path(name)
            if not path.is_file():
                self.logger.warning("Skipping missing license file %s", name)
                continue
            text = path.read_text(encoding="utf-8")
            updated = update_copyright_year(text, ctx.year)
            if updated != text:
                path.write_text(updated, encoding="utf-8")
                self.logger.info("Updated copyright year in %s", name)

    def render_banner(self, ctx: BuildContext) -> str:
        project = ctx.settings.project
        try:
            return ctx.settings.banner.template.format(
                name=project.name,
                author=project.author,
                homepage=project.homepage,
                year=ctx.year,
                version=ctx.version,
                datetime=ctx.timestamp,
            )
        except (KeyError, IndexError, ValueError) as exc:
            raise ActionFailure(f"Bad banner template: {exc}") from exc

    def header(self, ctx: BuildContext) -> None:
        banner = self.render_banner(ctx)
        scripts = sorted(ctx.dist_dir.glob("*.js"))
        for path in scripts:
            path.write_text(banner + path.read_text(encoding="utf-8"), encoding="utf-8")
        self.logger.info("Added banner to %d scripts", len(scripts))
