"""Git guard, commit/tag/push and pages publishing tasks."""

from __future__ import annotations

import shutil

from core.build_context import BuildContext
from core.errors import ActionFailure, PreconditionFailure
from tools.base_tool import BaseTool
from tools.system_tools.file_tool import remove_path


class GitTool(BaseTool):
    """Runs the git steps of a release from the project root."""

    def __init__(self) -> None:
        super().__init__("git_tool")

    def actions(self):
        return {
            "fail-if-dirty": self.fail_if_dirty,
            "fail-if-not-branch": self.fail_if_not_branch,
            "git-pull": self.pull,
            "git-add": self.add,
            "git-commit": self.commit,
            "git-tag": self.tag,
            "git-push": self.push,
            "gh-pages": self.publish_pages,
        }

    def fail_if_dirty(self, ctx: BuildContext) -> None:
        result = ctx.commands.check(["git", "diff-index", "HEAD", "--"])
        if result.stdout.strip():
            raise PreconditionFailure("Repository is dirty")

    def fail_if_not_branch(self, ctx: BuildContext) -> None:
        branch = ctx.settings.git.branch
        result = ctx.commands.run(["git", "symbolic-ref", "-q", "HEAD"])
        if not result.ok:
            raise PreconditionFailure(f"HEAD is detached, expected branch {branch}")
        if result.stdout.strip() != f"refs/heads/{branch}":
            raise PreconditionFailure(f"Branch is not {branch}")

    def pull(self, ctx: BuildContext) -> None:
        git = ctx.settings.git
        ctx.commands.check(["git", "pull", git.remote, git.branch])

    def add(self, ctx: BuildContext) -> None:
        ctx.commands.check(["git", "add", "-A"])

    def commit(self, ctx: BuildContext) -> None:
        ctx.commands.check(["git", "commit", "-m", f"Build {ctx.tag}"])

    def tag(self, ctx: BuildContext) -> None:
        ctx.commands.check(["git", "tag", ctx.tag])

    def push(self, ctx: BuildContext) -> None:
        git = ctx.settings.git
        ctx.commands.check(["git", "push", git.remote, git.branch, "--tags"])

    def publish_pages(self, ctx: BuildContext) -> None:
        """Copy tmp/ into releases/<version> and releases/latest on the pages branch."""
        git = ctx.settings.git
        version = ctx.version
        staged = ctx.tmp_dir
        if not staged.is_dir():
            raise ActionFailure(f"Nothing staged for publishing in {staged}")

        ctx.commands.check(["git", "checkout", git.pages_branch])
        try:
            for label in (version, "latest"):
                relative = f"{git.releases_dir}/{label}"
                target = ctx.path(relative)
                remove_path(target)
                shutil.copytree(staged, target)
                ctx.commands.check(["git", "add", "-A", relative])
            ctx.commands.chain(
                [
                    ["git", "commit", "-m", f"Publish release v{version}."],
                    ["git", "push", git.remote, git.pages_branch],
                ]
            )
        except Exception:
            self._checkout_previous(ctx, strict=False)
            raise
        self._checkout_previous(ctx, strict=True)
        self.logger.info("Published v%s to %s", version, git.pages_branch)

    def _checkout_previous(self, ctx: BuildContext, strict: bool) -> None:
        """Leave the pages branch; a failure only raises when nothing else did."""
        result = ctx.commands.run(["git", "checkout", "-"])
        if result.ok:
            return
        if strict:
            raise ActionFailure(f"`git checkout -` failed: {result.output}")
        self.logger.error("Could not return from the pages branch: %s", result.output)
