"""Git and JS toolchain tasks with the command executor mocked out."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, call

import pytest

from core.build_context import BuildContext
from core.errors import ActionFailure, PreconditionFailure
from fakes import failed, ok
from tools.dev_tools.git_tool import GitTool
from tools.dev_tools.test_runner import TestRunnerTool, render_command


def test_fail_if_dirty(ctx: BuildContext, commands: MagicMock) -> None:
    commands.check.return_value = ok(":100644 100644 abc def M\tsrc/needle.js\n")

    with pytest.raises(PreconditionFailure, match="Repository is dirty"):
        GitTool().fail_if_dirty(ctx)
    commands.check.assert_called_once_with(["git", "diff-index", "HEAD", "--"])


def test_clean_tree_passes(ctx: BuildContext, commands: MagicMock) -> None:
    GitTool().fail_if_dirty(ctx)


def test_fail_if_not_branch(ctx: BuildContext, commands: MagicMock) -> None:
    tool = GitTool()

    commands.run.return_value = ok("refs/heads/master\n")
    tool.fail_if_not_branch(ctx)

    commands.run.return_value = ok("refs/heads/feature\n")
    with pytest.raises(PreconditionFailure, match="Branch is not master"):
        tool.fail_if_not_branch(ctx)

    commands.run.return_value = failed(returncode=1)
    with pytest.raises(PreconditionFailure, match="detached"):
        tool.fail_if_not_branch(ctx)


def test_commit_tag_push_use_current_version(ctx: BuildContext, commands: MagicMock) -> None:
    tool = GitTool()

    tool.commit(ctx)
    tool.tag(ctx)
    tool.push(ctx)

    assert commands.check.call_args_list == [
        call(["git", "commit", "-m", "Build v1.2.3"]),
        call(["git", "tag", "v1.2.3"]),
        call(["git", "push", "origin", "master", "--tags"]),
    ]


def test_publish_pages_copies_release(ctx: BuildContext, commands: MagicMock, project: Path) -> None:
    tmp = project / "tmp"
    tmp.mkdir()
    (tmp / "needle.js").write_text("x", encoding="utf-8")

    GitTool().publish_pages(ctx)

    assert (project / "releases" / "1.2.3" / "needle.js").is_file()
    assert (project / "releases" / "latest" / "needle.js").is_file()
    checks = [c.args[0] for c in commands.check.call_args_list]
    assert checks[0] == ["git", "checkout", "gh-pages"]
    assert ["git", "add", "-A", "releases/1.2.3"] in checks
    commands.run.assert_called_once_with(["git", "checkout", "-"])
    commands.chain.assert_called_once_with(
        [
            ["git", "commit", "-m", "Publish release v1.2.3."],
            ["git", "push", "origin", "gh-pages"],
        ]
    )


def test_publish_pages_returns_to_branch_on_failure(
    ctx: BuildContext, commands: MagicMock, project: Path
) -> None:
    (project / "tmp").mkdir()
    commands.chain.side_effect = ActionFailure("push rejected")

    with pytest.raises(ActionFailure, match="push rejected"):
        GitTool().publish_pages(ctx)
    commands.run.assert_called_once_with(["git", "checkout", "-"])


def test_publish_pages_keeps_original_error_when_checkout_fails(
    ctx: BuildContext, commands: MagicMock, project: Path
) -> None:
    (project / "tmp").mkdir()
    commands.chain.side_effect = ActionFailure("push rejected")
    commands.run.return_value = failed("error: you have local changes")

    with pytest.raises(ActionFailure, match="push rejected"):
        GitTool().publish_pages(ctx)


def test_publish_pages_reports_failed_checkout_after_success(
    ctx: BuildContext, commands: MagicMock, project: Path
) -> None:
    (project / "tmp").mkdir()
    commands.run.return_value = failed("error: you have local changes")

    with pytest.raises(ActionFailure, match="checkout -"):
        GitTool().publish_pages(ctx)
    commands.chain.assert_called_once()


def test_publish_pages_needs_staging(ctx: BuildContext, commands: MagicMock) -> None:
    with pytest.raises(ActionFailure, match="Nothing staged"):
        GitTool().publish_pages(ctx)
    commands.check.assert_not_called()


def test_render_command() -> None:
    assert render_command(["uglifyjs", "{source}", "-o", "{target}"], source="a.js", target="b.js") == [
        "uglifyjs",
        "a.js",
        "-o",
        "b.js",
    ]
    with pytest.raises(ActionFailure):
        render_command(["{missing}"])


def test_minify_runs_per_source(ctx: BuildContext, commands: MagicMock) -> None:
    TestRunnerTool().minify(ctx)

    issued = [c.args[0] for c in commands.check.call_args_list]
    assert len(issued) == 2
    assert "src/needle.js" in issued[0]
    assert "dist/needle.min.js" in issued[0]
    assert "dist/needle.lite.min.js" in issued[1]


def test_lint_and_tests_use_configured_commands(ctx: BuildContext, commands: MagicMock) -> None:
    tool = TestRunnerTool()

    tool.lint(ctx)
    tool.test_dev(ctx)
    tool.test_dist(ctx)

    issued = [c.args[0] for c in commands.check.call_args_list]
    assert issued == [
        ctx.settings.commands.lint,
        ctx.settings.commands.test_dev,
        ctx.settings.commands.test_dist,
    ]
