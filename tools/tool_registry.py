"""Tool wiring and the static release task graph."""

from __future__ import annotations

from dataclasses import dataclass

from planner.task_graph import TaskRegistry
from tools.base_tool import BaseTool
from tools.dev_tools.git_tool import GitTool
from tools.dev_tools.test_runner import TestRunnerTool
from tools.release_tools.banner_tool import BannerTool
from tools.release_tools.version_tool import VersionTool
from tools.system_tools.file_tool import FileTool

GUARDS = ["fail-if-not-branch", "fail-if-dirty"]

# name -> (dependencies, description)
TASK_GRAPH: dict[str, tuple[list[str | list[str]], str]] = {
    "clean": ([], "Delete the dist directory."),
    "tmp-clean": ([], "Delete the tmp staging directory."),
    "tmp-create": ([], "Create the tmp staging directory."),
    "tmp-copy": (["tmp-create"], "Copy dist files into tmp."),
    "zip": (["tmp-create"], "Archive dist files into tmp/<out>.zip."),
    "meta": (["tmp-create"], "Write tmp/metadata.json and tmp/metadata.js."),
    "copy": ([], "Copy source files into dist."),
    "minify": ([], "Minify source files into dist."),
    "header": ([], "Prepend the license banner to dist scripts."),
    "bump": ([], "Bump the version in the package manifests."),
    "license": ([], "Update the copyright year in license files."),
    "lint": ([], "Lint the sources."),
    "test-dev": ([], "Run the test suite against the sources."),
    "test-dist": ([], "Run the test suite against the built files."),
    "fail-if-dirty": ([], "Fail when the working tree has uncommitted changes."),
    "fail-if-not-branch": ([], "Fail when HEAD is not the release branch."),
    "git-pull": ([], "Pull the release branch."),
    "git-add": ([], "Stage every change."),
    "git-commit": (["git-add"], "Commit the build."),
    "git-tag": ([], "Tag the current version."),
    "git-push": (["git-commit"], "Push the release branch with tags."),
    "gh-pages": ([], "Publish tmp into the pages branch releases."),
    "test": (["lint", "test-dev"], "Lint and test the sources."),
    "build": (
        ["lint", "test-dev", "clean", "copy", "minify", "header", "test-dist"],
        "Build dist from the sources.",
    ),
    "publish": (
        [GUARDS, "tmp-create", "tmp-copy", "meta", "zip", "gh-pages", "tmp-clean"],
        "Publish the built files to the pages branch.",
    ),
    "release": (
        [
            GUARDS,
            "git-pull",
            "lint",
            "test",
            "bump",
            "license",
            "clean",
            "copy",
            "minify",
            "header",
            "git-add",
            "git-commit",
            "git-tag",
            "git-push",
            "publish",
        ],
        "Bump, build, tag, push and publish a release.",
    ),
}


@dataclass
class RegisteredTool:
    """Metadata for tool listing output."""

    name: str
    tasks: list[str]


def default_tools() -> list[BaseTool]:
    return [FileTool(), TestRunnerTool(), VersionTool(), BannerTool(), GitTool()]


def list_tools(tools: list[BaseTool]) -> list[RegisteredTool]:
    return [RegisteredTool(name=tool.name, tasks=sorted(tool.actions())) for tool in tools]


def build_release_registry(tools: list[BaseTool] | None = None) -> TaskRegistry:
    """Register every release task, binding actions from the given tools."""
    actions = {}
    for tool in tools if tools is not None else default_tools():
        actions.update(tool.actions())

    registry = TaskRegistry()
    for name, (dependencies, description) in TASK_GRAPH.items():
        registry.register(
            name,
            dependencies=dependencies,
            action=actions.get(name),
            description=description,
        )
    return registry
