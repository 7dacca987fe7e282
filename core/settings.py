"""Typed release settings validated from merged YAML config."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BANNER = (
    "/*! {name} - Copyright (c) {year} {author}\n"
    " *  v{version} released {datetime}\n"
    " *  {homepage}\n"
    " */\n"
    "\n"
)


class BumpKind(str, Enum):
    """Semantic version component to increment on release."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class ProjectSettings(BaseModel):
    """Library metadata used in banners and archive names."""

    name: str = "Needle"
    author: str = "Jay Salvat"
    homepage: str = "http://needle.jaysalvat.com"


class BannerSettings(BaseModel):
    """License banner prepended to distributed scripts."""

    template: str = DEFAULT_BANNER
    date_format: str = "%Y-%m-%d %H:%M"


class FileSettings(BaseModel):
    """Source, manifest and license files the tasks touch."""

    sources: list[str] = Field(
        default_factory=lambda: ["src/needle.js", "src/needle.lite.js"]
    )
    out: str = "needle"
    manifests: list[str] = Field(
        default_factory=lambda: ["package.json", "bower.json"], min_length=1
    )
    license_files: list[str] = Field(default_factory=lambda: ["LICENSE", "README.md"])


class PathSettings(BaseModel):
    """Project-relative working directories."""

    src_dir: str = "src"
    dist_dir: str = "dist"
    tmp_dir: str = "tmp"
    audit_log_path: str | None = None


class GitSettings(BaseModel):
    """Branch and remote names used by the git tasks."""

    branch: str = "master"
    remote: str = "origin"
    pages_branch: str = "gh-pages"
    releases_dir: str = "releases"


class CommandSettings(BaseModel):
    """External command templates for the JS toolchain."""

    lint: list[str] = Field(default_factory=lambda: ["npx", "jshint", "src"])
    test_dev: list[str] = Field(
        default_factory=lambda: ["npx", "node-qunit-puppeteer", "tests/test-runner.html"]
    )
    test_dist: list[str] = Field(
        default_factory=lambda: ["npx", "node-qunit-puppeteer", "tests/test-runner-dist.html"]
    )
    minify: list[str] = Field(
        default_factory=lambda: [
            "npx",
            "uglifyjs",
            "{source}",
            "--compress",
            "--mangle",
            "--source-map",
            "--output",
            "{target}",
        ]
    )

    @field_validator("lint", "test_dev", "test_dist", "minify")
    @classmethod
    def _non_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("Command must contain at least the executable.")
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"


class ReleaseSettings(BaseModel):
    """Effective configuration for one project."""

    model_config = ConfigDict(frozen=True)

    project: ProjectSettings = Field(default_factory=ProjectSettings)
    banner: BannerSettings = Field(default_factory=BannerSettings)
    files: FileSettings = Field(default_factory=FileSettings)
    paths: PathSettings = Field(default_factory=PathSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    commands: CommandSettings = Field(default_factory=CommandSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    bump: BumpKind = BumpKind.PATCH

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ReleaseSettings:
        return cls.model_validate(config)
