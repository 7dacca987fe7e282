"""Command execution wrapper."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from core.errors import ActionFailure

logger = logging.getLogger("rk.command")


@dataclass
class CommandResult:
    """Outcome of one external command."""

    command: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return (self.stdout + self.stderr).strip()


def run_command(
    command: Sequence[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run command and capture its output. A missing executable reports 127."""
    args = [str(part) for part in command]
    logger.debug("$ %s", shlex.join(args))
    try:
        proc = subprocess.run(args, cwd=cwd, env=env, capture_output=True, text=True)
    except OSError as exc:
        return CommandResult(command=args, returncode=127, stdout="", stderr=str(exc))
    return CommandResult(
        command=args,
        returncode=proc.returncode,
        stdout=proc.stdout,
        stderr=proc.stderr,
    )


class CommandExecutor:
    """Runs external commands from the project root."""

    def __init__(self, cwd: Path, env: dict[str, str] | None = None) -> None:
        self.cwd = cwd
        self.env = env

    def run(self, command: Sequence[str]) -> CommandResult:
        return run_command(command, cwd=self.cwd, env=self.env)

    def check(self, command: Sequence[str]) -> CommandResult:
        """Run command and raise ActionFailure on a non-zero exit."""
        result = self.run(command)
        if not result.ok:
            detail = result.output or f"exit code {result.returncode}"
            raise ActionFailure(f"`{shlex.join(result.command)}` failed: {detail}")
        return result

    def chain(self, commands: Sequence[Sequence[str]]) -> list[CommandResult]:
        """Run commands in order, stopping at the first failure."""
        return [self.check(command) for command in commands]
