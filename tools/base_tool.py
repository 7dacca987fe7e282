"""Base tool interface for task actions."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from planner.task_graph import TaskAction


class BaseTool(ABC):
    """Groups related task actions behind one named tool.

    Every action takes the run's ``BuildContext``, returns on success and
    raises on failure.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logging.getLogger(f"rk.tools.{name}")

    @abstractmethod
    def actions(self) -> dict[str, TaskAction]:
        """Map task names to the callables this tool provides."""
