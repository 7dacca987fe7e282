"""Structured JSONL audit log of task events."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from core.event_bus import EventBus


class AuditLogger:
    """Writes task lifecycle events as JSON lines."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.run_id = uuid.uuid4().hex[:12]
        self.logger = logging.getLogger("rk.audit")
        self._lock = threading.Lock()

    def attach(self, event_bus: EventBus) -> None:
        event_bus.subscribe_all(self.log)

    def log(self, event_name: str, payload: dict[str, Any]) -> None:
        """Append one JSONL audit event."""
        event = {
            "timestamp": datetime.now(UTC).isoformat(),
            "run_id": self.run_id,
            "event": event_name,
            **payload,
        }
        line = json.dumps(event, ensure_ascii=True, default=str)
        with self._lock:
            with self.log_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        self.logger.debug(line)
