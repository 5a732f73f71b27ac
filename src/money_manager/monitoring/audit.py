"""Append-only audit log for calculator session events."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


class AuditLog:
    def __init__(
        self,
        path: str | Path,
        run_id: Optional[str] = None,
        config_hash: Optional[str] = None,
    ) -> None:
        self.path = Path(path)
        self.run_id = run_id
        self.config_hash = config_hash
        self._lock = threading.Lock()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, event: str, payload: dict[str, Any]) -> None:
        record = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "run_id": self.run_id,
            "config_hash": self.config_hash,
            "event": event,
            "payload": payload,
        }
        line = json.dumps(record, default=str)
        # Autosave writes from a timer thread.
        with self._lock, self.path.open("a", encoding="utf-8") as handle:
            handle.write(line)
            handle.write("\n")

    def read(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        records = []
        for line in self.path.read_text(encoding="utf-8").splitlines():
            if line.strip():
                records.append(json.loads(line))
        return records
