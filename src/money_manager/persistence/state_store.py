"""Persist and load calculator session snapshots."""

from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from money_manager.calculator.models import SessionSnapshot
from money_manager.persistence.codec import decode_snapshot, encode_snapshot

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def validate_session_key(session_key: str) -> str:
    if not isinstance(session_key, str) or not _KEY_PATTERN.match(session_key) or session_key in {".", ".."}:
        raise ValueError(f"Invalid session key: {session_key!r}")
    return session_key


class JsonStateStore:
    """One JSON document per session key under ``root``.

    Saves are full upserts, so writing the same snapshot twice is harmless.
    Undo/redo stacks are only written when ``include_history`` is set.
    """

    def __init__(self, root: str | Path, include_history: bool = False) -> None:
        self.root = Path(root)
        self.include_history = include_history

    def path_for(self, session_key: str) -> Path:
        return self.root / f"{validate_session_key(session_key)}.json"

    def load_snapshot(self, session_key: str) -> Optional[SessionSnapshot]:
        path = self.path_for(session_key)
        if not path.exists():
            return None
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Snapshot {path} must be a mapping")
        return decode_snapshot(data)

    def save_snapshot(self, session_key: str, snapshot: SessionSnapshot) -> Path:
        path = self.path_for(session_key)
        payload = encode_snapshot(snapshot, include_history=self.include_history)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, allow_nan=False)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        return path

    def delete_snapshot(self, session_key: str) -> bool:
        path = self.path_for(session_key)
        if not path.exists():
            return False
        path.unlink()
        return True
