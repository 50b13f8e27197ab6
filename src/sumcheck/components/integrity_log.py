"""Integrity log writing run events as JSON lines."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from . import IntegrityLog


@dataclass
class JsonlIntegrityLog(IntegrityLog):
    log_file: Path
    _file_handle: Any = field(init=False, repr=False, default=None)

    def _ensure_handle(self) -> None:
        if self._file_handle is None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = self.log_file.open("a", encoding="utf-8")

    def open(self) -> None:
        """Open the log file for appending, creating parent directories."""

        self._ensure_handle()

    def record(self, event: str, **context: Any) -> None:
        self._ensure_handle()
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "context": context,
        }
        self._file_handle.write(json.dumps(entry, default=str) + "\n")
        self._file_handle.flush()

    def close(self) -> None:
        if self._file_handle is not None:
            self._file_handle.close()
            self._file_handle = None


class NullIntegrityLog(IntegrityLog):
    """Discard events when no log file is configured."""

    def open(self) -> None:
        return None

    def record(self, event: str, **context: Any) -> None:
        return None

    def close(self) -> None:
        return None
