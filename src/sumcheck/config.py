"""Configuration helpers for the sumcheck tool."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


def _optional_path(raw: Optional[str]) -> Optional[Path]:
    return Path(raw).expanduser() if raw else None


@dataclass(frozen=True)
class Settings:
    """Runtime defaults derived from environment variables."""

    default_algorithm: str = os.getenv("SUMCHECK_ALGORITHM", "sha256")
    chunk_size_kb: int = int(os.getenv("SUMCHECK_CHUNK_SIZE_KB", "1024"))
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")
    log_file: Optional[Path] = _optional_path(os.getenv("SUMCHECK_LOG_FILE"))

    @property
    def chunk_size_bytes(self) -> int:
        return self.chunk_size_kb * 1024


SETTINGS = Settings()


@dataclass(frozen=True)
class RunConfig:
    """Options for a single invocation, fixed once the command line is parsed."""

    algorithm: str
    check: bool
    paths: Tuple[str, ...]
    chunk_size: int = SETTINGS.chunk_size_bytes
    log_file: Optional[Path] = SETTINGS.log_file

    @property
    def mode(self) -> str:
        return "verify" if self.check else "generate"
