"""File hasher streaming a single file through a reusable hash state."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import SETTINGS
from . import HashResult, HashState, ReadFailure

_LOGGER = logging.getLogger(__name__)


@dataclass
class FileHasher:
    """Compute the hex digest of one file at a time."""

    chunk_size: int = SETTINGS.chunk_size_bytes

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk size must be positive, got {self.chunk_size}")

    def _open(self, path: str):
        return open(path, "rb")

    def digest(self, state: HashState, path: str) -> HashResult:
        state.reset()
        try:
            handle = self._open(path)
        except OSError as exc:
            return HashResult(path=path, error=ReadFailure(path, exc))

        result = HashResult(path=path)
        try:
            for chunk in iter(lambda: handle.read(self.chunk_size), b""):
                state.update(chunk)
            result.hexdigest = state.hexdigest()
        except OSError as exc:
            result.error = ReadFailure(path, exc)
        finally:
            try:
                handle.close()
            except OSError as exc:
                result.close_error = exc
        _LOGGER.debug("hashed %s with %s: %s", path, state.name, result.hexdigest)
        return result
