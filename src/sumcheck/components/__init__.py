"""Component interfaces for the sumcheck tool."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


class SumcheckError(Exception):
    """Base class for errors raised by sumcheck components."""


class UnsupportedAlgorithm(SumcheckError, ValueError):
    """Raised when an algorithm token is not in the supported set."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unsupported hash algorithm {name}")
        self.name = name


def describe_os_error(exc: OSError) -> str:
    """Return the OS message without the repr of the filename."""

    return exc.strerror or str(exc)


class ReadFailure(SumcheckError):
    """A file could not be opened or read while hashing."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"can't hash {path}: {describe_os_error(cause)}")
        self.path = path
        self.cause = cause


class MalformedLineError(SumcheckError, ValueError):
    """A manifest line has no two-space separator."""

    def __init__(self, line: str) -> None:
        super().__init__("bad input line")
        self.line = line


class HashState(Protocol):
    """Streaming digest accumulator that can be reset and reused."""

    name: str

    @property
    def digest_size(self) -> int:
        ...

    def update(self, data: bytes) -> None:
        ...

    def hexdigest(self) -> str:
        ...

    def reset(self) -> None:
        ...


@dataclass
class HashResult:
    """Outcome of hashing a single file.

    ``close_error`` is a secondary warning: it is reported alongside a digest
    that was otherwise computed successfully and never replaces it.
    """

    path: str
    hexdigest: Optional[str] = None
    error: Optional[ReadFailure] = None
    close_error: Optional[OSError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.hexdigest is not None

    def describe_close_error(self) -> str:
        return f"error closing {self.path}: {self.close_error}"


@dataclass(frozen=True)
class ManifestEntry:
    """A parsed ``<digest>  <path>`` manifest line."""

    digest: str
    path: str

    def format(self) -> str:
        return f"{self.digest}  {self.path}"


@dataclass
class RunSummary:
    files: int = 0
    ok: int = 0
    failed: int = 0


class IntegrityLog(Protocol):
    def open(self) -> None:
        ...

    def record(self, event: str, **context) -> None:
        ...

    def close(self) -> None:
        ...
