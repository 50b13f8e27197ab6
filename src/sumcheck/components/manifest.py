"""Manifest line protocol: ``<hex-digest><two spaces><path>``."""
from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from . import MalformedLineError, ManifestEntry

SEPARATOR = "  "


def parse_line(line: str) -> ManifestEntry:
    """Split ``line`` at the first two-space run.

    Everything after the separator is the path, kept verbatim, so paths may
    contain runs of spaces or leading/trailing whitespace.
    """

    index = line.find(SEPARATOR)
    if index < 0:
        raise MalformedLineError(line)
    return ManifestEntry(digest=line[:index], path=line[index + len(SEPARATOR):])


def format_line(digest: str, path: str) -> str:
    return ManifestEntry(digest=digest, path=path).format()


def _strip_terminator(raw: str) -> str:
    if raw.endswith("\n"):
        raw = raw[:-1]
        if raw.endswith("\r"):
            raw = raw[:-1]
    return raw


def iter_manifest_lines(handle: Iterable[str]) -> Iterator[Tuple[int, str]]:
    """Yield ``(lineno, text)`` pairs, numbered from 1, without line terminators."""

    for lineno, raw in enumerate(handle, start=1):
        yield lineno, _strip_terminator(raw)
