"""Batch driver for the generate and verify modes."""
from __future__ import annotations

import logging
import os
import stat
import sys
from dataclasses import dataclass, field
from typing import IO, Iterable, Iterator

from .components import (
    HashResult,
    HashState,
    IntegrityLog,
    MalformedLineError,
    RunSummary,
    describe_os_error,
)
from .components.file_hasher import FileHasher
from .components.integrity_log import NullIntegrityLog
from .components.manifest import format_line, iter_manifest_lines, parse_line
from .config import RunConfig

_LOGGER = logging.getLogger(__name__)


@dataclass
class Orchestrator:
    config: RunConfig
    state: HashState
    hasher: FileHasher
    integrity_log: IntegrityLog = field(default_factory=NullIntegrityLog)
    out: IO[str] = field(default_factory=lambda: sys.stdout)
    err: IO[str] = field(default_factory=lambda: sys.stderr)
    summary: RunSummary = field(default_factory=RunSummary)
    _traversal_errors: int = field(init=False, repr=False, default=0)

    def run(self) -> int:
        """Run the mode selected by the configuration and return the failure count."""

        self.integrity_log.record(
            "run_start",
            mode=self.config.mode,
            algorithm=self.state.name,
            inputs=len(self.config.paths),
        )
        if self.config.check:
            failures = self.verify(self.config.paths)
        else:
            failures = self.generate(self.config.paths)
        self.integrity_log.record(
            "run_complete",
            mode=self.config.mode,
            files=self.summary.files,
            ok=self.summary.ok,
            failed=self.summary.failed,
            failures=failures,
        )
        return failures

    # ------------------------------------------------------------------
    # Reporting helpers
    # ------------------------------------------------------------------
    def _emit(self, line: str) -> None:
        print(line, file=self.out)

    def _warn(self, message: str) -> None:
        print(message, file=self.err)

    def _hash(self, path: str) -> HashResult:
        self.summary.files += 1
        return self.hasher.digest(self.state, path)

    # ------------------------------------------------------------------
    # Generate mode
    # ------------------------------------------------------------------
    def _walk(self, directory: str) -> Iterator[str]:
        """Yield every non-directory entry under ``directory``, depth first in name order.

        Listing errors are reported and counted through ``self._traversal_errors``
        so the walk carries on with the remaining entries.
        """

        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            self._warn(f"can't read directory {directory}: {describe_os_error(exc)}")
            self._traversal_errors += 1
            return
        for entry in entries:
            path = os.path.join(directory, entry.name)
            if entry.is_dir(follow_symlinks=False):
                _LOGGER.debug("descending into %s", path)
                yield from self._walk(path)
            else:
                yield path

    def _expand(self, paths: Iterable[str]) -> Iterator[str]:
        for path in paths:
            try:
                info = os.stat(path)
            except OSError as exc:
                self._warn(f"can't stat {path}: {describe_os_error(exc)}")
                self._traversal_errors += 1
                continue
            if stat.S_ISDIR(info.st_mode):
                yield from self._walk(path)
            else:
                yield path

    def generate(self, paths: Iterable[str]) -> int:
        """Hash every file named by ``paths`` (recursing into directories)."""

        failures = 0
        self._traversal_errors = 0
        for path in self._expand(paths):
            result = self._hash(path)
            if not result.ok:
                self._warn(str(result.error))
                self.integrity_log.record("file_failed", path=path, error=str(result.error))
                self.summary.failed += 1
                failures += 1
                continue
            self._emit(format_line(result.hexdigest, path))
            self.summary.ok += 1
            self.integrity_log.record("file_hashed", path=path, digest=result.hexdigest)
            if result.close_error is not None:
                self._warn(result.describe_close_error())
                self.summary.failed += 1
                failures += 1
        return failures + self._traversal_errors

    # ------------------------------------------------------------------
    # Verify mode
    # ------------------------------------------------------------------
    def _check_manifest(self, manifest: str, handle: IO[str]) -> int:
        """Verify one open manifest and return the number of failures it produced.

        Malformed lines and unreadable targets stop this manifest; mismatches do not.
        """

        failures = 0
        lines = iter_manifest_lines(handle)
        while True:
            try:
                lineno, text = next(lines)
            except StopIteration:
                break
            except OSError as exc:
                self._warn(f"error reading {manifest}: {describe_os_error(exc)}")
                return failures + 1
            try:
                entry = parse_line(text)
            except MalformedLineError:
                self._warn(f"bad input line {lineno} of {manifest}")
                self.integrity_log.record(
                    "manifest_failed", manifest=manifest, line=lineno, reason="malformed"
                )
                return failures + 1

            result = self._hash(entry.path)
            if not result.ok:
                self._warn(f"can't check line {lineno} of {manifest}: {result.error}")
                self.integrity_log.record(
                    "manifest_failed", manifest=manifest, line=lineno, reason=str(result.error)
                )
                self.summary.failed += 1
                return failures + 1
            if result.close_error is not None:
                self._warn(result.describe_close_error())
                self.summary.failed += 1
                failures += 1

            matched = result.hexdigest == entry.digest
            self._emit(f"{entry.path}: {'OK' if matched else 'FAILED'}")
            self.integrity_log.record(
                "entry_verified", manifest=manifest, line=lineno, path=entry.path, ok=matched
            )
            if matched:
                self.summary.ok += 1
            else:
                self.summary.failed += 1
                failures += 1
        return failures

    def verify(self, manifests: Iterable[str]) -> int:
        """Check every manifest in turn and return the aggregate failure count."""

        failures = 0
        for manifest in manifests:
            try:
                handle = open(manifest, encoding="utf-8", errors="surrogateescape", newline="")
            except OSError as exc:
                self._warn(f"can't check {manifest}: {describe_os_error(exc)}")
                self.integrity_log.record("manifest_failed", manifest=manifest, reason=str(exc))
                failures += 1
                continue
            with handle:
                failures += self._check_manifest(manifest, handle)
        if failures:
            plural = "" if failures == 1 else "s"
            self._warn(f"WARNING: {failures} computed checksum{plural} did NOT match")
        return failures
