"""Command line interface for sumcheck."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .components import UnsupportedAlgorithm, describe_os_error
from .components.digest_provider import ALGORITHMS, select
from .components.file_hasher import FileHasher
from .components.integrity_log import JsonlIntegrityLog, NullIntegrityLog
from .config import SETTINGS, RunConfig
from .orchestrator import Orchestrator

EXIT_OK = 0
EXIT_NO_INPUT = 1
# argparse also exits with this status on usage errors.
EXIT_USAGE = 2
EXIT_UNSUPPORTED_ALGORITHM = 3
EXIT_FAILURES = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sumcheck",
        usage="%(prog)s [OPTION]... [FILE]...",
        description="Print or check file checksums.",
        epilog=f"Algorithms supported: {' '.join(ALGORITHMS)}",
    )
    parser.add_argument(
        "-a",
        "--algorithm",
        default=SETTINGS.default_algorithm,
        help="algorithm to use (default: %(default)s)",
    )
    parser.add_argument(
        "-c",
        "--check",
        action="store_true",
        help="read checksums from the file(s) and check them",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=SETTINGS.log_file,
        help="append JSON-lines audit events to this file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("files", nargs="*", metavar="FILE")
    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, SETTINGS.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def build_orchestrator(config: RunConfig) -> Orchestrator:
    """Wire the components for ``config``.

    Raises :class:`UnsupportedAlgorithm` for an unknown algorithm, ``ValueError``
    for a non-positive chunk size and ``OSError`` when the log file cannot be opened.
    """

    state = select(config.algorithm)
    hasher = FileHasher(chunk_size=config.chunk_size)
    integrity = JsonlIntegrityLog(log_file=config.log_file) if config.log_file else NullIntegrityLog()
    integrity.open()
    return Orchestrator(
        config=config,
        state=state,
        hasher=hasher,
        integrity_log=integrity,
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    config = RunConfig(
        algorithm=args.algorithm,
        check=args.check,
        paths=tuple(args.files),
        chunk_size=SETTINGS.chunk_size_bytes,
        log_file=args.log_file,
    )
    try:
        orchestrator = build_orchestrator(config)
    except UnsupportedAlgorithm as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_UNSUPPORTED_ALGORITHM
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE
    except OSError as exc:
        print(f"can't open log file {config.log_file}: {describe_os_error(exc)}", file=sys.stderr)
        return EXIT_USAGE

    try:
        if not config.paths:
            print("no input files specified", file=sys.stderr)
            return EXIT_NO_INPUT
        failures = orchestrator.run()
    finally:
        orchestrator.integrity_log.close()
    return EXIT_FAILURES if failures else EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
