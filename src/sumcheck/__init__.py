"""Package exposing the sumcheck digest generation and verification helpers."""

from __future__ import annotations

from importlib import metadata as importlib_metadata


def _detect_version() -> str:
    """Return the installed package version if available."""

    package_name = "sumcheck"
    try:
        return importlib_metadata.version(package_name)
    except importlib_metadata.PackageNotFoundError:
        # Fallback for editable installs / direct source execution. Keep in sync
        # with ``pyproject.toml``.
        return "0.2.0"


__all__ = ["__version__"]
__version__ = _detect_version()
