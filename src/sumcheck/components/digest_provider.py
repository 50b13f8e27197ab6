"""Digest provider mapping algorithm tokens to reusable hash states."""
from __future__ import annotations

import hashlib
import zlib
from dataclasses import dataclass, field
from typing import Any, Dict

from . import HashState, UnsupportedAlgorithm

# Token -> hashlib constructor name. Order matches the usage text.
_HASHLIB_NAMES: Dict[str, str] = {
    "md5": "md5",
    "sha1": "sha1",
    "sha224": "sha224",
    "sha256": "sha256",
    "sha384": "sha384",
    "sha512": "sha512",
    "sha512224": "sha512_224",
    "sha512256": "sha512_256",
}

ALGORITHMS = ("crc32",) + tuple(_HASHLIB_NAMES)


@dataclass
class HashlibState(HashState):
    """Wrap a :mod:`hashlib` object with an explicit ``reset``.

    ``hashlib`` objects cannot be cleared, so a pristine copy is taken once at
    construction and cloned on every reset.
    """

    name: str
    _pristine: Any = field(repr=False)
    _current: Any = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        self.reset()

    @property
    def digest_size(self) -> int:
        return self._pristine.digest_size

    def update(self, data: bytes) -> None:
        self._current.update(data)

    def hexdigest(self) -> str:
        return self._current.hexdigest()

    def reset(self) -> None:
        self._current = self._pristine.copy()


@dataclass
class Crc32State(HashState):
    """IEEE CRC-32 accumulator backed by :func:`zlib.crc32`."""

    name: str = "crc32"
    _value: int = field(init=False, repr=False, default=0)

    @property
    def digest_size(self) -> int:
        return 4

    def update(self, data: bytes) -> None:
        self._value = zlib.crc32(data, self._value)

    def hexdigest(self) -> str:
        return f"{self._value & 0xFFFFFFFF:08x}"

    def reset(self) -> None:
        self._value = 0


def select(name: str) -> HashState:
    """Return a fresh hash state for ``name`` or raise :class:`UnsupportedAlgorithm`."""

    if name == "crc32":
        return Crc32State()
    try:
        hashlib_name = _HASHLIB_NAMES[name]
    except KeyError:
        raise UnsupportedAlgorithm(name) from None
    return HashlibState(name=name, _pristine=hashlib.new(hashlib_name))
