"""Sources of randomness for nonces and initialization vectors.

Signers and packers receive a :class:`RandomSource` instead of calling a
module-level generator, so tests and fixtures can substitute fixed values
without touching the production code path.
"""
from __future__ import annotations

import secrets
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Capability supplying nonce integers and IV bytes."""

    def randbelow(self, upper: int) -> int:
        """Return a random integer in ``[0, upper)``."""
        ...

    def token_bytes(self, size: int) -> bytes:
        """Return *size* random bytes."""
        ...


class SystemRandomSource:
    """Cryptographically secure source backed by :mod:`secrets`.

    The operating system CSPRNG is safe to share between threads.
    """

    def randbelow(self, upper: int) -> int:
        return secrets.randbelow(upper)

    def token_bytes(self, size: int) -> bytes:
        return secrets.token_bytes(size)

    def __repr__(self) -> str:
        return "SystemRandomSource()"


class StaticRandomSource:
    """Deterministic source returning fixed values.

    Parameters
    ----------
    nonce:
        Integer returned by every :meth:`randbelow` call. Must lie in the
        requested range.
    iv:
        Bytes returned by :meth:`token_bytes`. Must have the requested size.
    """

    def __init__(self, nonce: int = 0, iv: bytes = bytes(16)) -> None:
        self._nonce = nonce
        self._iv = iv

    def randbelow(self, upper: int) -> int:
        if not 0 <= self._nonce < upper:
            raise ValueError(f"fixed nonce {self._nonce} outside [0, {upper})")
        return self._nonce

    def token_bytes(self, size: int) -> bytes:
        if len(self._iv) != size:
            raise ValueError(f"fixed IV has {len(self._iv)} bytes, {size} requested")
        return self._iv

    def __repr__(self) -> str:
        return f"StaticRandomSource(nonce={self._nonce!r})"


DEFAULT_RANDOM_SOURCE: RandomSource = SystemRandomSource()

__all__ = ["DEFAULT_RANDOM_SOURCE", "RandomSource", "StaticRandomSource", "SystemRandomSource"]
