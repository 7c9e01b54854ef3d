"""Exceptions raised while building master signatures and secure tokens.

Every failure is fatal to the call that raised it; nothing is retried.
"""
from __future__ import annotations


class MasterKeyError(Exception):
    """Base class for all ninchat-master errors."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class InvalidKey(MasterKeyError):
    """Raised when the master key secret is not usable."""

    def __str__(self) -> str:
        return f"Ninchat master key is invalid: {self.reason}"


class SerializationError(MasterKeyError):
    """Raised when a message or metadata object cannot be encoded as JSON."""

    def __str__(self) -> str:
        return f"JSON encoding failed: {self.reason}"


class EncryptionError(MasterKeyError):
    """Raised when cipher setup, IV generation or encryption fails."""

    def __str__(self) -> str:
        return f"Encryption error: {self.reason}"


__all__ = [
    "EncryptionError",
    "InvalidKey",
    "MasterKeyError",
    "SerializationError",
]
