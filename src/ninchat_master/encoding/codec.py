"""Base64 codecs and the token format selector.

Two token text formats exist and a deployment must use exactly one of them,
matching what the verifying service expects:

``TokenFormat.DOTTED``
    Fields joined by ``.``; binary fields encoded as unpadded URL-safe
    base64 (``-_`` alphabet, no ``=``). This is the current format.
``TokenFormat.DASHED``
    Fields joined by ``-``; binary fields encoded as ordinary padded base64
    (``+/`` alphabet, with ``=``). This is the legacy format.
"""
from __future__ import annotations

import base64
import binascii
from enum import Enum

from ninchat_master.errors import InvalidKey


class TokenFormat(str, Enum):
    """Protocol version of the emitted token text."""

    DOTTED = "dotted"
    DASHED = "dashed"

    @property
    def delimiter(self) -> str:
        """Field separator used by this format."""
        return "." if self is TokenFormat.DOTTED else "-"


def b64encode(data: bytes, token_format: TokenFormat) -> str:
    """Encode *data* with the base64 variant of *token_format*."""
    if token_format is TokenFormat.DOTTED:
        return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")
    return base64.b64encode(data).decode("ascii")


def b64decode(text: str, token_format: TokenFormat) -> bytes:
    """Decode *text* produced by :func:`b64encode` with the same format.

    Raises
    ------
    binascii.Error
        When *text* is not valid base64 for the format.
    """
    if token_format is TokenFormat.DOTTED:
        padded = text + "=" * (-len(text) % 4)
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    return base64.b64decode(text, validate=True)


def decode_key_secret(key_secret: str) -> bytes:
    """Decode a master key secret as issued by the platform.

    The platform hands out secrets in the standard padded alphabet; URL-safe
    characters are accepted as well so that secrets copied from either token
    format decode identically.

    Raises
    ------
    InvalidKey
        When *key_secret* is not a string, is not valid base64, or decodes to
        zero bytes.
    """
    if not isinstance(key_secret, str):
        raise InvalidKey(f"secret must be a base64 string, got {type(key_secret).__name__}")

    text = key_secret.strip().replace("-", "+").replace("_", "/")
    text += "=" * (-len(text) % 4)
    try:
        secret = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidKey(f"secret is not valid base64 ({exc})") from exc

    if not secret:
        raise InvalidKey("secret is empty")
    return secret


__all__ = ["TokenFormat", "b64decode", "b64encode", "decode_key_secret"]
