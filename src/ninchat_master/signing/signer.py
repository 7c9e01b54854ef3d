"""Signer: HMAC-SHA512 master signatures over canonical messages.

A signature authorizes one API call. The caller passes the same field
values to the API call; the verifying service rebuilds the canonical
message from them plus the ``expire`` and ``nonce`` carried in the token and
compares digests.

Token format
------------
``DOTTED``::

    key_id.expire.nonce.digest.suffix

The fifth field is always present; it is empty unless the signature is
scoped to a single user, in which case it is ``1``.

``DASHED``::

    key_id-expire-nonce-digest[-1]
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ninchat_master.encoding.canonical import encode_canonical
from ninchat_master.encoding.codec import TokenFormat, b64encode
from ninchat_master.errors import SerializationError
from ninchat_master.random_source import DEFAULT_RANDOM_SOURCE, RandomSource

logger = logging.getLogger(__name__)

NONCE_RANGE: int = 2**31
MAX_EXPIRE_AHEAD_SECONDS: int = 7 * 24 * 60 * 60

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class SignatureToken:
    """A computed master signature.

    Parameters
    ----------
    key_id:
        Identifier of the master key that produced the digest.
    expire:
        Expiration time in Unix seconds.
    nonce:
        Base-36 rendering of the random nonce.
    digest:
        Raw HMAC-SHA512 digest of the canonical message.
    suffix:
        Scope marker; ``"1"`` for user-scoped signatures, else empty.
    """

    key_id: str
    expire: int
    nonce: str
    digest: bytes
    suffix: str = ""

    def to_string(self, token_format: TokenFormat) -> str:
        """Render the token text for *token_format*."""
        digest_b64 = b64encode(self.digest, token_format)
        if token_format is TokenFormat.DOTTED:
            return f"{self.key_id}.{self.expire}.{self.nonce}.{digest_b64}.{self.suffix}"
        suffix = f"-{self.suffix}" if self.suffix else ""
        return f"{self.key_id}-{self.expire}-{self.nonce}-{digest_b64}{suffix}"


class Signer:
    """Computes master signatures for one key.

    Parameters
    ----------
    key_id:
        Master key identifier embedded in every token.
    secret:
        Raw (decoded) master key secret used as the HMAC key.
    token_format:
        Protocol version of the emitted tokens.
    random_source:
        Supplier of nonces. Defaults to the system CSPRNG.
    """

    def __init__(
        self,
        key_id: str,
        secret: bytes,
        token_format: TokenFormat = TokenFormat.DOTTED,
        random_source: RandomSource | None = None,
    ) -> None:
        self._key_id = key_id
        self._secret = secret
        self._token_format = token_format
        self._random = random_source or DEFAULT_RANDOM_SOURCE

    @property
    def token_format(self) -> TokenFormat:
        return self._token_format

    def sign(
        self,
        expire: int | float,
        pairs: Iterable[Sequence[Any]],
        suffix: str = "",
    ) -> SignatureToken:
        """Sign *pairs* together with *expire* and a fresh nonce.

        Parameters
        ----------
        expire:
            Expiration time in Unix seconds; fractions are truncated.
        pairs:
            Call-specific ``(field, value)`` pairs, in any order.
        suffix:
            Scope marker appended to the token text.

        Returns
        -------
        SignatureToken

        Raises
        ------
        SerializationError
            When *expire* is not a number or the message cannot be encoded.
        """
        expire = coerce_expire(expire)
        nonce = format_nonce(self._random.randbelow(NONCE_RANGE))

        msg = list(pairs)
        msg.append(("expire", expire))
        msg.append(("nonce", nonce))

        digest = self.digest(encode_canonical(msg))
        _warn_if_far_future(expire)
        logger.debug("Signed message for key %s (expire=%d)", self._key_id, expire)

        return SignatureToken(
            key_id=self._key_id,
            expire=expire,
            nonce=nonce,
            digest=digest,
            suffix=suffix,
        )

    def digest(self, message: bytes) -> bytes:
        """Return HMAC-SHA512 of *message* under the master secret."""
        return hmac.new(self._secret, message, hashlib.sha512).digest()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def coerce_expire(expire: int | float) -> int:
    """Truncate *expire* to whole seconds.

    Raises
    ------
    SerializationError
        When *expire* is not a finite number.
    """
    if isinstance(expire, bool) or not isinstance(expire, (int, float)):
        raise SerializationError(f"expire must be a number, got {expire!r}")
    try:
        return int(expire)
    except (OverflowError, ValueError) as exc:
        raise SerializationError(f"expire must be finite, got {expire!r}") from exc


def format_nonce(value: int) -> str:
    """Render a non-negative integer in lowercase base 36."""
    if value < 0:
        raise ValueError("nonce must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def _warn_if_far_future(expire: int) -> None:
    if expire - time.time() > MAX_EXPIRE_AHEAD_SECONDS:
        logger.warning(
            "Expiration time %d is more than one week ahead; the service may reject it",
            expire,
        )


__all__ = [
    "MAX_EXPIRE_AHEAD_SECONDS",
    "NONCE_RANGE",
    "SignatureToken",
    "Signer",
    "coerce_expire",
    "format_nonce",
]
