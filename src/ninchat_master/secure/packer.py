"""SecurePacker: encrypted metadata tokens.

The plaintext is ``SHA512(json) || json`` padded with zero bytes to the AES
block size, encrypted with AES-256-CBC under the master secret and a random
IV. The holder of the secret decrypts, strips the trailing zero bytes from
the JSON part and checks it against the leading digest.

Token format
------------
``key_id<delimiter>base64(iv || ciphertext)``
"""
from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers import Cipher, CipherContext, algorithms, modes

from ninchat_master.encoding.canonical import encode_json
from ninchat_master.encoding.codec import TokenFormat, b64encode
from ninchat_master.errors import EncryptionError
from ninchat_master.random_source import DEFAULT_RANDOM_SOURCE, RandomSource

logger = logging.getLogger(__name__)

BLOCK_SIZE: int = 16
KEY_SIZE: int = 32


@dataclass(frozen=True)
class SecureToken:
    """An encrypted metadata payload.

    Parameters
    ----------
    key_id:
        Identifier of the master key whose secret encrypted the payload.
    iv:
        The 16-byte AES-CBC initialization vector.
    ciphertext:
        Encrypted, zero-padded ``digest || json`` plaintext.
    """

    key_id: str
    iv: bytes
    ciphertext: bytes

    def to_string(self, token_format: TokenFormat) -> str:
        """Render the token text for *token_format*."""
        payload_b64 = b64encode(self.iv + self.ciphertext, token_format)
        return f"{self.key_id}{token_format.delimiter}{payload_b64}"


class SecurePacker:
    """Encrypts JSON messages for one master key.

    Parameters
    ----------
    key_id:
        Master key identifier embedded in every token.
    secret:
        Raw master key secret; must be 32 bytes for AES-256.
    token_format:
        Protocol version of the emitted tokens.
    random_source:
        Supplier of initialization vectors. Defaults to the system CSPRNG.
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

    def secure(self, msg: Any) -> SecureToken:
        """Serialize and encrypt *msg*.

        Raises
        ------
        SerializationError
            When *msg* cannot be encoded as JSON.
        EncryptionError
            When the IV cannot be generated or the cipher call fails.
        """
        msg_json = encode_json(msg)
        digest = hashlib.sha512(msg_json).digest()
        plaintext = pad_block(digest + msg_json)

        iv = self._new_iv()
        with cipher_context(self._secret, iv) as encryptor:
            ciphertext = encryptor.update(plaintext) + encryptor.finalize()

        logger.debug(
            "Secured %d-byte message for key %s", len(msg_json), self._key_id
        )
        return SecureToken(key_id=self._key_id, iv=iv, ciphertext=ciphertext)

    def _new_iv(self) -> bytes:
        try:
            iv = self._random.token_bytes(BLOCK_SIZE)
        except (OSError, ValueError) as exc:
            raise EncryptionError(f"IV generation failed ({exc})") from exc
        if len(iv) != BLOCK_SIZE:
            raise EncryptionError(f"IV must be {BLOCK_SIZE} bytes, got {len(iv)}")
        return iv


def pad_block(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """Right-pad *data* with zero bytes to a multiple of *block_size*."""
    return data + b"\0" * (-len(data) % block_size)


@contextmanager
def cipher_context(key: bytes, iv: bytes) -> Iterator[CipherContext]:
    """Yield an AES-256-CBC encryptor without block padding.

    A new context is created for every call and never shared.
    Cipher setup and encryption failures surface as :class:`EncryptionError`.
    """
    if len(key) != KEY_SIZE:
        raise EncryptionError(f"AES-256 requires a {KEY_SIZE}-byte secret, got {len(key)}")

    try:
        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    except (UnsupportedAlgorithm, ValueError) as exc:
        raise EncryptionError(f"cipher initialization failed ({exc})") from exc

    try:
        yield encryptor
    except ValueError as exc:
        raise EncryptionError(f"encryption failed ({exc})") from exc


__all__ = [
    "BLOCK_SIZE",
    "KEY_SIZE",
    "SecurePacker",
    "SecureToken",
    "cipher_context",
    "pad_block",
]
