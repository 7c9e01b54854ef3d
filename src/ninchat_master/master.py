"""MasterKey: Ninchat master key utilities.

The master key id and secret are obtained with the ``create_master_key``
API action. The ``sign_*`` methods create values for the ``master_sign``
API parameters, and the ``secure_*`` methods create values for the
``"secure"`` property of the ``audience_metadata`` API parameter.

Signatures and secured metadata may be used once before their expiration
time. Expiration time is given in Unix time (seconds since 1970-01-01 UTC)
and should not be more than one week in the future; later values are still
signed, but the service may refuse them.

Example
-------
>>> master = MasterKey("22nlihvg", "C58sAn+Dp2Ogb2+FdfSNg3J0ImMYfYodUUgXFF2OPo0=")
>>> token = master.sign_create_session(1700000000)
>>> token.startswith("22nlihvg.")
True
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ninchat_master.encoding.canonical import canonical_sort
from ninchat_master.encoding.codec import TokenFormat, decode_key_secret
from ninchat_master.errors import InvalidKey, SerializationError
from ninchat_master.random_source import RandomSource
from ninchat_master.secure.packer import SecurePacker
from ninchat_master.signing.signer import Signer

logger = logging.getLogger(__name__)

USER_SCOPE_SUFFIX: str = "1"


class MasterKey:
    """Issues master signatures and secure metadata for one master key.

    Instances hold no mutable state and may be shared between threads.

    Parameters
    ----------
    key_id:
        Master key identifier.
    key_secret:
        Base64-encoded master key secret.
    token_format:
        Protocol version of the emitted tokens. Must match what the
        verifying service expects.
    random_source:
        Supplier of nonces and IVs. Defaults to the system CSPRNG.

    Raises
    ------
    InvalidKey
        When *key_secret* is not valid base64 or decodes to nothing.
    """

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        *,
        token_format: TokenFormat = TokenFormat.DOTTED,
        random_source: RandomSource | None = None,
    ) -> None:
        if not isinstance(key_id, str) or not key_id:
            raise InvalidKey("key id must be a non-empty string")

        secret = decode_key_secret(key_secret)
        self._key_id = key_id
        self._token_format = TokenFormat(token_format)
        self._signer = Signer(key_id, secret, self._token_format, random_source)
        self._packer = SecurePacker(key_id, secret, self._token_format, random_source)

    @property
    def key_id(self) -> str:
        return self._key_id

    @property
    def token_format(self) -> TokenFormat:
        return self._token_format

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------

    def sign_create_session(self, expire: int | float) -> str:
        """Sign a create_session call that creates a new user.

        The created user becomes a puppet of the master.
        """
        msg = [
            ("action", "create_session"),
        ]
        return self._sign(expire, msg)

    def sign_create_session_for_user(self, expire: int | float, user_id: str) -> str:
        """Sign a create_session call that authenticates an existing user.

        The user must be a puppet of the master, and *user_id* must be
        repeated in the API call.
        """
        msg = [
            ("action", "create_session"),
            ("user_id", user_id),
        ]
        return self._sign(expire, msg)

    def sign_join_channel(
        self,
        expire: int | float,
        channel_id: str,
        member_attrs: Iterable[Sequence[Any]] | None = None,
    ) -> str:
        """Sign a join_channel call. The master must own the channel.

        *channel_id* and *member_attrs* must be repeated in the API call.
        *member_attrs* is a list of ``(name, value)`` pairs and may be given
        in any order.
        """
        return self.sign_join_channel_for_user(expire, channel_id, None, member_attrs)

    def sign_join_channel_for_user(
        self,
        expire: int | float,
        channel_id: str,
        user_id: str | None,
        member_attrs: Iterable[Sequence[Any]] | None = None,
    ) -> str:
        """Sign a join_channel call that only *user_id* may perform.

        Parameters
        ----------
        expire:
            Expiration time in Unix seconds.
        channel_id:
            Channel owned by the master.
        user_id:
            The only user allowed to use the signature, or ``None`` for any
            user (equivalent to :meth:`sign_join_channel`).
        member_attrs:
            Optional ``(name, value)`` pairs; sorted before signing.

        Returns
        -------
        str
            The signature token text.
        """
        suffix = ""

        msg: list[tuple[str, Any]] = [
            ("action", "join_channel"),
            ("channel_id", channel_id),
        ]

        if user_id is not None:
            msg.append(("user_id", user_id))
            suffix = USER_SCOPE_SUFFIX

        attrs = canonical_sort(member_attrs) if member_attrs is not None else []
        if attrs:
            msg.append(("member_attrs", attrs))

        return self._sign(expire, msg, suffix)

    # ------------------------------------------------------------------
    # Secure metadata
    # ------------------------------------------------------------------

    def secure_metadata(self, expire: int | float, metadata: Mapping[str, Any]) -> str:
        """Encrypt *metadata* for use with a request_audience call."""
        return self.secure_metadata_for_user(expire, metadata, None)

    def secure_metadata_for_user(
        self,
        expire: int | float,
        metadata: Mapping[str, Any],
        user_id: str | None,
    ) -> str:
        """Encrypt *metadata* for a request_audience call by *user_id* only.

        Raises
        ------
        SerializationError
            When *metadata* is not a mapping or is not JSON-serializable.
        EncryptionError
            When encryption fails.
        """
        if isinstance(expire, bool) or not isinstance(expire, (int, float)):
            raise SerializationError(f"expire must be a number, got {expire!r}")
        if not isinstance(metadata, Mapping):
            raise SerializationError(
                f"metadata must be a mapping, got {type(metadata).__name__}"
            )

        msg: dict[str, Any] = {
            "expire": expire,
            "metadata": dict(metadata),
        }

        if user_id is not None:
            msg["user_id"] = user_id

        token = self._packer.secure(msg)
        logger.debug("Issued secure metadata token for key %s", self._key_id)
        return token.to_string(self._token_format)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _sign(self, expire: int | float, msg: list[tuple[str, Any]], suffix: str = "") -> str:
        token = self._signer.sign(expire, msg, suffix)
        logger.debug("Issued %s signature for key %s", msg[0][1], self._key_id)
        return token.to_string(self._token_format)

    def __repr__(self) -> str:
        return f"MasterKey(key_id={self._key_id!r}, token_format={self._token_format.value!r})"


__all__ = ["MasterKey", "USER_SCOPE_SUFFIX"]
