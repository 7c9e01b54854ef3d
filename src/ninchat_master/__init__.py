"""ninchat-master: Ninchat master key signatures and secure metadata.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick start
-----------
::

    from ninchat_master import MasterKey

    master = MasterKey("22nlihvg", "C58sAn+Dp2Ogb2+FdfSNg3J0ImMYfYodUUgXFF2OPo0=")
    signature = master.sign_join_channel(expire, "1bfbr0u", [("silenced", False)])
    secure = master.secure_metadata(expire, {"foo": 3.14159})
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ------------------------------------------------------------------
# Master key
# ------------------------------------------------------------------
from ninchat_master.master import USER_SCOPE_SUFFIX, MasterKey
from ninchat_master.config import MasterKeySettings

# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------
from ninchat_master.errors import EncryptionError, InvalidKey, MasterKeyError, SerializationError

# ------------------------------------------------------------------
# Building blocks
# ------------------------------------------------------------------
from ninchat_master.encoding.canonical import canonical_key, canonical_sort, encode_canonical
from ninchat_master.encoding.codec import TokenFormat
from ninchat_master.random_source import RandomSource, StaticRandomSource, SystemRandomSource
from ninchat_master.secure.packer import SecurePacker, SecureToken
from ninchat_master.signing.signer import SignatureToken, Signer

__all__ = [
    # version
    "__version__",
    # master key
    "MasterKey",
    "MasterKeySettings",
    "USER_SCOPE_SUFFIX",
    # errors
    "EncryptionError",
    "InvalidKey",
    "MasterKeyError",
    "SerializationError",
    # building blocks
    "RandomSource",
    "SecurePacker",
    "SecureToken",
    "SignatureToken",
    "Signer",
    "StaticRandomSource",
    "SystemRandomSource",
    "TokenFormat",
    "canonical_key",
    "canonical_sort",
    "encode_canonical",
]
