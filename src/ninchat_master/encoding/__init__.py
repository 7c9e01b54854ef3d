"""Canonical message encoding and base64 token codecs."""
from __future__ import annotations

from ninchat_master.encoding.canonical import (
    canonical_key,
    canonical_sort,
    encode_canonical,
    encode_json,
)
from ninchat_master.encoding.codec import TokenFormat, b64decode, b64encode, decode_key_secret

__all__ = [
    "TokenFormat",
    "b64decode",
    "b64encode",
    "canonical_key",
    "canonical_sort",
    "decode_key_secret",
    "encode_canonical",
    "encode_json",
]
