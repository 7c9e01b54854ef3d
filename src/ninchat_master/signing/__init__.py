"""Master signatures for create_session and join_channel API calls."""
from __future__ import annotations

from ninchat_master.signing.signer import (
    MAX_EXPIRE_AHEAD_SECONDS,
    NONCE_RANGE,
    SignatureToken,
    Signer,
    coerce_expire,
    format_nonce,
)

__all__ = [
    "MAX_EXPIRE_AHEAD_SECONDS",
    "NONCE_RANGE",
    "SignatureToken",
    "Signer",
    "coerce_expire",
    "format_nonce",
]
