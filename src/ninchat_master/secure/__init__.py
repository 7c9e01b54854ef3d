"""Encrypted audience metadata tokens."""
from __future__ import annotations

from ninchat_master.secure.packer import SecurePacker, SecureToken, cipher_context, pad_block

__all__ = ["SecurePacker", "SecureToken", "cipher_context", "pad_block"]
