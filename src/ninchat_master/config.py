"""Master key settings loaded from the environment.

Environment variables
---------------------
``NINCHAT_MASTER_KEY_ID``
    Master key identifier (required).
``NINCHAT_MASTER_KEY_SECRET``
    Base64-encoded master key secret (required).
``NINCHAT_MASTER_TOKEN_FORMAT``
    ``dotted`` (default) or ``dashed``.
"""
from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

from ninchat_master.encoding.codec import TokenFormat
from ninchat_master.master import MasterKey
from ninchat_master.random_source import RandomSource

ENV_KEY_ID = "NINCHAT_MASTER_KEY_ID"
ENV_KEY_SECRET = "NINCHAT_MASTER_KEY_SECRET"
ENV_TOKEN_FORMAT = "NINCHAT_MASTER_TOKEN_FORMAT"


class MasterKeySettings(BaseModel):
    """Validated master key configuration."""

    key_id: str = Field(min_length=1)
    key_secret: str = Field(min_length=1, repr=False)
    token_format: TokenFormat = TokenFormat.DOTTED

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MasterKeySettings":
        """Build settings from *environ* (defaults to ``os.environ``).

        Raises
        ------
        pydantic.ValidationError
            When a required variable is missing or a value is invalid.
        """
        env = os.environ if environ is None else environ
        data: dict[str, str] = {}
        if ENV_KEY_ID in env:
            data["key_id"] = env[ENV_KEY_ID]
        if ENV_KEY_SECRET in env:
            data["key_secret"] = env[ENV_KEY_SECRET]
        if env.get(ENV_TOKEN_FORMAT):
            data["token_format"] = env[ENV_TOKEN_FORMAT].strip().lower()
        return cls.model_validate(data)

    def to_master_key(self, random_source: RandomSource | None = None) -> MasterKey:
        """Construct the :class:`MasterKey` described by these settings."""
        return MasterKey(
            self.key_id,
            self.key_secret,
            token_format=self.token_format,
            random_source=random_source,
        )


__all__ = ["ENV_KEY_ID", "ENV_KEY_SECRET", "ENV_TOKEN_FORMAT", "MasterKeySettings"]
