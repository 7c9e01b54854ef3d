"""Tests for ninchat_master.random_source."""
from __future__ import annotations

import pytest

from ninchat_master.random_source import (
    DEFAULT_RANDOM_SOURCE,
    RandomSource,
    StaticRandomSource,
    SystemRandomSource,
)


class TestSystemRandomSource:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(SystemRandomSource(), RandomSource)
        assert isinstance(DEFAULT_RANDOM_SOURCE, RandomSource)

    def test_randbelow_in_range(self) -> None:
        source = SystemRandomSource()
        assert all(0 <= source.randbelow(10) < 10 for _ in range(50))

    def test_token_bytes_size(self) -> None:
        assert len(SystemRandomSource().token_bytes(16)) == 16


class TestStaticRandomSource:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(StaticRandomSource(), RandomSource)

    def test_returns_fixed_values(self) -> None:
        source = StaticRandomSource(nonce=7, iv=b"i" * 16)
        assert source.randbelow(100) == 7
        assert source.token_bytes(16) == b"i" * 16

    def test_nonce_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            StaticRandomSource(nonce=100).randbelow(10)

    def test_iv_size_mismatch(self) -> None:
        with pytest.raises(ValueError):
            StaticRandomSource(iv=b"i" * 8).token_bytes(16)
