"""Tests for ninchat_master.signing.signer: HMAC-SHA512 master signatures."""
from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import time

import pytest

from ninchat_master.encoding.codec import TokenFormat
from ninchat_master.errors import SerializationError
from ninchat_master.random_source import StaticRandomSource
from ninchat_master.signing.signer import (
    NONCE_RANGE,
    SignatureToken,
    Signer,
    coerce_expire,
    format_nonce,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SECRET = base64.b64decode("C58sAn+Dp2Ogb2+FdfSNg3J0ImMYfYodUUgXFF2OPo0=")
NONCE = int("abc123", 36)
EXPIRE = 1700000000


def make_signer(token_format: TokenFormat = TokenFormat.DOTTED) -> Signer:
    return Signer("22nlihvg", SECRET, token_format, StaticRandomSource(nonce=NONCE))


def expected_digest(message: bytes) -> bytes:
    return hmac.new(SECRET, message, hashlib.sha512).digest()


# ---------------------------------------------------------------------------
# format_nonce / coerce_expire
# ---------------------------------------------------------------------------


class TestFormatNonce:
    def test_zero(self) -> None:
        assert format_nonce(0) == "0"

    def test_lowercase_base36(self) -> None:
        assert format_nonce(35) == "z"
        assert format_nonce(36) == "10"

    def test_matches_int_parsing(self) -> None:
        assert format_nonce(NONCE) == "abc123"

    def test_largest_nonce(self) -> None:
        assert int(format_nonce(NONCE_RANGE - 1), 36) == NONCE_RANGE - 1

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            format_nonce(-1)


class TestCoerceExpire:
    def test_integer_unchanged(self) -> None:
        assert coerce_expire(EXPIRE) == EXPIRE

    def test_fraction_truncated(self) -> None:
        assert coerce_expire(1700000000.9) == 1700000000

    def test_string_rejected(self) -> None:
        with pytest.raises(SerializationError):
            coerce_expire("1700000000")  # type: ignore[arg-type]

    def test_bool_rejected(self) -> None:
        with pytest.raises(SerializationError):
            coerce_expire(True)

    def test_infinity_rejected(self) -> None:
        with pytest.raises(SerializationError):
            coerce_expire(float("inf"))


# ---------------------------------------------------------------------------
# Signer.sign
# ---------------------------------------------------------------------------


class TestSign:
    def test_returns_signature_token(self) -> None:
        token = make_signer().sign(EXPIRE, [("action", "create_session")])
        assert isinstance(token, SignatureToken)
        assert token.key_id == "22nlihvg"
        assert token.expire == EXPIRE
        assert token.nonce == "abc123"
        assert token.suffix == ""

    def test_digest_is_hmac_of_canonical_message(self) -> None:
        token = make_signer().sign(EXPIRE, [("action", "create_session")])
        message = b'[["action","create_session"],["expire",1700000000],["nonce","abc123"]]'
        assert token.digest == expected_digest(message)
        assert len(token.digest) == 64

    def test_pair_order_does_not_matter(self) -> None:
        signer = make_signer()
        first = signer.sign(EXPIRE, [("action", "create_session"), ("user_id", "u")])
        second = signer.sign(EXPIRE, [("user_id", "u"), ("action", "create_session")])
        assert first.digest == second.digest

    def test_fractional_expire_truncated(self) -> None:
        signer = make_signer()
        assert signer.sign(1700000000.9, []).digest == signer.sign(EXPIRE, []).digest

    def test_suffix_is_carried(self) -> None:
        assert make_signer().sign(EXPIRE, [], suffix="1").suffix == "1"

    def test_random_nonces_differ(self) -> None:
        signer = Signer("22nlihvg", SECRET)
        nonces = {signer.sign(EXPIRE, [("action", "create_session")]).nonce for _ in range(5)}
        assert len(nonces) > 1

    def test_unserializable_value_raises(self) -> None:
        with pytest.raises(SerializationError):
            make_signer().sign(EXPIRE, [("action", object())])

    def test_far_future_expire_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="ninchat_master.signing.signer"):
            token = make_signer().sign(time.time() + 30 * 24 * 3600, [])
        assert "one week" in caplog.text
        assert token.digest

    def test_near_expire_does_not_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="ninchat_master.signing.signer"):
            make_signer().sign(time.time() + 60, [])
        assert caplog.records == []


# ---------------------------------------------------------------------------
# SignatureToken.to_string
# ---------------------------------------------------------------------------


class TestSignatureTokenText:
    def _token(self, suffix: str = "") -> SignatureToken:
        return SignatureToken("22nlihvg", EXPIRE, "abc123", b"\xfb\xff" * 32, suffix)

    def test_dotted_unscoped_has_empty_fifth_field(self) -> None:
        text = self._token().to_string(TokenFormat.DOTTED)
        parts = text.split(".")
        assert len(parts) == 5
        assert parts[:3] == ["22nlihvg", "1700000000", "abc123"]
        assert parts[4] == ""

    def test_dotted_scoped_suffix(self) -> None:
        assert self._token("1").to_string(TokenFormat.DOTTED).endswith(".1")

    def test_dotted_digest_is_unpadded_url_safe(self) -> None:
        digest_b64 = self._token().to_string(TokenFormat.DOTTED).split(".")[3]
        assert "=" not in digest_b64
        assert "+" not in digest_b64 and "/" not in digest_b64

    def test_dashed_unscoped(self) -> None:
        text = self._token().to_string(TokenFormat.DASHED)
        digest_b64 = base64.b64encode(b"\xfb\xff" * 32).decode("ascii")
        assert text == f"22nlihvg-1700000000-abc123-{digest_b64}"

    def test_dashed_scoped_suffix(self) -> None:
        text = self._token("1").to_string(TokenFormat.DASHED)
        assert text.endswith("=-1")
