"""Tests for the purpose-bound token codec."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from meetmax.domain.exceptions import InvalidToken
from meetmax.services.token_codec import TokenCodec, TokenPurpose

from conftest import ACCESS_SECRET, EMAIL_SECRET, make_codec


class TestIssueAndParse:

    def test_round_trip_returns_subject_and_expiry(self, codec):
        token = codec.issue("a@b.com", TokenPurpose.ACCESS)
        claims = codec.parse(token, TokenPurpose.ACCESS)
        assert claims.subject == "a@b.com"
        assert claims.purpose is TokenPurpose.ACCESS
        assert claims.expires_at - claims.issued_at == timedelta(minutes=15)

    def test_explicit_ttl_overrides_purpose_lifetime(self, codec):
        token = codec.issue("42", TokenPurpose.EMAIL_ACTION, ttl=timedelta(seconds=90))
        claims = codec.parse(token, TokenPurpose.EMAIL_ACTION)
        assert claims.expires_at - claims.issued_at == timedelta(seconds=90)

    @pytest.mark.parametrize("issued_as", list(TokenPurpose))
    def test_token_never_parses_under_another_purpose(self, codec, issued_as):
        token = codec.issue("a@b.com", issued_as)
        for other in TokenPurpose:
            if other is issued_as:
                continue
            with pytest.raises(InvalidToken):
                codec.parse(token, other)

    def test_purpose_claim_rejects_cross_use_with_shared_secret(self):
        shared = TokenCodec(
            secrets={purpose: "shared-secret-with-enough-entropy-00000005" for purpose in TokenPurpose},
            lifetimes={purpose: timedelta(minutes=5) for purpose in TokenPurpose},
        )
        token = shared.issue("a@b.com", TokenPurpose.REFRESH)
        with pytest.raises(InvalidToken):
            shared.parse(token, TokenPurpose.ACCESS)


class TestRejection:

    def test_expired_token_fails_like_tampered_token(self, codec):
        token = codec.issue("a@b.com", TokenPurpose.ACCESS, ttl=timedelta(minutes=10))
        later = make_codec(clock=lambda: datetime.now(tz=timezone.utc) + timedelta(minutes=11))
        forged = TokenCodec(
            secrets={purpose: "attacker-secret-with-enough-entropy-000004" for purpose in TokenPurpose},
            lifetimes={purpose: timedelta(minutes=10) for purpose in TokenPurpose},
        ).issue("a@b.com", TokenPurpose.ACCESS)

        with pytest.raises(InvalidToken) as expired:
            later.parse(token, TokenPurpose.ACCESS)
        with pytest.raises(InvalidToken) as tampered:
            codec.parse(forged, TokenPurpose.ACCESS)

        assert type(expired.value) is type(tampered.value)
        assert expired.value.message == tampered.value.message

    def test_token_is_valid_until_clock_passes_ttl(self, codec):
        token = codec.issue("a@b.com", TokenPurpose.ACCESS, ttl=timedelta(minutes=10))
        almost = make_codec(clock=lambda: datetime.now(tz=timezone.utc) + timedelta(minutes=9))
        assert almost.parse(token, TokenPurpose.ACCESS).subject == "a@b.com"

    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
    def test_malformed_tokens_are_rejected(self, codec, token):
        with pytest.raises(InvalidToken):
            codec.parse(token, TokenPurpose.ACCESS)

    def test_token_without_purpose_claim_is_rejected(self, codec):
        now = datetime.now(tz=timezone.utc)
        token = jwt.encode(
            {"sub": "a@b.com", "iat": int(now.timestamp()), "exp": int((now + timedelta(minutes=5)).timestamp())},
            ACCESS_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidToken):
            codec.parse(token, TokenPurpose.ACCESS)

    def test_token_signed_with_another_algorithm_is_rejected(self, codec):
        now = datetime.now(tz=timezone.utc)
        token = jwt.encode(
            {
                "sub": "1",
                "typ": TokenPurpose.EMAIL_ACTION.value,
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(minutes=5)).timestamp()),
            },
            EMAIL_SECRET,
            algorithm="HS512",
        )
        with pytest.raises(InvalidToken):
            codec.parse(token, TokenPurpose.EMAIL_ACTION)


def test_missing_secret_is_a_configuration_error():
    with pytest.raises(RuntimeError):
        TokenCodec(
            secrets={TokenPurpose.ACCESS: "a", TokenPurpose.REFRESH: "b"},
            lifetimes={},
        )
