"""Tests for the bearer token codec."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from nativespeak.auth.jwt import TokenClaims, TokenCodec, build_token_codec
from nativespeak.config import Settings
from nativespeak.errors import InvalidCredential

SECRET = "unit-test-secret"


def _clock_at(moment: datetime):
    return lambda: moment


class TestIssueAndVerify:
    def test_round_trip(self):
        codec = TokenCodec(SECRET)
        token = codec.issue("user-1", "aluno@example.com")
        assert codec.verify(token) == TokenClaims(user_id="user-1", email="aluno@example.com")

    def test_payload_carries_claims_and_seven_day_window(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        codec = TokenCodec(SECRET, clock=_clock_at(now))
        token = codec.issue("user-1", "aluno@example.com")
        payload = jwt.decode(token, options={"verify_signature": False})
        assert payload["userId"] == "user-1"
        assert payload["email"] == "aluno@example.com"
        assert payload["exp"] - payload["iat"] == int(timedelta(days=7).total_seconds())

    def test_distinct_secrets_do_not_interoperate(self):
        token = TokenCodec("secret-a").issue("user-1", "a@example.com")
        with pytest.raises(InvalidCredential):
            TokenCodec("secret-b").verify(token)

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenCodec("")


class TestRejection:
    def test_expired_token_rejected(self):
        issued = datetime.now(timezone.utc) - timedelta(days=8)
        token = TokenCodec(SECRET, clock=_clock_at(issued)).issue("user-1", "a@example.com")
        with pytest.raises(InvalidCredential, match="expired"):
            TokenCodec(SECRET).verify(token)

    def test_token_just_inside_window_accepted(self):
        issued = datetime.now(timezone.utc) - timedelta(days=6, hours=23)
        token = TokenCodec(SECRET, clock=_clock_at(issued)).issue("user-1", "a@example.com")
        assert TokenCodec(SECRET).verify(token).user_id == "user-1"

    def test_tampered_signature_rejected(self):
        token = TokenCodec(SECRET).issue("user-1", "a@example.com")
        header, payload, signature = token.split(".")
        first = "A" if signature[0] != "A" else "B"
        tampered = f"{header}.{payload}.{first}{signature[1:]}"
        with pytest.raises(InvalidCredential):
            TokenCodec(SECRET).verify(tampered)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidCredential):
            TokenCodec(SECRET).verify("not-a-jwt")

    def test_missing_user_id_claim_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"email": "a@example.com", "iat": now, "exp": now + timedelta(days=1), "iss": "nativespeak"},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidCredential):
            TokenCodec(SECRET).verify(token)

    def test_token_without_expiry_rejected(self):
        token = jwt.encode(
            {"userId": "user-1", "email": "a@example.com", "iat": datetime.now(timezone.utc), "iss": "nativespeak"},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidCredential):
            TokenCodec(SECRET).verify(token)

    def test_wrong_issuer_rejected(self):
        token = TokenCodec(SECRET, issuer="someone-else").issue("user-1", "a@example.com")
        with pytest.raises(InvalidCredential):
            TokenCodec(SECRET).verify(token)


class TestBuildFromSettings:
    def test_uses_configured_secret(self):
        settings = Settings(jwt_secret="configured-secret", environment="development")
        token = build_token_codec(settings).issue("user-1", "a@example.com")
        assert TokenCodec("configured-secret").verify(token).user_id == "user-1"

    def test_production_without_secret_refuses_to_start(self):
        settings = Settings(jwt_secret=None, environment="production")
        with pytest.raises(RuntimeError, match="JWT_SECRET"):
            build_token_codec(settings)

    def test_development_without_secret_generates_random_secret(self):
        settings = Settings(jwt_secret=None, environment="development")
        first = build_token_codec(settings)
        second = build_token_codec(settings)
        token = first.issue("user-1", "a@example.com")
        assert first.verify(token).user_id == "user-1"
        with pytest.raises(InvalidCredential):
            second.verify(token)
