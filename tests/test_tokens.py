"""Tests for session token issuing and verification."""

from datetime import timedelta

import pytest
from jose import jwt

from todo_api.config import Settings
from todo_api.services.tokens import TokenError, TokenFailure, TokenService

SECRET = "unit-test-secret"  # noqa: S105
DAY = 24 * 60 * 60


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tokens(clock):
    return TokenService(SECRET, clock=clock)


def test_issued_token_verifies_immediately(tokens, clock):
    token = tokens.issue("user-1")

    claims = tokens.verify(token)

    assert claims.user_id == "user-1"
    assert claims.issued_at == int(clock.now)
    assert claims.expires_at == int(clock.now) + DAY


def test_token_still_valid_just_before_expiry(tokens, clock):
    token = tokens.issue("user-1")
    clock.advance(DAY - 1)

    assert tokens.verify(token).user_id == "user-1"


def test_token_expires_after_24_hours(tokens, clock):
    token = tokens.issue("user-1")
    clock.advance(DAY + 1)

    with pytest.raises(TokenError) as exc_info:
        tokens.verify(token)

    assert exc_info.value.reason is TokenFailure.EXPIRED


def test_token_signed_with_other_secret_is_rejected(tokens, clock):
    forger = TokenService("some-other-secret", clock=clock)
    token = forger.issue("user-1")

    with pytest.raises(TokenError) as exc_info:
        tokens.verify(token)

    assert exc_info.value.reason is TokenFailure.SIGNATURE_INVALID


def test_tampered_payload_is_rejected(tokens, clock):
    token = tokens.issue("user-1")
    header, _, signature = token.split(".")
    forged_payload = jwt.encode(
        {"sub": "user-2", "iat": int(clock.now), "exp": int(clock.now) + DAY}, SECRET
    ).split(".")[1]

    with pytest.raises(TokenError) as exc_info:
        tokens.verify(f"{header}.{forged_payload}.{signature}")

    assert exc_info.value.reason is TokenFailure.SIGNATURE_INVALID


def test_signature_checked_before_expiry(tokens, clock):
    forger = TokenService("some-other-secret", clock=clock)
    token = forger.issue("user-1")
    clock.advance(DAY * 2)

    with pytest.raises(TokenError) as exc_info:
        tokens.verify(token)

    assert exc_info.value.reason is TokenFailure.SIGNATURE_INVALID


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b", "a.b.c"])
def test_garbage_is_malformed(tokens, token):
    with pytest.raises(TokenError) as exc_info:
        tokens.verify(token)

    assert exc_info.value.reason is TokenFailure.MALFORMED


def test_missing_subject_is_malformed(tokens, clock):
    token = jwt.encode({"iat": int(clock.now), "exp": int(clock.now) + DAY}, SECRET)

    with pytest.raises(TokenError) as exc_info:
        tokens.verify(token)

    assert exc_info.value.reason is TokenFailure.MALFORMED


def test_missing_expiry_is_malformed(tokens, clock):
    token = jwt.encode({"sub": "user-1", "iat": int(clock.now)}, SECRET)

    with pytest.raises(TokenError) as exc_info:
        tokens.verify(token)

    assert exc_info.value.reason is TokenFailure.MALFORMED


def test_from_settings_uses_configured_lifetime():
    settings = Settings(jwt_secret=SECRET, jwt_expiration_minutes=30, environment="test")

    service = TokenService.from_settings(settings)

    assert service.ttl == timedelta(minutes=30)
    assert service.algorithm == "HS256"
