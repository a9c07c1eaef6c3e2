"""Tests for TokenService (JWT issue/verify)."""

from datetime import timedelta

import pytest
from jose import jwt

from taskauth.core.constants import (
    TOKEN_TYPE_ACCESS,
    TOKEN_TYPE_PASSWORD_RESET,
    TOKEN_TYPE_REFRESH,
)
from taskauth.domain.enums import ErrorKind
from taskauth.domain.exceptions import InvalidTokenException
from taskauth.domain.result import Err, Ok
from taskauth.infrastructure.security.jwt import INVALID_TOKEN_MESSAGE, TokenService
from taskauth.shared.utils.datetime import utc_now

SECRET = "unit-test-secret"


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(SECRET)


def _tamper(token: str) -> str:
    """Flip one character in the middle of the payload segment."""
    header, payload, signature = token.split(".")
    i = len(payload) // 2
    replacement = "A" if payload[i] != "A" else "B"
    return ".".join([header, payload[:i] + replacement + payload[i + 1 :], signature])


def test_issue_then_verify_returns_claims(tokens: TokenService) -> None:
    token = tokens.issue({"sub": "user-1", "email": "alice@x.com", "role": "user"}, 900)
    result = tokens.verify(token)
    assert isinstance(result, Ok)
    claims = result.value
    assert claims.subject == "user-1"
    assert claims.email == "alice@x.com"
    assert claims.role == "user"
    assert claims.token_type == TOKEN_TYPE_ACCESS
    assert claims.session_id is None
    assert timedelta(seconds=899) <= claims.expires_at - claims.issued_at <= timedelta(seconds=901)


def test_issue_does_not_mutate_claims(tokens: TokenService) -> None:
    claims = {"sub": "user-1"}
    tokens.issue(claims, 60)
    assert claims == {"sub": "user-1"}


def test_issue_requires_subject(tokens: TokenService) -> None:
    with pytest.raises(ValueError):
        tokens.issue({"email": "alice@x.com"}, 60)


def test_expired_token_is_rejected(tokens: TokenService) -> None:
    token = tokens.issue({"sub": "user-1"}, -10)
    result = tokens.verify(token)
    assert result == Err(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_MESSAGE)


def test_tampered_token_fails_like_expired_token(tokens: TokenService) -> None:
    """No oracle: tampering and expiry produce the identical error."""
    tampered = tokens.verify(_tamper(tokens.issue({"sub": "user-1"}, 900)))
    expired = tokens.verify(tokens.issue({"sub": "user-1"}, -10))
    assert isinstance(tampered, Err)
    assert tampered == expired


def test_token_signed_with_other_secret_is_rejected(tokens: TokenService) -> None:
    foreign = TokenService("another-secret").issue({"sub": "user-1"}, 900)
    assert tokens.verify(foreign) == Err(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_MESSAGE)


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
def test_malformed_tokens_are_rejected(tokens: TokenService, token: str) -> None:
    result = tokens.verify(token)
    assert isinstance(result, Err)
    assert result.kind is ErrorKind.INVALID_TOKEN


def test_wrong_token_type_is_rejected(tokens: TokenService) -> None:
    refresh = tokens.issue({"sub": "user-1"}, 900, token_type=TOKEN_TYPE_REFRESH)
    assert isinstance(tokens.verify(refresh, TOKEN_TYPE_ACCESS), Err)
    assert isinstance(tokens.verify(refresh, TOKEN_TYPE_REFRESH), Ok)


def test_token_without_subject_is_rejected(tokens: TokenService) -> None:
    now = int(utc_now().timestamp())
    raw = jwt.encode({"typ": "access", "iat": now, "exp": now + 60}, SECRET, algorithm="HS256")
    assert isinstance(tokens.verify(raw), Err)


def test_reset_tokens_carry_unique_jti(tokens: TokenService) -> None:
    first = tokens.issue({"sub": "u"}, 900, token_type=TOKEN_TYPE_PASSWORD_RESET, with_jti=True)
    second = tokens.issue({"sub": "u"}, 900, token_type=TOKEN_TYPE_PASSWORD_RESET, with_jti=True)
    jti_1 = tokens.verify(first, TOKEN_TYPE_PASSWORD_RESET).unwrap().token_id
    jti_2 = tokens.verify(second, TOKEN_TYPE_PASSWORD_RESET).unwrap().token_id
    assert jti_1 and jti_2 and jti_1 != jti_2


def test_unwrap_of_failed_verification_raises_invalid_token(tokens: TokenService) -> None:
    with pytest.raises(InvalidTokenException) as exc_info:
        tokens.verify("garbage").unwrap()
    assert exc_info.value.status_code == 401


def test_empty_secret_is_refused() -> None:
    with pytest.raises(ValueError):
        TokenService("")
