"""Tests for AuthService flows (fakeredis store, in-memory repo, low-cost bcrypt)."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from taskauth.application.services.auth_service import AuthService
from taskauth.core.constants import TOKEN_TYPE_REFRESH
from taskauth.domain.exceptions import (
    ConflictException,
    InvalidOtpException,
    InvalidTokenException,
    NotFoundException,
    OtpExpiredException,
    RepositoryException,
    StoreUnavailableException,
    UnauthorizedException,
    ValidationException,
)
from taskauth.infrastructure.cache.session_store import SessionStore
from taskauth.infrastructure.persistence import InMemoryUserRepository
from tests.conftest import TEST_PASSWORD, FakeClock, RecordingEmailSender

EMAIL = "alice@x.com"


async def _register(auth_service: AuthService, email: str = EMAIL):
    return await auth_service.register("Alice", email, TEST_PASSWORD)


async def _issue_otp(auth_service: AuthService, session_store: SessionStore) -> str:
    await auth_service.forgot_password(EMAIL)
    challenge = await session_store.get_otp_challenge(EMAIL)
    assert challenge is not None
    return challenge.code


def _wrong(code: str) -> str:
    return "".join("1" if c != "1" else "2" for c in code)


# ---- register ----


async def test_register_returns_user_and_token(auth_service: AuthService) -> None:
    result = await _register(auth_service)
    assert result.user.email == EMAIL
    assert result.user.name == "Alice"
    assert result.user.role == "user"
    assert result.token
    assert result.session_id is None
    assert result.refresh_token is None
    claims = await auth_service.verify_access_token(result.token)
    assert claims.subject == result.user.id


async def test_register_duplicate_email_conflicts(auth_service: AuthService) -> None:
    await _register(auth_service)
    with pytest.raises(ConflictException):
        await auth_service.register("Alice Again", "ALICE@x.com", TEST_PASSWORD)


async def test_register_stores_hash_not_plaintext(
    auth_service: AuthService, user_repo: InMemoryUserRepository
) -> None:
    await _register(auth_service)
    user = await user_repo.find_by_email(EMAIL)
    assert user is not None
    assert user.password_hash != TEST_PASSWORD
    assert user.password_hash.startswith("$2b$")


@pytest.mark.parametrize(
    "name,email,password",
    [
        ("", EMAIL, TEST_PASSWORD),
        ("<b></b>", EMAIL, TEST_PASSWORD),
        ("Alice", "not-an-email", TEST_PASSWORD),
        ("Alice", EMAIL, "short1A"),
        ("Alice", EMAIL, "alllowercase1"),
    ],
)
async def test_register_rejects_bad_input(
    auth_service: AuthService, name: str, email: str, password: str
) -> None:
    with pytest.raises(ValidationException):
        await auth_service.register(name, email, password)


async def test_register_rejects_unknown_role(auth_service: AuthService) -> None:
    with pytest.raises(ValidationException):
        await auth_service.register("Alice", EMAIL, TEST_PASSWORD, role="root")


# ---- login / logout / sessions ----


async def test_login_creates_session_and_tokens(
    auth_service: AuthService, session_store: SessionStore, redis_client
) -> None:
    registered = await _register(auth_service)
    result = await auth_service.login(EMAIL, TEST_PASSWORD)

    assert result.session_id
    assert result.refresh_token
    record = await session_store.get(result.session_id)
    assert record is not None
    assert record.user_id == registered.user.id
    assert 0 < await redis_client.ttl(f"session:{result.session_id}") <= 86400

    claims = await auth_service.verify_access_token(result.token)
    assert claims.session_id == result.session_id


async def test_login_email_is_case_insensitive(auth_service: AuthService) -> None:
    await _register(auth_service)
    result = await auth_service.login("  Alice@X.com ", TEST_PASSWORD)
    assert result.user.email == EMAIL


async def test_wrong_password_and_unknown_email_fail_identically(
    auth_service: AuthService,
) -> None:
    await _register(auth_service)
    with pytest.raises(UnauthorizedException) as wrong_password:
        await auth_service.login(EMAIL, "Wrong-pass1")
    with pytest.raises(UnauthorizedException) as unknown_email:
        await auth_service.login("bob@x.com", TEST_PASSWORD)
    assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"
    assert wrong_password.value.to_dict() == unknown_email.value.to_dict()


async def test_unknown_email_costs_one_password_compare(
    auth_service: AuthService, password_hasher, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Unknown e-mail and wrong password both run exactly one bcrypt compare."""
    await _register(auth_service)
    compare = AsyncMock(wraps=password_hasher.compare)
    monkeypatch.setattr(password_hasher, "compare", compare)

    with pytest.raises(UnauthorizedException):
        await auth_service.login(EMAIL, "Wrong-pass1")
    assert compare.await_count == 1
    with pytest.raises(UnauthorizedException):
        await auth_service.login("nobody@x.com", "Wrong-pass1")
    assert compare.await_count == 2


async def test_throwaway_hash_is_computed_once(
    auth_service: AuthService, password_hasher, monkeypatch: pytest.MonkeyPatch
) -> None:
    hash_ = AsyncMock(wraps=password_hasher.hash)
    monkeypatch.setattr(password_hasher, "hash", hash_)
    for _ in range(3):
        with pytest.raises(UnauthorizedException):
            await auth_service.login("nobody@x.com", TEST_PASSWORD)
    assert hash_.await_count == 1


async def test_login_requires_email_and_password(auth_service: AuthService) -> None:
    with pytest.raises(ValidationException):
        await auth_service.login(EMAIL, "")


async def test_deactivated_account_cannot_login(
    auth_service: AuthService, user_repo: InMemoryUserRepository
) -> None:
    registered = await _register(auth_service)
    await user_repo.set_active(registered.user.id, False)

    with pytest.raises(UnauthorizedException) as exc_info:
        await auth_service.login(EMAIL, TEST_PASSWORD)
    assert exc_info.value.message == "Account is deactivated"
    # The deactivation is only revealed to callers who know the password.
    with pytest.raises(UnauthorizedException) as wrong:
        await auth_service.login(EMAIL, "Wrong-pass1")
    assert wrong.value.message == "Invalid credentials"


async def test_concurrent_logins_create_distinct_sessions(auth_service: AuthService) -> None:
    await _register(auth_service)
    first, second = await asyncio.gather(
        auth_service.login(EMAIL, TEST_PASSWORD),
        auth_service.login(EMAIL, TEST_PASSWORD),
    )
    assert first.session_id != second.session_id


async def test_logout_invalidates_session_bound_token(
    auth_service: AuthService, session_store: SessionStore
) -> None:
    await _register(auth_service)
    result = await auth_service.login(EMAIL, TEST_PASSWORD)

    await auth_service.logout(result.session_id)

    assert await session_store.get(result.session_id) is None
    with pytest.raises(InvalidTokenException):
        await auth_service.verify_access_token(result.token)
    # Idempotent
    await auth_service.logout(result.session_id)


async def test_extend_session(auth_service: AuthService, redis_client) -> None:
    await _register(auth_service)
    result = await auth_service.login(EMAIL, TEST_PASSWORD)
    assert await auth_service.extend_session(result.session_id, 172800) is True
    assert await redis_client.ttl(f"session:{result.session_id}") > 86400

    await auth_service.logout(result.session_id)
    assert await auth_service.extend_session(result.session_id, 3600) is False


@pytest.mark.parametrize("seconds", [0, -5])
async def test_extend_session_rejects_non_positive_duration(
    auth_service: AuthService, redis_client, seconds: int
) -> None:
    await _register(auth_service)
    result = await auth_service.login(EMAIL, TEST_PASSWORD)
    ttl_before = await redis_client.ttl(f"session:{result.session_id}")
    with pytest.raises(ValidationException):
        await auth_service.extend_session(result.session_id, seconds)
    assert await redis_client.ttl(f"session:{result.session_id}") <= ttl_before


async def test_verify_access_token_rejects_garbage(auth_service: AuthService) -> None:
    with pytest.raises(InvalidTokenException):
        await auth_service.verify_access_token("garbage")


async def test_login_surfaces_store_outage(
    auth_service: AuthService, session_store: SessionStore
) -> None:
    await _register(auth_service)
    await session_store.disconnect()
    with pytest.raises(StoreUnavailableException):
        await auth_service.login(EMAIL, TEST_PASSWORD)


# ---- refresh ----


async def test_refresh_issues_new_access_token(auth_service: AuthService) -> None:
    await _register(auth_service)
    result = await auth_service.login(EMAIL, TEST_PASSWORD)
    token = await auth_service.refresh_access_token(result.refresh_token)
    claims = await auth_service.verify_access_token(token)
    assert claims.subject == result.user.id
    assert claims.session_id == result.session_id


async def test_refresh_rejects_access_token(auth_service: AuthService) -> None:
    await _register(auth_service)
    result = await auth_service.login(EMAIL, TEST_PASSWORD)
    with pytest.raises(InvalidTokenException):
        await auth_service.refresh_access_token(result.token)


async def test_refresh_fails_after_logout(auth_service: AuthService) -> None:
    await _register(auth_service)
    result = await auth_service.login(EMAIL, TEST_PASSWORD)
    await auth_service.logout(result.session_id)
    with pytest.raises(InvalidTokenException):
        await auth_service.refresh_access_token(result.refresh_token)


async def test_refresh_fails_for_deactivated_user(
    auth_service: AuthService, user_repo: InMemoryUserRepository, token_service
) -> None:
    registered = await _register(auth_service)
    await user_repo.set_active(registered.user.id, False)
    refresh = token_service.issue({"sub": registered.user.id}, 600, token_type=TOKEN_TYPE_REFRESH)
    with pytest.raises(InvalidTokenException):
        await auth_service.refresh_access_token(refresh)


# ---- change password ----


async def test_change_password_same_as_current_is_rejected_without_rewrite(
    auth_service: AuthService, user_repo: InMemoryUserRepository
) -> None:
    registered = await _register(auth_service)
    before = (await user_repo.find_by_id(registered.user.id)).password_hash

    with pytest.raises(ValidationException):
        await auth_service.change_password(registered.user.id, TEST_PASSWORD, TEST_PASSWORD)

    after = (await user_repo.find_by_id(registered.user.id)).password_hash
    assert after == before


async def test_change_password_success(auth_service: AuthService) -> None:
    registered = await _register(auth_service)
    await auth_service.change_password(registered.user.id, TEST_PASSWORD, "Newpass99")

    await auth_service.login(EMAIL, "Newpass99")
    with pytest.raises(UnauthorizedException):
        await auth_service.login(EMAIL, TEST_PASSWORD)


async def test_change_password_wrong_current(auth_service: AuthService) -> None:
    registered = await _register(auth_service)
    with pytest.raises(UnauthorizedException):
        await auth_service.change_password(registered.user.id, "Wrong-pass1", "Newpass99")


async def test_change_password_enforces_policy(auth_service: AuthService) -> None:
    registered = await _register(auth_service)
    with pytest.raises(ValidationException):
        await auth_service.change_password(registered.user.id, TEST_PASSWORD, "weak")


async def test_change_password_unknown_user(auth_service: AuthService) -> None:
    with pytest.raises(NotFoundException):
        await auth_service.change_password("missing", TEST_PASSWORD, "Newpass99")


async def test_change_password_keeps_other_sessions(auth_service: AuthService) -> None:
    registered = await _register(auth_service)
    session = await auth_service.login(EMAIL, TEST_PASSWORD)
    await auth_service.change_password(registered.user.id, TEST_PASSWORD, "Newpass99")
    assert (await auth_service.verify_access_token(session.token)).subject == registered.user.id


# ---- forgot / verify OTP / set new password ----


async def test_forgot_password_same_result_for_unknown_email(
    auth_service: AuthService, session_store: SessionStore, email_sender: RecordingEmailSender
) -> None:
    await _register(auth_service)
    known = await auth_service.forgot_password(EMAIL)
    unknown = await auth_service.forgot_password("nobody@x.com")

    assert known == unknown
    assert await session_store.get_otp_challenge("nobody@x.com") is None
    assert [to for to, _, _ in email_sender.sent] == [EMAIL]


async def test_forgot_password_emails_the_code(
    auth_service: AuthService, session_store: SessionStore, email_sender: RecordingEmailSender
) -> None:
    await _register(auth_service)
    code = await _issue_otp(auth_service, session_store)
    assert len(code) == 6 and code.isdigit()
    _, subject, body = email_sender.sent[-1]
    assert subject == "Password Reset OTP"
    assert code in body


async def test_forgot_password_survives_email_failure(
    auth_service: AuthService, session_store: SessionStore, email_sender: RecordingEmailSender
) -> None:
    await _register(auth_service)
    email_sender.fail = True
    result = await auth_service.forgot_password(EMAIL)
    assert result.otp_expires_at
    assert await session_store.get_otp_challenge(EMAIL) is not None


async def test_forgot_password_store_outage_is_same_for_any_address(
    auth_service: AuthService, session_store: SessionStore, email_sender: RecordingEmailSender
) -> None:
    await _register(auth_service)
    await session_store.disconnect()
    for address in (EMAIL, "nobody@x.com"):
        with pytest.raises(StoreUnavailableException):
            await auth_service.forgot_password(address)
    assert email_sender.sent == []


async def test_forgot_password_store_failure_while_saving_gives_uniform_result(
    auth_service: AuthService,
    session_store: SessionStore,
    email_sender: RecordingEmailSender,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    await _register(auth_service)
    unknown = await auth_service.forgot_password("nobody@x.com")
    monkeypatch.setattr(
        session_store,
        "save_otp_challenge",
        AsyncMock(side_effect=StoreUnavailableException()),
    )
    known = await auth_service.forgot_password(EMAIL)
    assert known == unknown
    assert email_sender.sent == []


async def test_full_password_reset_flow(
    auth_service: AuthService, session_store: SessionStore, clock: FakeClock
) -> None:
    await _register(auth_service)
    code = await _issue_otp(auth_service, session_store)

    with pytest.raises(InvalidOtpException):
        await auth_service.verify_otp(EMAIL, _wrong(code))

    reset = await auth_service.verify_otp(EMAIL, code)
    assert reset.reset_token
    assert reset.expires_at > clock()

    await auth_service.set_new_password(reset.reset_token, "Brandnew1")
    with pytest.raises(InvalidTokenException):
        await auth_service.set_new_password(reset.reset_token, "Another22")

    await auth_service.login(EMAIL, "Brandnew1")


async def test_wrong_otp_keeps_challenge_for_retry(
    auth_service: AuthService, session_store: SessionStore
) -> None:
    await _register(auth_service)
    code = await _issue_otp(auth_service, session_store)
    with pytest.raises(InvalidOtpException):
        await auth_service.verify_otp(EMAIL, _wrong(code))
    assert (await auth_service.verify_otp(EMAIL, code)).reset_token


async def test_expired_otp_is_reported_and_removed(
    auth_service: AuthService, session_store: SessionStore, clock: FakeClock, settings
) -> None:
    await _register(auth_service)
    code = await _issue_otp(auth_service, session_store)
    clock.advance(settings.otp_ttl_seconds + 1)

    with pytest.raises(OtpExpiredException):
        await auth_service.verify_otp(EMAIL, code)
    with pytest.raises(NotFoundException):
        await auth_service.verify_otp(EMAIL, code)


async def test_otp_succeeds_exactly_once(
    auth_service: AuthService, session_store: SessionStore
) -> None:
    await _register(auth_service)
    code = await _issue_otp(auth_service, session_store)
    await auth_service.verify_otp(EMAIL, code)
    with pytest.raises(NotFoundException):
        await auth_service.verify_otp(EMAIL, code)


async def test_concurrent_otp_verification_has_one_winner(
    auth_service: AuthService, session_store: SessionStore
) -> None:
    await _register(auth_service)
    code = await _issue_otp(auth_service, session_store)
    results = await asyncio.gather(
        auth_service.verify_otp(EMAIL, code),
        auth_service.verify_otp(EMAIL, code),
        return_exceptions=True,
    )
    winners = [r for r in results if not isinstance(r, BaseException)]
    losers = [r for r in results if isinstance(r, BaseException)]
    assert len(winners) == 1
    assert len(losers) == 1 and isinstance(losers[0], NotFoundException)


async def test_new_forgot_request_replaces_previous_code(
    auth_service: AuthService, session_store: SessionStore
) -> None:
    await _register(auth_service)
    first = await _issue_otp(auth_service, session_store)
    second = await _issue_otp(auth_service, session_store)
    if first != second:
        with pytest.raises(InvalidOtpException):
            await auth_service.verify_otp(EMAIL, first)
    assert (await auth_service.verify_otp(EMAIL, second)).reset_token


async def test_verify_otp_without_request(auth_service: AuthService) -> None:
    with pytest.raises(NotFoundException):
        await auth_service.verify_otp(EMAIL, "123456")


async def test_set_new_password_rejects_access_token(auth_service: AuthService) -> None:
    registered = await _register(auth_service)
    with pytest.raises(InvalidTokenException):
        await auth_service.set_new_password(registered.token, "Brandnew1")


async def test_set_new_password_policy_failure_does_not_spend_token(
    auth_service: AuthService, session_store: SessionStore
) -> None:
    await _register(auth_service)
    code = await _issue_otp(auth_service, session_store)
    reset = await auth_service.verify_otp(EMAIL, code)

    with pytest.raises(ValidationException):
        await auth_service.set_new_password(reset.reset_token, "weak")
    await auth_service.set_new_password(reset.reset_token, "Brandnew1")


async def test_repository_errors_propagate_unchanged(
    auth_service: AuthService, user_repo: InMemoryUserRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def broken(email: str):
        raise RepositoryException("connection lost")

    monkeypatch.setattr(user_repo, "find_by_email", broken)
    with pytest.raises(RepositoryException):
        await auth_service.login(EMAIL, TEST_PASSWORD)
