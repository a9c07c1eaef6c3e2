"""Authentication and session lifecycle service.

Orchestrates registration, login, logout, token refresh, password change and
the OTP-based password reset flow. Crypto is delegated to the hasher, token
service and OTP generator; ephemeral state lives in the session store and
durable state in the user repository.

Verification steps (password, OTP, token) return Ok/Err values; this service
unwraps them into the AppException taxonomy at the operation boundary.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from taskauth.application.dtos.auth import (
    AuthResult,
    ForgotPasswordResult,
    ResetTokenResult,
)
from taskauth.application.dtos.user import UserCreate, UserResult
from taskauth.application.interfaces.repositories import IUserRepository
from taskauth.application.interfaces.services import (
    IEmailSender,
    IOtpGenerator,
    IPasswordHasher,
    ISessionStore,
    ITokenService,
)
from taskauth.application.services.password_policy import check_password_policy
from taskauth.core.config import Settings
from taskauth.core.constants import (
    TOKEN_TYPE_ACCESS,
    TOKEN_TYPE_PASSWORD_RESET,
    TOKEN_TYPE_REFRESH,
)
from taskauth.domain.entities import OtpChallenge, SessionRecord, UserEntity
from taskauth.domain.enums import ErrorKind, UserRole
from taskauth.domain.exceptions import (
    ConflictException,
    InvalidTokenException,
    NotFoundException,
    StoreUnavailableException,
    UnauthorizedException,
    ValidationException,
)
from taskauth.domain.result import Err, Ok, Result
from taskauth.domain.value_objects import EmailAddress
from taskauth.infrastructure.cache.keys import reset_token_used_key
from taskauth.infrastructure.security.jwt import TokenClaims
from taskauth.infrastructure.security.password import generate_random_password
from taskauth.shared.telemetry import traced
from taskauth.shared.utils.datetime import utc_now
from taskauth.shared.utils.generators import generate_session_id
from taskauth.shared.utils.sanitization import clean_display_name

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_DEACTIVATED = "Account is deactivated"
FORGOT_PASSWORD_MESSAGE = "OTP sent to your email address"
OTP_EMAIL_SUBJECT = "Password Reset OTP"


def _parse_email(raw: str | None) -> EmailAddress:
    try:
        return EmailAddress.parse(raw)
    except ValueError as e:
        raise ValidationException(str(e), field="email") from e


class AuthService:
    """Authentication and session lifecycle orchestrator.

    Construct once per process with its collaborators; every operation is
    async and safe to run concurrently on one event loop.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        session_store: ISessionStore,
        password_hasher: IPasswordHasher,
        token_service: ITokenService,
        otp_generator: IOtpGenerator,
        email_sender: IEmailSender,
        settings: Settings,
        refresh_token_service: ITokenService | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize with collaborators.

        Args:
            refresh_token_service: Signs refresh tokens (separate key); defaults
                to token_service.
            clock: Source of "now" for OTP and session timestamps.
        """
        self._users = user_repo
        self._store = session_store
        self._hasher = password_hasher
        self._tokens = token_service
        self._refresh_tokens = refresh_token_service or token_service
        self._otp = otp_generator
        self._email = email_sender
        self._settings = settings
        self._clock = clock
        self._dummy_hash: str | None = None

    @property
    def access_token_ttl(self) -> int:
        """Lifetime of issued access tokens in seconds."""
        return self._settings.access_token_expire_seconds

    # Verification steps (Result-returning)

    async def _burn_password_check(self, password: str) -> None:
        """Compare against a throwaway hash so unknown e-mails cost the same as known ones."""
        if self._dummy_hash is None:
            self._dummy_hash = await self._hasher.hash(generate_random_password())
        await self._hasher.compare(password, self._dummy_hash)

    async def _check_password(
        self, password: str, password_hash: str, message: str = INVALID_CREDENTIALS
    ) -> Result[None]:
        if await self._hasher.compare(password, password_hash):
            return Ok(None)
        return Err(ErrorKind.UNAUTHORIZED, message)

    @staticmethod
    def _check_otp(challenge: OtpChallenge, code: str, now: datetime) -> Result[OtpChallenge]:
        if not hmac.compare_digest(challenge.code.encode(), code.encode()):
            return Err(ErrorKind.INVALID_OTP, "Invalid OTP")
        if challenge.is_expired(now):
            return Err(ErrorKind.OTP_EXPIRED, "OTP has expired")
        return Ok(challenge)

    # Token helpers

    def _issue_access_token(self, user: UserEntity, session_id: str | None = None) -> str:
        claims = {"sub": user.id, "email": user.email, "role": user.role.value}
        if session_id:
            claims["sid"] = session_id
        return self._tokens.issue(
            claims,
            self._settings.access_token_expire_seconds,
            token_type=TOKEN_TYPE_ACCESS,
        )

    def _issue_refresh_token(self, user: UserEntity, session_id: str) -> str:
        return self._refresh_tokens.issue(
            {"sub": user.id, "sid": session_id},
            self._settings.refresh_token_expire_seconds,
            token_type=TOKEN_TYPE_REFRESH,
        )

    async def _require_session(self, claims: TokenClaims) -> None:
        """Raise InvalidTokenException if the token's session is gone."""
        if not claims.session_id:
            return
        record = await self._store.get(claims.session_id)
        if record is None or record.user_id != claims.subject:
            raise InvalidTokenException()

    # Operations

    @traced("auth.register")
    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: str = UserRole.USER.value,
    ) -> AuthResult:
        """Create an account and issue an access token (no session).

        Raises:
            ValidationException: Bad name, e-mail, role or password policy.
            ConflictException: E-mail already registered.
        """
        display_name = clean_display_name(name)
        if not display_name:
            raise ValidationException("Name is required", field="name")
        address = _parse_email(email)
        check_password_policy(password).unwrap()
        try:
            user_role = UserRole(role)
        except ValueError as e:
            raise ValidationException(
                f"Role must be one of: {', '.join(UserRole.values())}", field="role"
            ) from e

        if await self._users.find_by_email(address.value) is not None:
            raise ConflictException()

        password_hash = await self._hasher.hash(password)
        user = await self._users.create(
            UserCreate(
                name=display_name,
                email=address.value,
                password_hash=password_hash,
                role=user_role.value,
            )
        )
        logger.info("User registered: %s (%s)", user.id, address.redacted())
        return AuthResult(
            user=UserResult.from_entity(user),
            token=self._issue_access_token(user),
            expires_in=self._settings.access_token_expire_seconds,
        )

    @traced("auth.login")
    async def login(self, email: str, password: str) -> AuthResult:
        """Verify credentials, open a session and issue access + refresh tokens.

        Unknown e-mail and wrong password are indistinguishable. A deactivated
        account is reported only after its password matched.
        """
        if not email or not password:
            raise ValidationException("Email and password are required")
        address = _parse_email(email)

        user = await self._users.find_by_email(address.value)
        if user is None:
            await self._burn_password_check(password)
            logger.info("Login failed for %s", address.redacted())
            raise UnauthorizedException(INVALID_CREDENTIALS)
        (await self._check_password(password, user.password_hash)).unwrap()
        if not user.can_login():
            logger.info("Login refused for deactivated user %s", user.id)
            raise UnauthorizedException(ACCOUNT_DEACTIVATED)

        session_id = generate_session_id()
        ttl = self._settings.session_ttl_seconds
        record = SessionRecord.start(
            user_id=user.id,
            email=user.email,
            role=user.role.value,
            ttl_seconds=ttl,
            now=self._clock(),
        )
        await self._store.set(session_id, record, ttl)
        logger.info("User logged in: %s", user.id)
        return AuthResult(
            user=UserResult.from_entity(user),
            token=self._issue_access_token(user, session_id),
            expires_in=self._settings.access_token_expire_seconds,
            refresh_token=self._issue_refresh_token(user, session_id),
            session_id=session_id,
        )

    @traced("auth.logout")
    async def logout(self, session_id: str) -> None:
        """Delete the session. Idempotent."""
        if not session_id:
            raise ValidationException("Session ID is required", field="session_id")
        removed = await self._store.delete(session_id)
        logger.info("Logout (session existed: %s)", removed)

    @traced("auth.extend_session")
    async def extend_session(
        self, session_id: str, additional_seconds: int | None = None
    ) -> bool:
        """Push a live session's expiry forward. False if the session is gone."""
        if not session_id:
            raise ValidationException("Session ID is required", field="session_id")
        seconds = (
            self._settings.session_ttl_seconds
            if additional_seconds is None
            else additional_seconds
        )
        if seconds <= 0:
            raise ValidationException(
                "additional_seconds must be positive", field="additional_seconds"
            )
        return await self._store.extend(session_id, seconds)

    @traced("auth.verify_access_token")
    async def verify_access_token(self, token: str) -> TokenClaims:
        """Return claims of a valid access token whose session (if any) is alive.

        Raises:
            InvalidTokenException: Bad, expired, wrong-type or orphaned token.
        """
        claims = self._tokens.verify(token, TOKEN_TYPE_ACCESS).unwrap()
        await self._require_session(claims)
        return claims

    @traced("auth.refresh_access_token")
    async def refresh_access_token(self, refresh_token: str) -> str:
        """Exchange a refresh token for a new access token bound to the same session."""
        claims = self._refresh_tokens.verify(refresh_token, TOKEN_TYPE_REFRESH).unwrap()
        user = await self._users.find_by_id(claims.subject)
        if user is None or not user.can_login():
            raise InvalidTokenException()
        await self._require_session(claims)
        return self._issue_access_token(user, claims.session_id)

    async def get_current_user(self, user_id: str) -> UserResult:
        """Return the account behind an authenticated request."""
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found")
        return UserResult.from_entity(user)

    @traced("auth.change_password")
    async def change_password(
        self, user_id: str, current_password: str, new_password: str
    ) -> None:
        """Replace the password after verifying the current one.

        Other sessions of the user stay valid.
        """
        if not current_password or not new_password:
            raise ValidationException("Current and new password are required")
        if current_password == new_password:
            raise ValidationException(
                "New password must be different from current password",
                field="new_password",
            )
        check_password_policy(new_password).unwrap()

        user = await self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found")
        (
            await self._check_password(
                current_password, user.password_hash, "Current password is incorrect"
            )
        ).unwrap()

        password_hash = await self._hasher.hash(new_password)
        if await self._users.update_password_hash(user.id, password_hash) is None:
            raise NotFoundException("User not found")
        logger.info("Password changed for user %s", user.id)

    @traced("auth.forgot_password")
    async def forgot_password(self, email: str) -> ForgotPasswordResult:
        """Issue a reset OTP if the account exists.

        The result is the same whether or not the address is registered, also
        when the session store is down: an outage is reported before the
        lookup, and a store failure while saving the challenge is logged and
        answered with the uniform result. Delivery failures are logged; the
        challenge stays issued.

        Raises:
            StoreUnavailableException: Session store disconnected (any address).
        """
        address = _parse_email(email)
        if not self._store.is_connected():
            raise StoreUnavailableException()
        now = self._clock()
        ttl = self._settings.otp_ttl_seconds
        expires_at = now + timedelta(seconds=ttl)

        user = await self._users.find_by_email(address.value)
        if user is None:
            logger.info("Password reset requested for unknown address %s", address.redacted())
            return ForgotPasswordResult(message=FORGOT_PASSWORD_MESSAGE, otp_expires_at=expires_at)

        code = self._otp.generate()
        challenge = OtpChallenge(
            email=address.value,
            user_id=user.id,
            code=code,
            expires_at=expires_at,
        )
        try:
            await self._store.save_otp_challenge(
                challenge, ttl + self._settings.otp_grace_seconds
            )
        except StoreUnavailableException:
            logger.error("Reset OTP for user %s not stored: session store failed", user.id)
            return ForgotPasswordResult(message=FORGOT_PASSWORD_MESSAGE, otp_expires_at=expires_at)
        body = (
            f"Hello {user.name},\n\n"
            f"Your password reset code is {code}. "
            f"It expires in {ttl // 60} minutes.\n\n"
            "If you did not request a password reset, you can ignore this message."
        )
        try:
            await self._email.send(address.value, OTP_EMAIL_SUBJECT, body)
        except Exception:
            logger.warning(
                "Failed to send reset OTP to %s", address.redacted(), exc_info=True
            )
        logger.info("Password reset OTP issued for user %s", user.id)
        return ForgotPasswordResult(message=FORGOT_PASSWORD_MESSAGE, otp_expires_at=expires_at)

    @traced("auth.verify_otp")
    async def verify_otp(self, email: str, code: str) -> ResetTokenResult:
        """Consume a matching, unexpired OTP and return a single-use reset token.

        Raises:
            NotFoundException: No pending challenge (or another caller consumed it).
            InvalidOtpException: Code mismatch; the challenge stays pending.
            OtpExpiredException: Past expiry; the challenge is removed.
        """
        address = _parse_email(email)
        if not code:
            raise ValidationException("OTP is required", field="otp")

        challenge = await self._store.get_otp_challenge(address.value)
        if challenge is None or challenge.is_consumed():
            raise NotFoundException("No OTP request found for this email")

        checked = self._check_otp(challenge, code, self._clock())
        if isinstance(checked, Err) and checked.kind is ErrorKind.OTP_EXPIRED:
            await self._store.consume_otp_challenge(address.value)
        checked.unwrap()

        if not await self._store.consume_otp_challenge(address.value):
            raise NotFoundException("No OTP request found for this email")

        ttl = self._settings.reset_token_expire_seconds
        reset_token = self._tokens.issue(
            {"sub": challenge.user_id, "email": challenge.email},
            ttl,
            token_type=TOKEN_TYPE_PASSWORD_RESET,
            with_jti=True,
        )
        logger.info("OTP verified for user %s", challenge.user_id)
        return ResetTokenResult(
            reset_token=reset_token,
            expires_at=self._clock() + timedelta(seconds=ttl),
        )

    @traced("auth.set_new_password")
    async def set_new_password(self, reset_token: str, new_password: str) -> None:
        """Set a new password using a verified reset token (usable once).

        Raises:
            InvalidTokenException: Bad, expired or already-used token.
            ValidationException: Password policy violation (token not spent).
        """
        claims = self._tokens.verify(reset_token, TOKEN_TYPE_PASSWORD_RESET).unwrap()
        if not claims.token_id:
            raise InvalidTokenException()
        check_password_policy(new_password).unwrap()

        user = await self._users.find_by_id(claims.subject)
        if user is None:
            raise InvalidTokenException()

        password_hash = await self._hasher.hash(new_password)
        claimed = await self._store.claim(
            reset_token_used_key(claims.token_id),
            self._settings.reset_token_expire_seconds,
        )
        if not claimed:
            raise InvalidTokenException("Reset token has already been used")
        if await self._users.update_password_hash(user.id, password_hash) is None:
            raise InvalidTokenException()
        logger.info("Password reset completed for user %s", user.id)
