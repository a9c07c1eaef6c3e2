"""DTOs for authentication flows."""

from dataclasses import dataclass
from datetime import datetime

from taskauth.application.dtos.user import UserResult


@dataclass(frozen=True)
class AuthResult:
    """Result of register or login.

    register issues only an access token; login also creates a session and
    a refresh token bound to it.
    """

    user: UserResult
    token: str
    expires_in: int
    refresh_token: str | None = None
    session_id: str | None = None


@dataclass(frozen=True)
class ForgotPasswordResult:
    """Identical for known and unknown addresses."""

    message: str
    otp_expires_at: datetime


@dataclass(frozen=True)
class ResetTokenResult:
    """Short-lived, single-use proof that an OTP was verified."""

    reset_token: str
    expires_at: datetime
