"""Auth API schemas.

Field constraints here only bound request size; credential and password
policy checks happen in AuthService so every client gets the same errors.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from taskauth.core.constants import PASSWORD_MAX_LENGTH
from taskauth.schemas.user import UserResponse

# Longest RFC 5321 address.
_EMAIL_MAX = 254


class RegisterRequest(BaseModel):
    """Request body for public registration. New accounts always get the user role."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=_EMAIL_MAX)
    password: str = Field(..., max_length=PASSWORD_MAX_LENGTH)


class LoginRequest(BaseModel):
    """Request body for login."""

    email: str = Field(..., max_length=_EMAIL_MAX)
    password: str = Field(..., max_length=PASSWORD_MAX_LENGTH)


class RefreshRequest(BaseModel):
    """Request body for POST /auth/refresh."""

    refresh_token: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., max_length=_EMAIL_MAX)


class VerifyOtpRequest(BaseModel):
    email: str = Field(..., max_length=_EMAIL_MAX)
    otp: str = Field(..., min_length=1, max_length=12)


class ResetPasswordRequest(BaseModel):
    """Request body for POST /auth/reset-password (after verify-otp)."""

    reset_token: str = Field(..., min_length=1)
    new_password: str = Field(..., max_length=PASSWORD_MAX_LENGTH)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., max_length=PASSWORD_MAX_LENGTH)
    new_password: str = Field(..., max_length=PASSWORD_MAX_LENGTH)


class ExtendSessionRequest(BaseModel):
    """Optional extension; defaults to the configured session lifetime."""

    additional_seconds: int | None = Field(default=None, gt=0, le=7 * 24 * 3600)


class AuthData(BaseModel):
    """Payload of register and login responses."""

    user: UserResponse
    token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_token: str | None = None
    session_id: str | None = None


class AccessTokenData(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


class ForgotPasswordData(BaseModel):
    otp_expires_at: datetime


class ResetTokenData(BaseModel):
    reset_token: str
    expires_at: datetime


class SessionExtendData(BaseModel):
    extended: bool
