"""Security: password hashing, JWT tokens, and OTP codes."""

from taskauth.infrastructure.security.jwt import TokenClaims, TokenService
from taskauth.infrastructure.security.otp import OtpGenerator
from taskauth.infrastructure.security.password import (
    PasswordHasher,
    generate_random_password,
)

__all__ = [
    "OtpGenerator",
    "PasswordHasher",
    "TokenClaims",
    "TokenService",
    "generate_random_password",
]
