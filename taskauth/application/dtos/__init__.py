"""Application DTOs (results and inputs for use cases)."""

from taskauth.application.dtos.auth import (
    AuthResult,
    ForgotPasswordResult,
    ResetTokenResult,
)
from taskauth.application.dtos.user import UserCreate, UserResult

__all__ = [
    "AuthResult",
    "ForgotPasswordResult",
    "ResetTokenResult",
    "UserCreate",
    "UserResult",
]
