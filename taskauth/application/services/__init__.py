"""Application services."""

from taskauth.application.services.auth_service import AuthService
from taskauth.application.services.password_policy import check_password_policy

__all__ = ["AuthService", "check_password_policy"]
