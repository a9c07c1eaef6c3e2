"""Domain enumerations.

Enums represent fixed sets of domain values (user roles, error kinds).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class UserRole(_ValuesMixin, str, Enum):
    """Role carried in access tokens and session records."""

    ADMIN = "admin"
    USER = "user"


class ErrorKind(_ValuesMixin, str, Enum):
    """Closed set of failure kinds. Value is the machine-readable error code.

    Each kind has a fixed HTTP status (see status_code); the presentation
    layer dispatches on the kind, not on exception classes.
    """

    VALIDATION = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    INVALID_OTP = "INVALID_OTP"
    OTP_EXPIRED = "OTP_EXPIRED"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    REPOSITORY = "REPOSITORY_ERROR"

    @property
    def error_code(self) -> str:
        return self.value

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_OTP: 400,
    ErrorKind.OTP_EXPIRED: 400,
    ErrorKind.STORE_UNAVAILABLE: 503,
    ErrorKind.REPOSITORY: 500,
}
