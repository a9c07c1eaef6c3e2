"""Domain exceptions for the auth service.

One base exception carrying an ErrorKind; each kind has a flat subclass so
callers can catch a specific failure. The presentation layer maps them to
HTTP responses via ErrorKind.status_code.
"""

from typing import Any

from taskauth.domain.enums import ErrorKind


class AppException(Exception):
    """Base exception for all auth service errors.

    Attributes:
        kind: Closed error kind (drives status code and error code).
        message: Human-readable error description.
        details: Additional error context (e.g. field).
    """

    kind: ErrorKind = ErrorKind.VALIDATION
    default_message: str = "Request failed"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        kind: ErrorKind | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description; defaults per class.
            details: Optional dict of extra context.
            kind: Optional kind override (only meaningful on the base class).
        """
        if kind is not None:
            self.kind = kind
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def error_code(self) -> str:
        return self.kind.error_code

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_dict(self) -> dict[str, Any]:
        """Return the stable error envelope used in API responses."""
        body: dict[str, Any] = {
            "success": False,
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(AppException):
    """Raised when input shape or password policy validation fails."""

    kind = ErrorKind.VALIDATION
    default_message = "Validation failed"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, {"field": field} if field else None)


class UnauthorizedException(AppException):
    """Raised on bad credentials or inactive accounts."""

    kind = ErrorKind.UNAUTHORIZED
    default_message = "Invalid credentials"


class InvalidTokenException(AppException):
    """Raised when an access, refresh or reset token is invalid, expired or used."""

    kind = ErrorKind.INVALID_TOKEN
    default_message = "Invalid or expired token"


class ConflictException(AppException):
    """Raised when registering an email that already exists."""

    kind = ErrorKind.CONFLICT
    default_message = "User already exists with this email"


class NotFoundException(AppException):
    """Raised when a user or OTP challenge does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class InvalidOtpException(AppException):
    """Raised when an OTP code does not match the active challenge."""

    kind = ErrorKind.INVALID_OTP
    default_message = "Invalid OTP"


class OtpExpiredException(AppException):
    """Raised when an OTP is presented after its expiry."""

    kind = ErrorKind.OTP_EXPIRED
    default_message = "OTP has expired"


class StoreUnavailableException(AppException):
    """Raised when the session store is disconnected or unreachable."""

    kind = ErrorKind.STORE_UNAVAILABLE
    default_message = "Session store unavailable"


class RepositoryException(AppException):
    """Raised when the durable user store fails (driver error wrapped)."""

    kind = ErrorKind.REPOSITORY
    default_message = "User repository error"


_EXCEPTION_BY_KIND: dict[ErrorKind, type[AppException]] = {
    ErrorKind.UNAUTHORIZED: UnauthorizedException,
    ErrorKind.INVALID_TOKEN: InvalidTokenException,
    ErrorKind.CONFLICT: ConflictException,
    ErrorKind.NOT_FOUND: NotFoundException,
    ErrorKind.INVALID_OTP: InvalidOtpException,
    ErrorKind.OTP_EXPIRED: OtpExpiredException,
    ErrorKind.STORE_UNAVAILABLE: StoreUnavailableException,
    ErrorKind.REPOSITORY: RepositoryException,
}


def exception_for(kind: ErrorKind, message: str | None = None) -> AppException:
    """Build the exception subclass matching kind.

    Args:
        kind: Error kind to raise.
        message: Optional message; class default when omitted.

    Returns:
        AppException subclass instance for kind.
    """
    if kind is ErrorKind.VALIDATION:
        return ValidationException(message or ValidationException.default_message)
    return _EXCEPTION_BY_KIND[kind](message)
