"""Password policy shared by register, change password and reset."""

from taskauth.core.constants import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH
from taskauth.domain.enums import ErrorKind
from taskauth.domain.result import Err, Ok, Result


def check_password_policy(password: str | None) -> Result[str]:
    """Return Ok(password) if it satisfies the policy, else Err(VALIDATION).

    Policy: 8-128 characters with at least one uppercase letter, one
    lowercase letter and one digit.
    """
    if not password:
        return Err(ErrorKind.VALIDATION, "Password is required")
    if len(password) < PASSWORD_MIN_LENGTH:
        return Err(
            ErrorKind.VALIDATION,
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
        )
    if len(password) > PASSWORD_MAX_LENGTH:
        return Err(
            ErrorKind.VALIDATION,
            f"Password must be at most {PASSWORD_MAX_LENGTH} characters long",
        )
    if not (
        any(c.isupper() for c in password)
        and any(c.islower() for c in password)
        and any(c.isdigit() for c in password)
    ):
        return Err(
            ErrorKind.VALIDATION,
            "Password must contain at least one uppercase letter, one lowercase letter, and one number",
        )
    return Ok(password)
