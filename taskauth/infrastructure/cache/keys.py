"""Store key builders. Single place for key format (DRY).

Key components (session_id, email, jti, task_id) must not contain KEY_SEP
to avoid ambiguous or colliding keys.
"""

from taskauth.core.constants import (
    KEY_PREFIX_CACHE,
    KEY_PREFIX_OTP,
    KEY_PREFIX_REMINDER,
    KEY_PREFIX_RESET_TOKEN_USED,
    KEY_PREFIX_SESSION,
    KEY_SEP,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the key separator."""
    if not value:
        raise ValueError(f"Key component {name!r} must not be empty")
    if KEY_SEP in value:
        raise ValueError(
            f"Key component {name!r} must not contain separator {KEY_SEP!r}"
        )


def session_key(session_id: str) -> str:
    """Key for a session record."""
    _validate_key_component(session_id, "session_id")
    return f"{KEY_PREFIX_SESSION}{KEY_SEP}{session_id}"


def otp_key(email: str) -> str:
    """Key for the pending password-reset challenge of an e-mail address."""
    _validate_key_component(email, "email")
    return f"{KEY_PREFIX_OTP}{KEY_SEP}{email}"


def reset_token_used_key(jti: str) -> str:
    """Key for the single-use marker of a reset token."""
    _validate_key_component(jti, "jti")
    return f"{KEY_PREFIX_RESET_TOKEN_USED}{KEY_SEP}{jti}"


def reminder_key(task_id: str, hours_before: int) -> str:
    """Key for a 'reminder sent' marker (task + hours before due)."""
    _validate_key_component(task_id, "task_id")
    return f"{KEY_PREFIX_REMINDER}{KEY_SEP}{task_id}{KEY_SEP}{int(hours_before)}h"


def cache_key(name: str) -> str:
    """Key for a generic cached JSON value."""
    _validate_key_component(name, "name")
    return f"{KEY_PREFIX_CACHE}{KEY_SEP}{name}"
