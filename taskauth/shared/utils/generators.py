"""ID and secret generators."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

SESSION_ID_BYTES = 32


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2) for user records.

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_session_id() -> str:
    """Return an unguessable URL-safe session identifier."""
    return secrets.token_urlsafe(SESSION_ID_BYTES)
