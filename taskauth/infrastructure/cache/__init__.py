"""Redis session store and key builders."""

from taskauth.infrastructure.cache.keys import (
    cache_key,
    otp_key,
    reminder_key,
    reset_token_used_key,
    session_key,
)
from taskauth.infrastructure.cache.session_store import SessionStore

__all__ = [
    "SessionStore",
    "cache_key",
    "otp_key",
    "reminder_key",
    "reset_token_used_key",
    "session_key",
]
