"""Core constants: store key prefixes and shared literal values.

Single source of truth for Redis key structure (DRY). Used by
infrastructure.cache.keys.
"""

# Store key prefixes
KEY_PREFIX_SESSION = "session"
KEY_PREFIX_CACHE = "cache"
KEY_PREFIX_OTP = "password_reset_otp"
KEY_PREFIX_RESET_TOKEN_USED = "reset_token_used"
KEY_PREFIX_REMINDER = "reminder_sent"

# Delimiter for composite keys
KEY_SEP = ":"

# Value stored under reminder markers
REMINDER_SENT_VALUE = "sent"

# Token "typ" claim values
TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"
TOKEN_TYPE_PASSWORD_RESET = "password_reset"

# Password policy bounds
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
