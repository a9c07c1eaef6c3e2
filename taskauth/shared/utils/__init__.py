"""Shared utilities: datetime, generators, sanitization."""

from taskauth.shared.utils.datetime import ensure_utc, from_timestamp_utc, utc_now
from taskauth.shared.utils.generators import generate_cuid, generate_session_id
from taskauth.shared.utils.sanitization import clean_display_name, sanitize_html

__all__ = [
    "generate_cuid",
    "generate_session_id",
    "utc_now",
    "ensure_utc",
    "from_timestamp_utc",
    "clean_display_name",
    "sanitize_html",
]
