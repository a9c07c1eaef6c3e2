"""Input sanitization for user-supplied display text."""

import nh3


def sanitize_html(value: str) -> str:
    """Strip all HTML tags with nh3 (no tags or attributes allowed).

    Args:
        value: Raw string that may contain HTML.

    Returns:
        Sanitized string safe for HTML display.
    """
    if not value:
        return value
    return nh3.clean(value, tags=set(), attributes={})


def clean_display_name(value: str | None) -> str:
    """Return a trimmed, tag-free display name ("" when nothing is left)."""
    return sanitize_html((value or "").strip()).strip()
