"""Domain value objects for the auth service.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class EmailAddress:
    """Value object for an e-mail address (normalized to lower case).

    Use EmailAddress.parse() for user input; it strips whitespace and
    lower-cases before validating so lookups are case-insensitive.
    """

    value: str

    PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}$"
    )
    MAX_LENGTH: ClassVar[int] = 254

    def __post_init__(self) -> None:
        """Validate format and length.

        Raises:
            ValueError: If empty, too long, or not an e-mail address.
        """
        if not self.value:
            raise ValueError("Email is required")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError("Email is too long")
        if not self.PATTERN.match(self.value):
            raise ValueError("Please provide a valid email address")

    @classmethod
    def parse(cls, raw: str | None) -> "EmailAddress":
        """Normalize and validate raw input."""
        return cls((raw or "").strip().lower())

    def redacted(self) -> str:
        """Return a log-safe form (first two chars of local part)."""
        local, domain = self.value.split("@", 1)
        return f"{local[:2]}***@{domain}"

    def __str__(self) -> str:
        return self.value
