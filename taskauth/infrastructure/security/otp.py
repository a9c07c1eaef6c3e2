"""One-time numeric codes for password reset.

Digits come from the secrets module (CSPRNG). Stateless: expiry is assigned
by the caller.
"""

import secrets

MIN_OTP_LENGTH = 4


class OtpGenerator:
    """Generate uniformly random numeric codes (leading zeros allowed)."""

    def __init__(self, length: int = 6) -> None:
        if length < MIN_OTP_LENGTH:
            raise ValueError(f"OTP length must be at least {MIN_OTP_LENGTH}")
        self.length = length

    def generate(self, length: int | None = None) -> str:
        """Return a numeric string of length digits (default: configured length)."""
        n = self.length if length is None else length
        if n < MIN_OTP_LENGTH:
            raise ValueError(f"OTP length must be at least {MIN_OTP_LENGTH}")
        return "".join(secrets.choice("0123456789") for _ in range(n))
