"""Service interfaces (ports) used by AuthService.

Infrastructure supplies the implementations; tests substitute fakes or
AsyncMock objects that satisfy the same shape.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from taskauth.domain.entities import OtpChallenge, SessionRecord
    from taskauth.domain.result import Result
    from taskauth.infrastructure.security.jwt import TokenClaims


class IPasswordHasher(Protocol):
    """Protocol for one-way password hashing."""

    async def hash(self, password: str) -> str:
        """Return a salted hash of password."""

    async def compare(self, password: str, password_hash: str) -> bool:
        """Return True if password matches password_hash."""


class ITokenService(Protocol):
    """Protocol for signed, time-limited tokens."""

    def issue(
        self,
        claims: dict[str, Any],
        ttl_seconds: int,
        token_type: str = ...,
        with_jti: bool = False,
    ) -> str:
        """Return a signed token carrying claims."""

    def verify(self, token: str, token_type: str = ...) -> Result[TokenClaims]:
        """Return Ok(claims) or Err(INVALID_TOKEN)."""


class IOtpGenerator(Protocol):
    """Protocol for one-time code generation."""

    def generate(self, length: int | None = None) -> str:
        """Return a numeric code."""


class ISessionStore(Protocol):
    """Protocol for TTL-bound auth state (sessions, OTPs, single-use markers)."""

    def is_connected(self) -> bool:
        """Return True while the backing store is usable."""

    async def set(self, session_id: str, record: SessionRecord, ttl_seconds: int) -> None:
        """Upsert a session record with TTL."""

    async def get(self, session_id: str) -> SessionRecord | None:
        """Return the session record or None."""

    async def delete(self, session_id: str) -> bool:
        """Remove a session; True if it existed."""

    async def extend(self, session_id: str, additional_seconds: int) -> bool:
        """Extend a live session; False if absent."""

    async def save_otp_challenge(self, challenge: OtpChallenge, ttl_seconds: int) -> None:
        """Store the challenge for its e-mail address."""

    async def get_otp_challenge(self, email: str) -> OtpChallenge | None:
        """Return the pending challenge or None."""

    async def consume_otp_challenge(self, email: str) -> bool:
        """Remove the challenge; True only for the caller that removed it."""

    async def claim(self, key: str, ttl_seconds: int) -> bool:
        """Create a single-use marker; False if it already existed."""


class IEmailSender(Protocol):
    """Protocol for sending plain-text e-mail."""

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send a message. Raises on delivery failure."""
