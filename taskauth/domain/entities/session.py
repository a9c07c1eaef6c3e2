"""Ephemeral auth state kept in the session store: sessions and OTP challenges.

Both serialize to plain JSON dicts (ISO-8601 timestamps) so the store never
pickles objects.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any

from taskauth.shared.utils.datetime import ensure_utc, utc_now


def _parse_dt(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(str(value)))


@dataclass(frozen=True)
class SessionRecord:
    """Server-side record of an authenticated session."""

    user_id: str
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def start(
        cls,
        user_id: str,
        email: str,
        role: str,
        ttl_seconds: int,
        now: datetime | None = None,
    ) -> SessionRecord:
        """Create a record issued at now and expiring after ttl_seconds."""
        issued = now or utc_now()
        return cls(
            user_id=user_id,
            email=email,
            role=role,
            issued_at=issued,
            expires_at=issued + timedelta(seconds=ttl_seconds),
        )

    def extended(self, seconds: int, now: datetime | None = None) -> SessionRecord:
        """Return a copy expiring seconds from now."""
        return replace(self, expires_at=(now or utc_now()) + timedelta(seconds=seconds))

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "role": self.role,
            "issued_at": self.issued_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionRecord:
        """Build from a stored dict. Raises KeyError/ValueError/TypeError if malformed."""
        return cls(
            user_id=str(data["user_id"]),
            email=str(data["email"]),
            role=str(data["role"]),
            issued_at=_parse_dt(data["issued_at"]),
            expires_at=_parse_dt(data["expires_at"]),
        )


@dataclass(frozen=True)
class OtpChallenge:
    """Pending password-reset challenge for one e-mail address.

    A challenge with consumed_at set is spent and never accepted again.
    """

    email: str
    user_id: str
    code: str
    expires_at: datetime
    consumed_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def is_consumed(self) -> bool:
        return self.consumed_at is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "user_id": self.user_id,
            "code": self.code,
            "expires_at": self.expires_at.isoformat(),
            "consumed_at": self.consumed_at.isoformat() if self.consumed_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OtpChallenge:
        """Build from a stored dict. Raises KeyError/ValueError/TypeError if malformed."""
        consumed = data.get("consumed_at")
        return cls(
            email=str(data["email"]),
            user_id=str(data["user_id"]),
            code=str(data["code"]),
            expires_at=_parse_dt(data["expires_at"]),
            consumed_at=_parse_dt(consumed) if consumed else None,
        )
