"""JWT token issuing and verification.

Tokens carry a "typ" claim so an access token can never be replayed as a
refresh or reset token. Every verification failure (bad signature, bad
payload, wrong type, expiry) yields the same Err so callers cannot tell
them apart.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from taskauth.core.constants import TOKEN_TYPE_ACCESS
from taskauth.domain.enums import ErrorKind
from taskauth.domain.result import Err, Ok, Result
from taskauth.shared.utils.datetime import from_timestamp_utc, utc_now

INVALID_TOKEN_MESSAGE = "Invalid or expired token"

_RESERVED_CLAIMS = frozenset({"sub", "typ", "iat", "exp", "jti"})


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, verified token payload."""

    subject: str
    token_type: str
    issued_at: datetime
    expires_at: datetime
    token_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def email(self) -> str | None:
        return self.extra.get("email")

    @property
    def role(self) -> str | None:
        return self.extra.get("role")

    @property
    def session_id(self) -> str | None:
        return self.extra.get("sid")


class TokenService:
    """Issue and verify signed, time-limited tokens with a server secret."""

    def __init__(self, secret_key: str, algorithm: str = "HS256") -> None:
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self._algorithm = algorithm

    def issue(
        self,
        claims: dict[str, Any],
        ttl_seconds: int,
        token_type: str = TOKEN_TYPE_ACCESS,
        with_jti: bool = False,
    ) -> str:
        """Create a signed token.

        Args:
            claims: Claims to encode; must include "sub".
            ttl_seconds: Lifetime in seconds.
            token_type: Value of the "typ" claim (access, refresh, password_reset).
            with_jti: Add a random "jti" (needed for single-use tokens).

        Returns:
            Encoded JWT string.
        """
        if not claims.get("sub"):
            raise ValueError("Token claims must include 'sub'")
        now = utc_now()
        to_encode = dict(claims)
        to_encode["typ"] = token_type
        to_encode["iat"] = int(now.timestamp())
        to_encode["exp"] = int((now + timedelta(seconds=ttl_seconds)).timestamp())
        if with_jti:
            to_encode["jti"] = uuid.uuid4().hex
        encoded = jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)
        return cast(str, encoded)

    def verify(self, token: str, token_type: str = TOKEN_TYPE_ACCESS) -> Result[TokenClaims]:
        """Verify signature, expiry and type.

        Returns:
            Ok(TokenClaims) or Err(INVALID_TOKEN) for any failure.
        """
        invalid = Err(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_MESSAGE)
        if not token:
            return invalid
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_sub": True, "require_iat": True},
            )
        except JWTError:
            return invalid
        if payload.get("typ") != token_type or not payload.get("sub"):
            return invalid
        try:
            claims = TokenClaims(
                subject=str(payload["sub"]),
                token_type=token_type,
                issued_at=from_timestamp_utc(float(payload["iat"])),
                expires_at=from_timestamp_utc(float(payload["exp"])),
                token_id=payload.get("jti"),
                extra={k: v for k, v in payload.items() if k not in _RESERVED_CLAIMS},
            )
        except (KeyError, TypeError, ValueError):
            return invalid
        return Ok(claims)
