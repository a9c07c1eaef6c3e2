"""Redis-backed session store.

Holds every piece of ephemeral auth state with a TTL: session records, OTP
challenges, single-use token markers, reminder markers and generic cached
JSON. Call connect() at startup and disconnect() at shutdown; the lifespan
owns the single instance and injects it into AuthService.

Unlike a best-effort cache, a session store must not pretend a miss when
Redis is down: every operation raises StoreUnavailableException while the
store is disconnected. A connection or timeout error marks the store
disconnected; reconnection is left to the process supervisor. Any other
command error (e.g. WRONGTYPE) is wrapped as well but leaves the store
connected.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from taskauth.core.config import Settings, get_settings
from taskauth.core.constants import REMINDER_SENT_VALUE
from taskauth.domain.entities import OtpChallenge, SessionRecord
from taskauth.domain.exceptions import StoreUnavailableException
from taskauth.infrastructure.cache.keys import (
    otp_key,
    reminder_key,
    session_key,
)

logger = logging.getLogger(__name__)


class SessionStore:
    """Async Redis store for sessions and other TTL-bound auth state."""

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize session store.

        Args:
            redis_client: Optional Redis client for testing or DI (used as-is).
            settings: Optional settings; defaults to get_settings().
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = False

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup.

        Failure is logged and leaves the store disconnected; operations then
        raise StoreUnavailableException.
        """
        if self.redis is None:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_connect_timeout=self.settings.redis_socket_timeout,
                socket_timeout=self.settings.redis_socket_timeout,
                socket_keepalive=True,
            )
        try:
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Session store connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.error("Session store connection failed: %s", e)
            self._connected = False

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Session store disconnected")

    def is_connected(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    def _client(self) -> redis.Redis:
        if not self.is_connected() or self.redis is None:
            raise StoreUnavailableException()
        return self.redis

    def _unavailable(self, op: str, error: Exception) -> StoreUnavailableException:
        """Mark the store disconnected after a transport error."""
        logger.error("Session store %s failed, marking disconnected: %s", op, error)
        self._connected = False
        return StoreUnavailableException()

    def _failed(self, op: str, error: Exception) -> StoreUnavailableException:
        """Wrap a command error (e.g. WRONGTYPE). The connection stays usable."""
        logger.error("Session store %s failed: %s", op, error)
        return StoreUnavailableException("Session store operation failed")

    async def ping(self) -> bool:
        """Return True if Redis answers PING. Never raises."""
        if not self.is_connected() or self.redis is None:
            return False
        try:
            return bool(await self.redis.ping())
        except (redis.ConnectionError, redis.TimeoutError) as e:
            self._unavailable("ping", e)
            return False
        except redis.RedisError:
            logger.exception("Session store ping failed")
            return False

    # Sessions

    async def set(self, session_id: str, record: SessionRecord, ttl_seconds: int) -> None:
        """Upsert a session record with TTL (replaces any existing record).

        Args:
            session_id: Opaque session identifier.
            record: Record to store.
            ttl_seconds: Time-to-live in seconds.
        """
        await self.set_json(session_key(session_id), record.to_dict(), ttl_seconds)

    async def get(self, session_id: str) -> SessionRecord | None:
        """Return the session record, or None on miss or corrupt payload."""
        data = await self.get_json(session_key(session_id))
        if data is None:
            return None
        try:
            return SessionRecord.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed session record")
            return None

    async def delete(self, session_id: str) -> bool:
        """Remove a session. Idempotent; returns True if a record existed."""
        return await self.delete_key(session_key(session_id))

    async def extend(self, session_id: str, additional_seconds: int) -> bool:
        """Push the session expiry additional_seconds into the future.

        Read then conditional write: SET XX never recreates a key deleted
        between the two steps. Not a transaction; a concurrent extend may win.

        Returns:
            True if the session existed and was extended, False otherwise.
        """
        record = await self.get(session_id)
        if record is None:
            return False
        updated = record.extended(additional_seconds)
        client = self._client()
        try:
            written = await client.set(
                session_key(session_id),
                json.dumps(updated.to_dict()),
                ex=additional_seconds,
                xx=True,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise self._unavailable("extend", e) from e
        except redis.RedisError as e:
            raise self._failed("extend", e) from e
        if not written:
            return False
        logger.debug("Session extended by %ss", additional_seconds)
        return True

    # OTP challenges

    async def save_otp_challenge(self, challenge: OtpChallenge, ttl_seconds: int) -> None:
        """Store the challenge for challenge.email, replacing any earlier one."""
        await self.set_json(otp_key(challenge.email), challenge.to_dict(), ttl_seconds)

    async def get_otp_challenge(self, email: str) -> OtpChallenge | None:
        """Return the pending challenge, or None on miss or corrupt payload."""
        data = await self.get_json(otp_key(email))
        if data is None:
            return None
        try:
            return OtpChallenge.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed OTP challenge")
            return None

    async def consume_otp_challenge(self, email: str) -> bool:
        """Remove the challenge. Only the first of concurrent callers gets True."""
        return await self.delete_key(otp_key(email))

    # Single-use markers and reminders

    async def claim(self, key: str, ttl_seconds: int) -> bool:
        """Atomically create key if absent (SET NX EX).

        Returns:
            True if this caller created the marker, False if it already existed.
        """
        client = self._client()
        try:
            created = await client.set(key, "1", ex=ttl_seconds, nx=True)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise self._unavailable("claim", e) from e
        except redis.RedisError as e:
            raise self._failed("claim", e) from e
        return bool(created)

    async def mark_reminder_sent(
        self, task_id: str, hours_before: int, ttl_seconds: int | None = None
    ) -> None:
        """Record that the reminder for task_id at hours_before was sent."""
        ttl = ttl_seconds or self.settings.reminder_ttl_seconds
        client = self._client()
        try:
            await client.setex(reminder_key(task_id, hours_before), ttl, REMINDER_SENT_VALUE)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise self._unavailable("mark_reminder_sent", e) from e
        except redis.RedisError as e:
            raise self._failed("mark_reminder_sent", e) from e

    async def was_reminder_sent(self, task_id: str, hours_before: int) -> bool:
        """Return True if the reminder marker exists. False on store errors."""
        if not self.is_connected() or self.redis is None:
            return False
        try:
            value = await self.redis.get(reminder_key(task_id, hours_before))
        except (redis.ConnectionError, redis.TimeoutError) as e:
            self._unavailable("was_reminder_sent", e)
            return False
        except redis.RedisError:
            logger.exception("Reminder lookup failed for task %s", task_id)
            return False
        return value == REMINDER_SENT_VALUE

    # Generic JSON values

    async def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store value (JSON-serialized) under key with TTL."""
        client = self._client()
        serialized = json.dumps(value)
        try:
            await client.setex(key, ttl_seconds, serialized)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise self._unavailable("set", e) from e
        except redis.RedisError as e:
            raise self._failed("set", e) from e
        logger.debug("Store SET: %s (TTL: %ss)", key.split(":", 1)[0], ttl_seconds)

    async def get_json(self, key: str) -> Any | None:
        """Return the JSON-decoded value, or None on miss or undecodable payload."""
        client = self._client()
        try:
            raw = await client.get(key)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise self._unavailable("get", e) from e
        except redis.RedisError as e:
            raise self._failed("get", e) from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Undecodable value under %s", key.split(":", 1)[0])
            return None

    async def delete_key(self, key: str) -> bool:
        """Delete key. Returns True if it existed."""
        client = self._client()
        try:
            removed = await client.delete(key)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise self._unavailable("delete", e) from e
        except redis.RedisError as e:
            raise self._failed("delete", e) from e
        return int(removed or 0) > 0

    async def clear_all(self) -> None:
        """Delete every key in the selected database. Tests and dev only."""
        client = self._client()
        try:
            await client.flushdb()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise self._unavailable("clear_all", e) from e
        except redis.RedisError as e:
            raise self._failed("clear_all", e) from e
        logger.warning("Session store CLEARED: all keys deleted")
