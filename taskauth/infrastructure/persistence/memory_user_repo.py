"""In-process user repository.

Implements IUserRepository with a dict guarded by an asyncio lock. Returned
entities are copies, so callers cannot mutate stored state without going
through the repository.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from taskauth.application.dtos.user import UserCreate
from taskauth.domain.entities import UserEntity
from taskauth.domain.enums import UserRole
from taskauth.domain.exceptions import ConflictException, RepositoryException
from taskauth.shared.utils.datetime import utc_now
from taskauth.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


class InMemoryUserRepository:
    """User store for development and tests. Not shared between processes."""

    def __init__(self) -> None:
        self._users: dict[str, UserEntity] = {}
        self._ids_by_email: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def find_by_email(self, email: str) -> UserEntity | None:
        async with self._lock:
            user_id = self._ids_by_email.get(email.strip().lower())
            user = self._users.get(user_id) if user_id else None
            return replace(user) if user else None

    async def find_by_id(self, user_id: str) -> UserEntity | None:
        async with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    async def create(self, data: UserCreate) -> UserEntity:
        """Persist a new user with a fresh CUID.

        Raises:
            ConflictException: E-mail already registered.
            RepositoryException: Entity failed validation.
        """
        email = data.email.strip().lower()
        async with self._lock:
            if email in self._ids_by_email:
                raise ConflictException()
            try:
                user = UserEntity(
                    id=generate_cuid(),
                    name=data.name,
                    email=email,
                    password_hash=data.password_hash,
                    role=UserRole(data.role),
                )
            except ValueError as e:
                raise RepositoryException(f"Could not create user: {e}") from e
            self._users[user.id] = user
            self._ids_by_email[email] = user.id
            logger.debug("User stored: %s", user.id)
            return replace(user)

    async def update_password_hash(self, user_id: str, password_hash: str) -> UserEntity | None:
        async with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            user.change_password_hash(password_hash)
            return replace(user)

    async def set_active(self, user_id: str, is_active: bool) -> UserEntity | None:
        """Activate or deactivate an account. Returns None if it does not exist."""
        async with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            user.is_active = is_active
            user.updated_at = utc_now()
            return replace(user)
