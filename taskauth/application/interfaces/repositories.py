"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Implementations wrap driver errors in RepositoryException.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from taskauth.application.dtos.user import UserCreate
    from taskauth.domain.entities import UserEntity


class IUserRepository(Protocol):
    """Protocol for the durable user store (DIP)."""

    async def find_by_email(self, email: str) -> UserEntity | None:
        """Return user by normalized e-mail, or None."""

    async def find_by_id(self, user_id: str) -> UserEntity | None:
        """Return user by ID, or None."""

    async def create(self, data: UserCreate) -> UserEntity:
        """Persist a new user. Raises ConflictException if the e-mail exists."""

    async def update_password_hash(self, user_id: str, password_hash: str) -> UserEntity | None:
        """Replace the password hash. Returns None if the user does not exist."""

    async def set_active(self, user_id: str, is_active: bool) -> UserEntity | None:
        """Activate or deactivate an account. Returns None if the user does not exist."""
