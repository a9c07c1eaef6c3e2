"""DTOs for user use cases (no dependency on storage)."""

from dataclasses import dataclass
from datetime import datetime

from taskauth.domain.entities import UserEntity


@dataclass(frozen=True)
class UserCreate:
    """Input for creating a user. password_hash is already hashed."""

    name: str
    email: str
    password_hash: str
    role: str = "user"


@dataclass(frozen=True)
class UserResult:
    """User read-model returned to callers. No password hash."""

    id: str
    name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, user: UserEntity) -> "UserResult":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role.value,
            is_active=user.is_active,
            created_at=user.created_at,
        )
