"""User domain entity.

Represents the business concept of an account holder, independent of
persistence. The repository owns storage; the auth service only reads the
entity and asks the repository to replace the password hash.
"""

from dataclasses import dataclass, field
from datetime import datetime

from taskauth.domain.enums import UserRole
from taskauth.domain.exceptions import ValidationException
from taskauth.shared.utils.datetime import utc_now


@dataclass
class UserEntity:
    """Domain entity for a user account.

    password_hash is always a one-way hash, never the plaintext password.
    Validation runs on construction.
    """

    id: str
    name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    is_active: bool = True
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate user business rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("User ID is required", field="id")
        if not self.name or not self.name.strip():
            raise ValidationException("Name is required", field="name")
        if not self.password_hash:
            raise ValidationException("Password hash is required", field="password_hash")

    def can_login(self) -> bool:
        """Return whether the account may authenticate."""
        return self.is_active

    def change_password_hash(self, password_hash: str) -> None:
        """Replace the stored hash and bump updated_at."""
        if not password_hash:
            raise ValidationException("Password hash is required", field="password_hash")
        self.password_hash = password_hash
        self.updated_at = utc_now()

    def deactivate(self) -> None:
        """Disable login for this account. Idempotent."""
        self.is_active = False
        self.updated_at = utc_now()
