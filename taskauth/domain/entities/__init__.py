"""Domain entities."""

from taskauth.domain.entities.session import OtpChallenge, SessionRecord
from taskauth.domain.entities.user import UserEntity

__all__ = ["OtpChallenge", "SessionRecord", "UserEntity"]
