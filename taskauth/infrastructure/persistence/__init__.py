"""Persistence adapters for the user repository port."""

from taskauth.infrastructure.persistence.memory_user_repo import InMemoryUserRepository

__all__ = ["InMemoryUserRepository"]
