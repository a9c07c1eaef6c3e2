"""Tests for InMemoryUserRepository."""

import pytest

from taskauth.application.dtos.user import UserCreate
from taskauth.domain.enums import UserRole
from taskauth.domain.exceptions import ConflictException, RepositoryException
from taskauth.infrastructure.persistence import InMemoryUserRepository


@pytest.fixture
def repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


def _data(email: str = "alice@x.com", role: str = "user") -> UserCreate:
    return UserCreate(name="Alice", email=email, password_hash="$2b$04$hash", role=role)


async def test_create_and_find(repo: InMemoryUserRepository) -> None:
    user = await repo.create(_data())
    assert user.id
    assert user.role is UserRole.USER
    assert (await repo.find_by_id(user.id)).email == "alice@x.com"
    assert (await repo.find_by_email("ALICE@x.com")).id == user.id


async def test_find_missing_returns_none(repo: InMemoryUserRepository) -> None:
    assert await repo.find_by_id("nope") is None
    assert await repo.find_by_email("nobody@x.com") is None


async def test_duplicate_email_conflicts(repo: InMemoryUserRepository) -> None:
    await repo.create(_data())
    with pytest.raises(ConflictException):
        await repo.create(_data("Alice@X.com"))


async def test_invalid_role_is_repository_error(repo: InMemoryUserRepository) -> None:
    with pytest.raises(RepositoryException):
        await repo.create(_data(role="root"))


async def test_update_password_hash(repo: InMemoryUserRepository) -> None:
    user = await repo.create(_data())
    updated = await repo.update_password_hash(user.id, "$2b$04$new")
    assert updated.password_hash == "$2b$04$new"
    assert (await repo.find_by_id(user.id)).password_hash == "$2b$04$new"
    assert await repo.update_password_hash("nope", "$2b$04$new") is None


async def test_returned_entities_are_copies(repo: InMemoryUserRepository) -> None:
    user = await repo.create(_data())
    user.deactivate()
    assert (await repo.find_by_id(user.id)).is_active is True


async def test_set_active(repo: InMemoryUserRepository) -> None:
    user = await repo.create(_data())
    assert (await repo.set_active(user.id, False)).is_active is False
    assert (await repo.find_by_id(user.id)).can_login() is False
    assert await repo.set_active("nope", True) is None
