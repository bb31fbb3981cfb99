"""Unit tests for the SQLAlchemy user repository."""

import uuid

import pytest
from sqlalchemy import select

from eventauth.domain.entities import User
from eventauth.domain.exceptions import DuplicateUsernameError
from eventauth.domain.services import CredentialStore
from eventauth.infrastructure.persistence.models import UserModel
from eventauth.infrastructure.persistence.repositories import UserRepository


def _user(username: str = "alice", **overrides) -> User:
    fields = {
        "id": str(uuid.uuid4()),
        "username": username,
        "password_hash": "$argon2id$v=19$m=8,t=1,p=1$c2FsdA$aGFzaA",
        "gender": "female",
        "age": 30,
        "email": f"{username}@example.com",
        "phone": "+1-555-0100",
    }
    fields.update(overrides)
    return User(**fields)


@pytest.fixture
def repo(db_session) -> UserRepository:
    return UserRepository(db_session)


def test_satisfies_credential_store_protocol(repo):
    assert isinstance(repo, CredentialStore)


@pytest.mark.asyncio
async def test_insert_and_get_by_username(repo):
    user = _user(address="1 Main St")

    await repo.insert(user)
    found = await repo.get_by_username("alice")

    assert found is not None
    assert found.id == user.id
    assert found.password_hash == user.password_hash
    assert found.gender == "female"
    assert found.age == 30
    assert found.email == "alice@example.com"
    assert found.phone == "+1-555-0100"
    assert found.address == "1 Main St"
    assert found.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_get_by_username_unknown(repo):
    assert await repo.get_by_username("nobody") is None


@pytest.mark.asyncio
async def test_duplicate_username_rolls_back(repo, db_session):
    await repo.insert(_user())

    with pytest.raises(DuplicateUsernameError):
        await repo.insert(_user())

    result = await db_session.execute(select(UserModel.username))
    assert result.scalars().all() == ["alice"]


@pytest.mark.asyncio
async def test_session_usable_after_duplicate(repo):
    await repo.insert(_user())
    with pytest.raises(DuplicateUsernameError):
        await repo.insert(_user())

    await repo.insert(_user("bob"))

    assert await repo.get_by_username("alice") is not None
    assert await repo.get_by_username("bob") is not None


@pytest.mark.asyncio
async def test_username_lookup_is_exact(repo):
    await repo.insert(_user())

    assert await repo.get_by_username("Alice") is None
    assert await repo.get_by_username("alice ") is None
