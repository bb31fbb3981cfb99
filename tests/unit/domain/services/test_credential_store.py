"""Unit tests for the in-memory credential store."""

import asyncio
import uuid

import pytest

from eventauth.domain.entities import User
from eventauth.domain.exceptions import DuplicateUsernameError
from eventauth.domain.services import CredentialStore, InMemoryCredentialStore


def _user(username: str) -> User:
    return User(
        id=str(uuid.uuid4()),
        username=username,
        password_hash="$argon2id$hash",
        gender="female",
        age=30,
        email=f"{username}@example.com",
        phone="+1-555-0100",
    )


def test_satisfies_protocol(memory_store):
    assert isinstance(memory_store, CredentialStore)


@pytest.mark.asyncio
async def test_insert_and_lookup(memory_store):
    user = await memory_store.insert(_user("alice"))

    assert await memory_store.get_by_username("alice") is user
    assert await memory_store.get_by_username("bob") is None


@pytest.mark.asyncio
async def test_duplicate_username_rejected(memory_store):
    await memory_store.insert(_user("alice"))

    with pytest.raises(DuplicateUsernameError) as exc_info:
        await memory_store.insert(_user("alice"))

    assert exc_info.value.username == "alice"
    assert await memory_store.get_by_username("alice") is not None


@pytest.mark.asyncio
async def test_concurrent_inserts_keep_username_unique():
    store = InMemoryCredentialStore()

    results = await asyncio.gather(
        *(store.insert(_user("alice")) for _ in range(10)),
        return_exceptions=True,
    )

    assert sum(isinstance(r, User) for r in results) == 1
    assert sum(isinstance(r, DuplicateUsernameError) for r in results) == 9
    assert await store.get_by_username("alice") is not None
