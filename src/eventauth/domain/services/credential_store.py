"""Credential store contract and an in-memory implementation.

The auth service only ever looks users up by username and asks for new users
to be inserted. Anything satisfying CredentialStore can back it; the
SQLAlchemy UserRepository is the production implementation.
"""

import asyncio
from typing import Protocol, runtime_checkable

from eventauth.domain.entities import User
from eventauth.domain.exceptions import DuplicateUsernameError


@runtime_checkable
class CredentialStore(Protocol):
    """Persistence operations the auth service depends on.

    Implementations must enforce username uniqueness and be safe under
    concurrent use.
    """

    async def get_by_username(self, username: str) -> User | None:
        """Return the user with this username, or None."""
        ...

    async def insert(self, user: User) -> User:
        """Persist a new user.

        Raises:
            DuplicateUsernameError: If the username is taken.
            CredentialStoreError: On any other persistence failure.
        """
        ...


class InMemoryCredentialStore:
    """Process-local credential store keyed by username."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = asyncio.Lock()

    async def get_by_username(self, username: str) -> User | None:
        return self._users.get(username)

    async def insert(self, user: User) -> User:
        async with self._lock:
            if user.username in self._users:
                raise DuplicateUsernameError(user.username)
            self._users[user.username] = user
        return user
