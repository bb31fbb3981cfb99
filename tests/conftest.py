"""Pytest configuration for all tests."""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from argon2 import PasswordHasher
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eventauth.core.config import Settings
from eventauth.domain.services import InMemoryCredentialStore
from eventauth.infrastructure.auth import JWTService, PasswordVerifier
from eventauth.infrastructure.persistence.database import Base
from eventauth.infrastructure.persistence import models  # noqa: F401

TEST_TOKEN_SECRET = "test-token-secret-that-is-long-enough-for-hs256"
TEST_PASSWORD_SALT = "test-password-salt"
START_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


def tamper_signature(token: str) -> str:
    """Flip one character in the middle of a JWT's signature segment."""
    header, payload, signature = token.split(".")
    index = len(signature) // 2
    replacement = "A" if signature[index] != "A" else "B"
    signature = signature[:index] + replacement + signature[index + 1 :]
    return f"{header}.{payload}.{signature}"


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def tamper():
    """Function that corrupts a token's signature."""
    return tamper_signature


@pytest.fixture
def token_secret() -> str:
    return TEST_TOKEN_SECRET


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        token_secret=TEST_TOKEN_SECRET,
        password_salt=TEST_PASSWORD_SALT,
        log_format="console",
    )


@pytest.fixture
def password_verifier() -> PasswordVerifier:
    """Verifier with a minimal Argon2 work factor so tests stay fast."""
    hasher = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    return PasswordVerifier(salt=TEST_PASSWORD_SALT, hasher=hasher)


@pytest.fixture
def jwt_service(clock: FrozenClock) -> JWTService:
    return JWTService(secret_key=TEST_TOKEN_SECRET, clock=clock)


@pytest.fixture
def memory_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def app(
    test_settings: Settings,
    jwt_service: JWTService,
    password_verifier: PasswordVerifier,
) -> AsyncGenerator[FastAPI, None]:
    """Application wired to an in-memory database and the test clock."""
    from eventauth.infrastructure.api.app import create_app

    application = create_app(
        test_settings,
        jwt_service=jwt_service,
        password_verifier=password_verifier,
    )
    db = application.state.db_manager
    await db.create_tables()

    yield application

    await db.drop_tables()
    await db.disconnect()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the application in-process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
