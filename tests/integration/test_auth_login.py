"""Integration tests for POST /auth/login."""

import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient

SIGNUP = {
    "username": "alice",
    "password": "pw1",
    "gender": "female",
    "age": 30,
    "email": "alice@example.com",
    "phone": "+1-555-0100",
}


@pytest.mark.asyncio
async def test_login_flow(client: AsyncClient, jwt_service, clock):
    """Register, log in, and check the token's claims."""
    reg = await client.post("/auth/register", json=SIGNUP)
    assert reg.status_code == 200
    user_id = reg.json()["id"]

    res = await client.post("/auth/login", json={"username": "alice", "password": "pw1"})

    assert res.status_code == 200
    data = res.json()
    assert data["username"] == "alice"
    claims = jwt_service.parse(data["token"])
    assert claims.user_id == user_id
    assert uuid.UUID(claims.user_id)
    assert claims.username == "alice"
    assert claims.expires_at == clock() + timedelta(days=7)


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    await client.post("/auth/register", json=SIGNUP)

    res = await client.post("/auth/login", json={"username": "alice", "password": "wrong"})

    assert res.status_code == 401
    assert "token" not in res.json()


@pytest.mark.asyncio
async def test_login_unknown_user_matches_wrong_password(client: AsyncClient):
    await client.post("/auth/register", json=SIGNUP)

    wrong_password = await client.post(
        "/auth/login", json={"username": "alice", "password": "wrong"}
    )
    unknown_user = await client.post(
        "/auth/login", json={"username": "mallory", "password": "pw1"}
    )

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"username": "alice"},
        {"password": "pw1"},
        {"username": "", "password": "pw1"},
        {"username": "alice", "password": ""},
    ],
)
async def test_login_invalid_body(client: AsyncClient, payload):
    res = await client.post("/auth/login", json=payload)

    assert res.status_code == 400
    assert res.json()["error"] == "invalid request body"


@pytest.mark.asyncio
async def test_login_non_json_body(client: AsyncClient):
    res = await client.post(
        "/auth/login",
        content="username=alice&password=pw1",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert res.status_code == 400


@pytest.mark.asyncio
async def test_login_ignores_bearer_header(client: AsyncClient):
    """Login is public; a junk Authorization header does not block it."""
    await client.post("/auth/register", json=SIGNUP)

    res = await client.post(
        "/auth/login",
        json={"username": "alice", "password": "pw1"},
        headers={"Authorization": "Bearer junk"},
    )

    assert res.status_code == 200
