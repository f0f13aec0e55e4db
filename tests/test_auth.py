"""
Tests for authentication endpoints.
"""

import pytest
from httpx import AsyncClient
from jose import jwt

from taskboard.core.config import settings
from taskboard.services.auth import create_refresh_token


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Test user registration."""
    response = await client.post(
        "/api/auth/register",
        json={
            "email": "newuser@example.com",
            "password": "securepassword123",
            "name": "New User",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "newuser@example.com"
    assert data["user"]["name"] == "New User"
    assert data["user"]["role"] == "user"
    assert "password_hash" not in data["user"]
    assert data["access_token"]
    assert data["refresh_token"]


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    """Test registration with existing email fails."""
    response = await client.post(
        "/api/auth/register",
        json={"email": test_user.email, "password": "anotherpassword"},
    )

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "conflict"
    assert "already exists" in body["message"].lower()


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    """Test registration with weak password fails."""
    response = await client.post(
        "/api/auth/register",
        json={"email": "test@example.com", "password": "123"},
    )

    assert response.status_code == 422  # Validation error


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, user_factory):
    """Test successful login."""
    password = "testpassword123"
    user = await user_factory.create(email="login@example.com", password=password)

    response = await client.post(
        "/api/auth/login",
        json={"email": user.email, "password": password},
    )

    assert response.status_code == 200
    data = response.json()
    payload = jwt.decode(
        data["access_token"],
        settings.auth.secret_key,
        algorithms=[settings.auth.algorithm],
    )
    assert payload["sub"] == str(user.id)
    assert payload["user_id"] == user.id
    assert payload["roles"] == "user"
    assert payload["type"] == "access"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, user_factory):
    user = await user_factory.create(email="wrong@example.com")

    response = await client.post(
        "/api/auth/login",
        json={"email": user.email, "password": "not-the-password"},
    )

    assert response.status_code == 401
    assert response.json()["error"] == "unauthenticated"


@pytest.mark.asyncio
async def test_login_unknown_user(client: AsyncClient):
    response = await client.post(
        "/api/auth/login",
        json={"email": "ghost@example.com", "password": "whatever"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_token(client: AsyncClient, test_user):
    refresh_token = create_refresh_token(test_user.id, "user")

    response = await client.post("/api/auth/refresh", json={"refreshToken": refresh_token})

    assert response.status_code == 200
    payload = jwt.decode(
        response.json()["access_token"],
        settings.auth.secret_key,
        algorithms=[settings.auth.algorithm],
    )
    assert payload["user_id"] == test_user.id
    assert payload["roles"] == "user"


@pytest.mark.asyncio
async def test_refresh_keeps_role_claim(client: AsyncClient, user_factory, db):
    """By default the refresh token's role claim is re-signed unchanged."""
    user = await user_factory.create(role="admin")
    refresh_token = create_refresh_token(user.id, "admin")
    user.role = "user"
    await db.commit()

    response = await client.post("/api/auth/refresh", json={"refresh_token": refresh_token})

    payload = jwt.decode(
        response.json()["access_token"],
        settings.auth.secret_key,
        algorithms=[settings.auth.algorithm],
    )
    assert payload["roles"] == "admin"


@pytest.mark.asyncio
async def test_refresh_reresolves_role_when_enabled(
    client: AsyncClient, user_factory, db, monkeypatch
):
    monkeypatch.setattr(settings.auth, "refresh_reresolve_roles", True)
    user = await user_factory.create(role="admin")
    refresh_token = create_refresh_token(user.id, "admin")
    user.role = "user"
    await db.commit()

    response = await client.post("/api/auth/refresh", json={"refresh_token": refresh_token})

    assert response.status_code == 200
    payload = jwt.decode(
        response.json()["access_token"],
        settings.auth.secret_key,
        algorithms=[settings.auth.algorithm],
    )
    assert payload["roles"] == "user"


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient, auth_headers):
    access_token = auth_headers["Authorization"].split()[1]

    response = await client.post("/api/auth/refresh", json={"refresh_token": access_token})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_protected_route_requires_token(client: AsyncClient):
    response = await client.get("/api/tasks")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthenticated"


@pytest.mark.asyncio
async def test_refresh_token_cannot_authenticate(client: AsyncClient, test_user):
    refresh_token = create_refresh_token(test_user.id, "user")

    response = await client.get(
        "/api/tasks",
        headers={"Authorization": f"Bearer {refresh_token}"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_garbage_token_rejected(client: AsyncClient):
    response = await client.get(
        "/api/tasks",
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout(client: AsyncClient, auth_headers):
    response = await client.post("/api/auth/logout", headers=auth_headers)

    assert response.status_code == 200
    assert "logout successful" in response.json()["message"].lower()


@pytest.mark.asyncio
async def test_forgot_password_same_answer(client: AsyncClient, test_user):
    known = await client.post("/api/auth/forgot-password", json={"email": test_user.email})
    unknown = await client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert "reset link" in known.json()["message"]
    assert "reset link" in unknown.json()["message"]


@pytest.mark.asyncio
async def test_auth_profile(client: AsyncClient, test_user, auth_headers):
    response = await client.get("/api/auth/profile", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["id"] == test_user.id


@pytest.mark.asyncio
async def test_request_id_header_propagated(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "abc-123"
