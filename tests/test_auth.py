"""
Tests for the authentication endpoints and session cookie handling.
"""

import pytest
from datetime import timedelta
from httpx import AsyncClient

from renthive.config import settings
from renthive.models.user import User
from renthive.utils.auth import create_reset_token
from tests.conftest import TEST_PASSWORD


class TestSignUp:

    @pytest.mark.asyncio
    async def test_sign_up_starts_session(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/signup",
            json={"email": "New.User@Example.com", "password": "supersecret1", "full_name": "New User"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["email"] == "new.user@example.com"
        assert body["access_token"]
        assert body["token_type"] == "bearer"
        assert settings.session_cookie_name in response.cookies

        response = await async_client.get("/api/auth/session")
        assert response.json()["user"]["email"] == "new.user@example.com"

    @pytest.mark.asyncio
    async def test_sign_up_duplicate(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.post(
            "/api/auth/signup", json={"email": test_owner.email, "password": "supersecret1"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "User already registered"

    @pytest.mark.asyncio
    async def test_sign_up_weak_password(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/signup", json={"email": "weak@example.com", "password": "short"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Password should be at least 8 characters"

    @pytest.mark.asyncio
    async def test_sign_up_invalid_email(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/signup", json={"email": "not-an-email", "password": "supersecret1"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestSignIn:

    @pytest.mark.asyncio
    async def test_sign_in_success(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.post(
            "/api/auth/signin", json={"email": test_owner.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(test_owner.id)
        assert response.json()["expires_in"] == settings.access_token_expire_minutes * 60

    @pytest.mark.asyncio
    async def test_sign_in_wrong_password(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.post(
            "/api/auth/signin", json={"email": test_owner.email, "password": "wrong-password"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid login credentials"

    @pytest.mark.asyncio
    async def test_cookie_session_reaches_protected_endpoints(self, async_client: AsyncClient, test_owner: User):
        await async_client.post("/api/auth/signin", json={"email": test_owner.email, "password": TEST_PASSWORD})

        response = await async_client.get("/api/favorites")

        assert response.status_code == 200
        assert response.json() == []


class TestSession:

    @pytest.mark.asyncio
    async def test_session_without_cookie(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/session")

        assert response.status_code == 200
        assert response.json()["user"] is None

    @pytest.mark.asyncio
    async def test_sign_out_clears_session(self, async_client: AsyncClient, test_owner: User):
        await async_client.post("/api/auth/signin", json={"email": test_owner.email, "password": TEST_PASSWORD})

        response = await async_client.post("/api/auth/signout")
        assert response.status_code == 200
        assert response.json()["success"] is True

        response = await async_client.get("/api/auth/session")
        assert response.json()["user"] is None

    @pytest.mark.asyncio
    async def test_sign_out_without_session(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/signout")
        assert response.status_code == 200


class TestPasswordReset:

    @pytest.mark.asyncio
    async def test_reset_flow(self, async_client: AsyncClient, test_owner: User, reset_tokens):
        response = await async_client.post("/api/auth/password/reset", json={"email": test_owner.email})
        assert response.status_code == 200
        assert len(reset_tokens) == 1
        _email, token = reset_tokens[0]

        response = await async_client.post(
            "/api/auth/password/update", json={"password": "freshpassword9", "reset_token": token}
        )
        assert response.status_code == 200

        response = await async_client.post(
            "/api/auth/signin", json={"email": test_owner.email, "password": "freshpassword9"}
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_reset_unknown_email_looks_the_same(self, async_client: AsyncClient, test_owner: User, reset_tokens):
        known = await async_client.post("/api/auth/password/reset", json={"email": test_owner.email})
        unknown = await async_client.post("/api/auth/password/reset", json={"email": "ghost@example.com"})

        assert unknown.status_code == known.status_code == 200
        assert unknown.json() == known.json()
        assert len(reset_tokens) == 1

    @pytest.mark.asyncio
    async def test_update_without_session_or_token(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/password/update", json={"password": "freshpassword9"})

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_expired_reset_token(self, async_client: AsyncClient, test_owner: User):
        token = create_reset_token(
            test_owner.id, test_owner.email, test_owner.hashed_password, expires_delta=timedelta(seconds=-10)
        )

        response = await async_client.post(
            "/api/auth/password/update", json={"password": "freshpassword9", "reset_token": token}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "TOKEN_EXPIRED"

    @pytest.mark.asyncio
    async def test_update_with_session(self, async_client: AsyncClient, test_owner: User):
        await async_client.post("/api/auth/signin", json={"email": test_owner.email, "password": TEST_PASSWORD})

        response = await async_client.post("/api/auth/password/update", json={"password": "freshpassword9"})
        assert response.status_code == 200

        await async_client.post("/api/auth/signout")
        response = await async_client.post(
            "/api/auth/signin", json={"email": test_owner.email, "password": TEST_PASSWORD}
        )
        assert response.status_code == 400
