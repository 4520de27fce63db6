"""Tests for authentication endpoints."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import create_access_token, decode_token
from app.auth.revocation import TokenRevocation
from app.models import User
from conftest import TEST_PASSWORD, bearer, create_user


async def _login(client: AsyncClient, phone: str, password: str = TEST_PASSWORD):
    return await client.post("/api/auth/login", json={"phone": phone, "password": password})


@pytest.mark.auth
@pytest.mark.asyncio
class TestLogin:
    """POST /api/auth/login"""

    async def test_login_success(self, client: AsyncClient, farmer_user: User):
        response = await _login(client, farmer_user.phone)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["data"]["user"]["id"] == farmer_user.id
        assert body["data"]["active_profile"]["type"] == "farmer"
        assert body["data"]["active_profile"]["is_complete"] is True
        assert decode_token(body["data"]["token"])["sub"] == farmer_user.id

    async def test_login_cleans_phone(self, client: AsyncClient, farmer_user: User):
        response = await _login(client, "90000-00001")

        assert response.status_code == 200

    async def test_wrong_password_and_unknown_phone_look_the_same(
        self, client: AsyncClient, farmer_user: User
    ):
        wrong_password = await _login(client, farmer_user.phone, "not-the-password")
        unknown_phone = await _login(client, "9999999999")

        assert wrong_password.status_code == unknown_phone.status_code == 401
        assert wrong_password.json() == unknown_phone.json()
        body = wrong_password.json()
        assert body["success"] is False
        assert body["message"] == "Invalid phone number or password."
        assert body["errors"]["phone"] == ["The provided credentials are incorrect."]

    async def test_deactivated_account(self, client: AsyncClient, db_session: AsyncSession):
        await create_user(db_session, phone="9000000009", is_active=False)

        response = await _login(client, "9000000009")

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "ACCOUNT_DEACTIVATED"
        assert body["message"] != "Invalid phone number or password."

    async def test_deactivated_account_wrong_password(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        await create_user(db_session, phone="9000000009", is_active=False)

        response = await _login(client, "9000000009", "not-the-password")

        assert response.status_code == 401

    async def test_missing_password(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={"phone": "9000000001"})

        assert response.status_code == 422
        assert "password" in response.json()["errors"]


@pytest.mark.auth
@pytest.mark.asyncio
class TestSession:
    """check, user and logout"""

    async def test_check_without_token(self, client: AsyncClient):
        response = await client.get("/api/auth/check")

        assert response.status_code == 200
        assert response.json() == {"success": True, "authenticated": False, "user": None}

    async def test_check_with_token(self, client: AsyncClient, farmer_user: User, farmer_token: str):
        response = await client.get("/api/auth/check", headers=bearer(farmer_token))

        assert response.status_code == 200
        body = response.json()
        assert body["authenticated"] is True
        assert body["user"] == {
            "id": farmer_user.id,
            "phone": farmer_user.phone,
            "name": farmer_user.name,
            "active_role": "farmer",
        }

    async def test_check_with_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/auth/check", headers=bearer("not-a-jwt"))

        assert response.status_code == 200
        assert response.json()["authenticated"] is False

    async def test_current_user(self, client: AsyncClient, dual_user: User, dual_token: str):
        response = await client.get("/api/auth/user", headers=bearer(dual_token))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == dual_user.id
        assert data["has_farmer_profile"] is True
        assert data["has_owner_profile"] is True
        assert data["active_profile"]["type"] == "farmer"

    async def test_current_user_requires_token(self, client: AsyncClient):
        response = await client.get("/api/auth/user")

        assert response.status_code == 401
        assert response.json()["code"] == "AUTHENTICATION_REQUIRED"

    async def test_expired_token(self, client: AsyncClient, farmer_user: User):
        token = create_access_token(farmer_user.id, expires_delta=timedelta(seconds=-1))

        response = await client.get("/api/auth/user", headers=bearer(token))

        assert response.status_code == 401

    async def test_deactivated_user_token_rejected(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        user = await create_user(db_session, phone="9000000009", is_active=False)

        response = await client.get(
            "/api/auth/user", headers=bearer(create_access_token(user.id))
        )

        assert response.status_code == 401
        assert response.json()["message"] == "User not found or inactive."

    async def test_logout_revokes_only_presented_token(
        self, client: AsyncClient, farmer_user: User
    ):
        first = (await _login(client, farmer_user.phone)).json()["data"]["token"]
        second = (await _login(client, farmer_user.phone)).json()["data"]["token"]

        response = await client.post("/api/auth/logout", headers=bearer(first))

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully"}

        assert (await client.get("/api/auth/user", headers=bearer(first))).status_code == 401
        assert (await client.get("/api/auth/user", headers=bearer(second))).status_code == 200

        check = await client.get("/api/auth/check", headers=bearer(first))
        assert check.json()["authenticated"] is False

    async def test_logout_reports_failed_revocation(
        self, client: AsyncClient, farmer_token: str, monkeypatch
    ):
        class ReadOnlyRedis:
            async def exists(self, key):
                return 0

            async def setex(self, key, ttl, value):
                raise ConnectionError("redis down")

        async def _get_redis():
            return ReadOnlyRedis()

        monkeypatch.setattr("app.auth.revocation.get_redis", _get_redis)

        response = await client.post("/api/auth/logout", headers=bearer(farmer_token))

        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "REVOCATION_UNAVAILABLE"

    async def test_logout_requires_token(self, client: AsyncClient):
        response = await client.post("/api/auth/logout")

        assert response.status_code == 401


@pytest.mark.unit
@pytest.mark.asyncio
class TestTokenRevocation:
    async def test_revoked_entry_expires_with_token(self, redis_client, farmer_user: User):
        claims = decode_token(create_access_token(farmer_user.id))

        assert await TokenRevocation.revoke_token(claims["jti"], claims["exp"]) is True

        assert await TokenRevocation.is_revoked(claims["jti"]) is True
        ttl = await redis_client.ttl(f"revoked:{claims['jti']}")
        assert 0 < ttl <= claims["exp"] - claims["iat"]

    async def test_already_expired_token_not_stored(self, redis_client):
        assert await TokenRevocation.revoke_token("old-jti", 1.0) is True
        assert await redis_client.exists("revoked:old-jti") == 0

    async def test_fails_closed_when_redis_is_down(self, monkeypatch):
        class BrokenRedis:
            async def exists(self, key):
                raise ConnectionError("redis down")

        async def _get_redis():
            return BrokenRedis()

        monkeypatch.setattr("app.auth.revocation.get_redis", _get_redis)

        assert await TokenRevocation.is_revoked("any-jti") is True
