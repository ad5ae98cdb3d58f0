"""Integration tests for registration, login and the current-user endpoint."""

from __future__ import annotations

from httpx import AsyncClient

REGISTER = "/api/v1/auth/register"
LOGIN = "/api/v1/auth/login"
ME = "/api/v1/auth/me"


class TestRegister:
    """POST /api/v1/auth/register"""

    async def test_register_returns_token(self, client: AsyncClient):
        response = await client.post(REGISTER, json={
            "email": "New.Recruit@Example.com",
            "password": "Deputy2024",
            "display_name": "New Recruit",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "new.recruit@example.com"
        assert data["user"]["role"] == "recruit"
        assert data["user"]["points"] == 0

    async def test_display_name_defaults_to_local_part(self, client: AsyncClient):
        response = await client.post(REGISTER, json={"email": "jdoe@example.com", "password": "Deputy2024"})
        assert response.json()["user"]["display_name"] == "jdoe"

    async def test_duplicate_email(self, client: AsyncClient, user):
        response = await client.post(REGISTER, json={"email": "RECRUIT@example.com", "password": "Deputy2024"})
        assert response.status_code == 409

    async def test_weak_password(self, client: AsyncClient):
        response = await client.post(REGISTER, json={"email": "weak@example.com", "password": "short"})
        assert response.status_code == 400

    async def test_invalid_email(self, client: AsyncClient):
        response = await client.post(REGISTER, json={"email": "not-an-email", "password": "Deputy2024"})
        assert response.status_code == 422

    async def test_unknown_referrer_is_dropped(self, client: AsyncClient):
        response = await client.post(REGISTER, json={
            "email": "ref@example.com", "password": "Deputy2024", "referred_by_id": 999,
        })
        assert response.status_code == 201

    async def test_referrer_credited_once_per_signup(self, client: AsyncClient, user, headers):
        for email in ("first.ref@example.com", "second.ref@example.com"):
            response = await client.post(REGISTER, json={
                "email": email, "password": "Deputy2024", "referred_by_id": user.id,
            })
            assert response.status_code == 201
            assert response.json()["user"]["points"] == 0

        points = (await client.get("/api/user/points", headers=headers(user))).json()
        assert points["points"] == 100
        history = (await client.get("/api/user/points/history", headers=headers(user))).json()
        assert {entry["action"] for entry in history["entries"]} == {"referral"}


class TestLogin:
    """POST /api/v1/auth/login"""

    async def test_login(self, client: AsyncClient, user):
        response = await client.post(LOGIN, json={"email": "recruit@example.com", "password": "Deputy2024"})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id

    async def test_wrong_password(self, client: AsyncClient, user):
        response = await client.post(LOGIN, json={"email": "recruit@example.com", "password": "Wrong2024"})
        assert response.status_code == 401

    async def test_unknown_email(self, client: AsyncClient):
        response = await client.post(LOGIN, json={"email": "ghost@example.com", "password": "Deputy2024"})
        assert response.status_code == 401

    async def test_banned(self, client: AsyncClient, make_recruit):
        await make_recruit(email="banned@example.com", is_banned=True)
        response = await client.post(LOGIN, json={"email": "banned@example.com", "password": "Deputy2024"})
        assert response.status_code == 403


class TestMe:
    """GET /api/v1/auth/me"""

    async def test_me(self, client: AsyncClient, user, headers):
        response = await client.get(ME, headers=headers(user))
        assert response.status_code == 200
        assert response.json()["email"] == "recruit@example.com"

    async def test_requires_token(self, client: AsyncClient):
        response = await client.get(ME)
        assert response.status_code in (401, 403)

    async def test_rejects_garbage_token(self, client: AsyncClient):
        response = await client.get(ME, headers={"Authorization": "Bearer not.a.token"})
        assert response.status_code == 401

    async def test_token_from_register_works(self, client: AsyncClient):
        token = (await client.post(REGISTER, json={
            "email": "flow@example.com", "password": "Deputy2024",
        })).json()["access_token"]
        response = await client.get(ME, headers={"Authorization": f"Bearer {token}"})
        assert response.json()["email"] == "flow@example.com"
