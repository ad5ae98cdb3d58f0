"""Integration tests for the points API."""

from __future__ import annotations

from httpx import AsyncClient


class TestPointActions:
    """GET /api/points"""

    async def test_lists_actions(self, client: AsyncClient):
        response = await client.get("/api/points")
        assert response.status_code == 200
        actions = {a["action"]: a for a in response.json()["actions"]}
        assert actions["chat_participation"]["points"] == 5
        assert actions["application_submission"]["points"] == 500
        assert actions["sgt_ken_game_win"]["variable"] is True
        assert actions["sgt_ken_game_win"]["max_points"] == 220


class TestAward:
    """POST /api/points/award"""

    async def test_fixed_action(self, client: AsyncClient, user, headers):
        response = await client.post(
            "/api/points/award",
            json={"action": "resource_download", "points": 9999},
            headers=headers(user),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["points"] == 10
        assert data["new_total"] == 10

    async def test_variable_action(self, client: AsyncClient, user, headers):
        response = await client.post(
            "/api/points/award",
            json={"action": "deputy_skills_test", "points": 120},
            headers=headers(user),
        )
        assert response.json()["points"] == 120

    async def test_variable_action_over_cap(self, client: AsyncClient, user, headers):
        response = await client.post(
            "/api/points/award",
            json={"action": "tiktok_challenge_submission", "points": 500},
            headers=headers(user),
        )
        assert response.status_code == 400

    async def test_unknown_action(self, client: AsyncClient, user, headers):
        response = await client.post("/api/points/award", json={"action": "bribe"}, headers=headers(user))
        assert response.status_code == 400

    async def test_server_only_action_forbidden(self, client: AsyncClient, user, headers):
        response = await client.post(
            "/api/points/award", json={"action": "application_submission"}, headers=headers(user),
        )
        assert response.status_code == 403

    async def test_cannot_award_other_users(self, client: AsyncClient, user, make_recruit, headers):
        other = await make_recruit(email="other@example.com")
        response = await client.post(
            "/api/points/award",
            json={"action": "resource_download", "user_id": other.id},
            headers=headers(user),
        )
        assert response.status_code == 403

    async def test_admin_adjustment(self, client: AsyncClient, admin, user, headers):
        response = await client.post(
            "/api/points/award",
            json={"action": "admin_adjustment", "points": -5, "user_id": user.id},
            headers=headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["new_total"] == -5

    async def test_admin_unknown_user(self, client: AsyncClient, admin, headers):
        response = await client.post(
            "/api/points/award",
            json={"action": "admin_adjustment", "points": 5, "user_id": 9999},
            headers=headers(admin),
        )
        assert response.status_code == 404

    async def test_idempotency_key(self, client: AsyncClient, user, headers):
        body = {"action": "practice_test", "idempotency_key": "quiz-7"}
        first = await client.post("/api/points/award", json=body, headers=headers(user))
        second = await client.post("/api/points/award", json=body, headers=headers(user))
        assert first.json()["duplicate"] is False
        assert second.json()["duplicate"] is True
        assert second.json()["new_total"] == 20

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/points/award", json={"action": "practice_test"})
        assert response.status_code in (401, 403)


class TestBalances:
    """GET /api/user/points and /api/user/points/history"""

    async def test_balances(self, client: AsyncClient, user, headers):
        await client.post("/api/points/award", json={"action": "practice_test"}, headers=headers(user))
        response = await client.get("/api/user/points", headers=headers(user))
        assert response.json() == {"user_id": user.id, "points": 20, "donation_points": 0, "total": 20}

    async def test_history(self, client: AsyncClient, user, headers):
        for action in ("practice_test", "resource_download", "contact_form_submission"):
            await client.post("/api/points/award", json={"action": action}, headers=headers(user))
        response = await client.get("/api/user/points/history?limit=2", headers=headers(user))
        data = response.json()
        assert data["total"] == 3
        assert [e["action"] for e in data["entries"]] == ["contact_form_submission", "resource_download"]
        assert data["entries"][0]["balance"] == "points"
