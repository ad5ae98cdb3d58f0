"""Integration tests for the background checklist API."""

from __future__ import annotations

from httpx import AsyncClient

BASE = "/api/background-checklist"


class TestChecklistApi:
    """Catalogue, toggles and legacy import."""

    async def test_catalogue_with_progress(self, client: AsyncClient, user, headers):
        response = await client.get(BASE, headers=headers(user))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 20
        assert data["required_total"] == 13
        assert data["completed"] == 0
        assert data["unlocked"] is False
        assert data["points_needed"] == 75
        assert all(d["checked"] is False for d in data["documents"])

    async def test_unlocked_with_enough_points(self, client: AsyncClient, make_recruit, headers):
        veteran = await make_recruit(email="vet@example.com", points=80)
        data = (await client.get(BASE, headers=headers(veteran))).json()
        assert data["unlocked"] is True
        assert data["points_needed"] == 0

    async def test_toggle(self, client: AsyncClient, user, headers):
        response = await client.put(f"{BASE}/dd214", json={"checked": True}, headers=headers(user))
        assert response.status_code == 200
        assert response.json() == {"checked": ["dd214"], "points_awarded": 2, "badges_awarded": []}

        data = (await client.get(BASE, headers=headers(user))).json()
        assert data["checked"] == ["dd214"]
        assert data["required_completed"] == 1

        response = await client.put(f"{BASE}/dd214", json={"checked": False}, headers=headers(user))
        assert response.json()["checked"] == []

    async def test_unknown_document(self, client: AsyncClient, user, headers):
        response = await client.put(f"{BASE}/library-card", json={"checked": True}, headers=headers(user))
        assert response.status_code == 404

    async def test_import(self, client: AsyncClient, user, headers):
        response = await client.post(
            f"{BASE}/import",
            json={"document_ids": ["passport", "marriage-certificate", "nope"]},
            headers=headers(user),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["checked"] == ["marriage-certificate", "passport"]
        assert data["points_awarded"] == 4

    async def test_requires_auth(self, client: AsyncClient):
        assert (await client.get(BASE)).status_code in (401, 403)
