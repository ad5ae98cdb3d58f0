"""Integration tests for applicant intake and admin management."""

from __future__ import annotations

from httpx import AsyncClient

FORM = {
    "first_name": "Dana",
    "last_name": "Cruz",
    "email": "dana.cruz@example.com",
    "phone": "415-555-0100",
    "zip_code": "94110",
    "referral_source": "Instagram",
}


class TestSubmit:
    """POST /api/applicants"""

    async def test_anonymous(self, client: AsyncClient):
        response = await client.post("/api/applicants", json=FORM)
        assert response.status_code == 201
        data = response.json()
        assert data["application_status"] == "pending"
        assert data["tracking_number"].startswith("SD-")
        assert data["points_awarded"] == 0

    async def test_signed_in(self, client: AsyncClient, user, headers):
        response = await client.post("/api/applicants", json=FORM, headers=headers(user))
        assert response.json()["points_awarded"] == 500
        me = (await client.get("/api/v1/auth/me", headers=headers(user))).json()
        assert me["has_applied"] is True
        assert me["points"] == 600

    async def test_validation(self, client: AsyncClient):
        response = await client.post("/api/applicants", json={**FORM, "email": "nope"})
        assert response.status_code == 422
        response = await client.post("/api/applicants", json={**FORM, "first_name": ""})
        assert response.status_code == 422


class TestAdmin:
    """Admin listing and status updates."""

    async def test_list(self, client: AsyncClient, admin, headers):
        await client.post("/api/applicants", json=FORM)
        await client.post("/api/applicants", json={**FORM, "first_name": "Eli", "email": "eli@example.com"})
        data = (await client.get("/api/admin/applicants", headers=headers(admin))).json()
        assert data["total"] == 2
        assert [a["first_name"] for a in data["applicants"]] == ["Eli", "Dana"]
        assert data["status_counts"]["pending"] == 2

    async def test_search_and_status(self, client: AsyncClient, admin, headers):
        created = (await client.post("/api/applicants", json=FORM)).json()
        await client.post("/api/applicants", json={**FORM, "first_name": "Eli", "email": "eli@example.com"})

        response = await client.patch(
            f"/api/admin/applicants/{created['id']}",
            json={"application_status": "interested"},
            headers=headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["application_status"] == "interested"

        data = (await client.get(
            "/api/admin/applicants?status=interested", headers=headers(admin),
        )).json()
        assert [a["first_name"] for a in data["applicants"]] == ["Dana"]

        data = (await client.get("/api/admin/applicants", params={"search": "eli@"}, headers=headers(admin))).json()
        assert data["total"] == 1

    async def test_bad_status(self, client: AsyncClient, admin, headers):
        created = (await client.post("/api/applicants", json=FORM)).json()
        response = await client.patch(
            f"/api/admin/applicants/{created['id']}",
            json={"application_status": "knighted"},
            headers=headers(admin),
        )
        assert response.status_code == 400

    async def test_unknown_applicant(self, client: AsyncClient, admin, headers):
        response = await client.patch(
            "/api/admin/applicants/999", json={"application_status": "hired"}, headers=headers(admin),
        )
        assert response.status_code == 404

    async def test_requires_admin(self, client: AsyncClient, user, headers):
        response = await client.get("/api/admin/applicants", headers=headers(user))
        assert response.status_code == 403
