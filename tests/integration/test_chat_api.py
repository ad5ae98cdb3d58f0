"""Integration tests for POST /api/chat."""

from __future__ import annotations

from httpx import AsyncClient
from sqlalchemy import func, select

from recruit.db.models import ChatInteraction


class TestChatFlow:
    """First answer is free; later turns need an account."""

    async def test_first_message_answers_scripted_question(self, client: AsyncClient):
        response = await client.post("/api/chat", json={"message": "hi"})
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "first_question_answered"
        assert data["question"] == "What does a Deputy Sheriff earn?"
        assert data["topic"] == "salary"
        assert data["message"].startswith("Hey there! ")
        assert data["registration_required"] is False
        assert data["points_awarded"] == 0
        assert len(data["session_id"]) == 32
        assert response.headers["x-chat-session"] == data["session_id"]

    async def test_anonymous_second_message_requires_registration(self, client: AsyncClient):
        first = (await client.post("/api/chat", json={"message": "hi"})).json()
        response = await client.post("/api/chat", json={
            "message": "How long is the academy?",
            "session_id": first["session_id"],
            "state": first["state"],
        })
        data = response.json()
        assert data["state"] == "registration_required"
        assert data["registration_required"] is True
        assert data["topic"] is None
        assert data["quick_replies"] == []

    async def test_logged_in_user_chats_freely_and_earns(self, client: AsyncClient, user, headers):
        first = (await client.post("/api/chat", json={"message": "hi"}, headers=headers(user))).json()
        assert first["points_awarded"] == 5
        response = await client.post(
            "/api/chat",
            json={"message": "How long is the academy?", "session_id": first["session_id"], "state": first["state"]},
            headers=headers(user),
        )
        data = response.json()
        assert data["state"] == "free_chat"
        assert data["topic"] == "academy"
        assert data["question"] == "How long is the academy?"
        assert data["points_awarded"] == 5
        assert "23 weeks" in data["message"]
        points = (await client.get("/api/user/points", headers=headers(user))).json()
        assert points["points"] == 10

    async def test_registering_unlocks_parked_session(self, client: AsyncClient, user, headers):
        response = await client.post(
            "/api/chat",
            json={"message": "Is there a maximum age?", "session_id": "parked", "state": "registration_required"},
            headers=headers(user),
        )
        data = response.json()
        assert data["state"] == "free_chat"
        assert data["topic"] == "age"

    async def test_session_header_fallback(self, client: AsyncClient):
        response = await client.post("/api/chat", json={"message": "hi"}, headers={"X-Chat-Session": "abc123"})
        assert response.json()["session_id"] == "abc123"

    async def test_invalid_state(self, client: AsyncClient):
        response = await client.post("/api/chat", json={"message": "hi", "state": "sleeping"})
        assert response.status_code == 422

    async def test_empty_message(self, client: AsyncClient):
        response = await client.post("/api/chat", json={"message": ""})
        assert response.status_code == 422

    async def test_interactions_logged(self, client: AsyncClient, db_session):
        first = (await client.post("/api/chat", json={"message": "hi"})).json()
        await client.post("/api/chat", json={
            "message": "pay?", "session_id": first["session_id"], "state": first["state"],
        })
        count = (await db_session.execute(
            select(func.count()).select_from(ChatInteraction)
            .where(ChatInteraction.session_id == first["session_id"])
        )).scalar()
        assert count == 2
