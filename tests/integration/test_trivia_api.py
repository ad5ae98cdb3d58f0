"""Integration tests for the trivia API."""

from __future__ import annotations

from httpx import AsyncClient

PERFECT = [
    {"question_id": "sf-1", "selected_answer": 0, "time_spent_ms": 3000},
    {"question_id": "sf-2", "selected_answer": 2, "time_spent_ms": 3000},
    {"question_id": "sf-3", "selected_answer": 0, "time_spent_ms": 3000},
    {"question_id": "sf-4", "selected_answer": 2, "time_spent_ms": 3000},
    {"question_id": "sf-5", "selected_answer": 3, "time_spent_ms": 3000},
]


class TestQuestions:
    """GET /api/trivia/questions"""

    async def test_backup_questions_when_table_empty(self, client: AsyncClient):
        response = await client.get("/api/trivia/questions?count=4")
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "backup"
        assert data["message"] == "Using backup questions"
        assert len(data["questions"]) == 4
        question = data["questions"][0]
        assert {"id", "question", "options", "correct_answer", "explanation", "category"} <= set(question)

    async def test_count_bounds(self, client: AsyncClient):
        assert (await client.get("/api/trivia/questions?count=0")).status_code == 422
        assert (await client.get("/api/trivia/questions?count=21")).status_code == 422


class TestSubmit:
    """POST /api/trivia/submit"""

    async def test_perfect_round(self, client: AsyncClient, user, headers):
        response = await client.post(
            "/api/trivia/submit",
            json={"round_id": "round-abc", "answers": PERFECT},
            headers=headers(user),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["correct_answers"] == 5
        assert data["total_questions"] == 5
        assert data["max_streak"] == 5
        assert data["points_awarded"] == 100
        assert data["duplicate"] is False
        assert data["badges_awarded"] == ["trivia-participant"]

        points = (await client.get("/api/user/points", headers=headers(user))).json()
        assert points["points"] == 110

    async def test_three_of_five(self, client: AsyncClient, user, headers):
        answers = [dict(a) for a in PERFECT]
        answers[3]["selected_answer"] = 0
        answers[4]["selected_answer"] = None
        response = await client.post(
            "/api/trivia/submit", json={"round_id": "r-35", "answers": answers}, headers=headers(user),
        )
        data = response.json()
        assert data["correct_answers"] == 3
        assert data["points_awarded"] == 80

    async def test_resubmit_is_duplicate(self, client: AsyncClient, user, headers):
        body = {"round_id": "again", "answers": PERFECT}
        await client.post("/api/trivia/submit", json=body, headers=headers(user))
        response = await client.post("/api/trivia/submit", json=body, headers=headers(user))
        assert response.json()["duplicate"] is True
        points = (await client.get("/api/user/points", headers=headers(user))).json()
        assert points["points"] == 110

    async def test_unknown_question(self, client: AsyncClient, user, headers):
        response = await client.post(
            "/api/trivia/submit",
            json={"round_id": "x", "answers": [{"question_id": "zzz", "selected_answer": 0, "time_spent_ms": 1}]},
            headers=headers(user),
        )
        assert response.status_code == 404

    async def test_bad_game_mode(self, client: AsyncClient, user, headers):
        response = await client.post(
            "/api/trivia/submit",
            json={"round_id": "x", "game_mode": "blitz", "answers": PERFECT},
            headers=headers(user),
        )
        assert response.status_code == 400

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/trivia/submit", json={"round_id": "x", "answers": PERFECT})
        assert response.status_code in (401, 403)


class TestShare:
    """POST /api/trivia/share"""

    async def test_share(self, client: AsyncClient, user, headers):
        body = {"platform": "facebook", "round_id": "round-abc"}
        first = await client.post("/api/trivia/share", json=body, headers=headers(user))
        assert first.status_code == 200
        assert first.json() == {"success": True, "points_awarded": 15, "duplicate": False}
        second = await client.post("/api/trivia/share", json=body, headers=headers(user))
        assert second.json()["duplicate"] is True
