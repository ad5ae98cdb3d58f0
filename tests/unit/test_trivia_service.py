"""Unit tests for trivia question delivery, round replay and submission."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from recruit.db.models import TriviaAnswer, TriviaQuestion, User, UserBadge
from recruit.gamification import badge_service
from recruit.trivia import service
from recruit.trivia.questions import BACKUP_BY_ID, BACKUP_QUESTIONS
from recruit.trivia.service import (
    BACKUP_MESSAGE,
    SubmittedAnswer,
    backup_questions,
    get_questions,
    record_share,
    replay_round,
    resolve_questions,
    submit_round,
)

# sf-1..sf-5 correct indices: 0, 2, 0, 2, 3
ROUND_IDS = ["sf-1", "sf-2", "sf-3", "sf-4", "sf-5"]


def answers(selected: list[int | None], ms: int = 2000) -> list[SubmittedAnswer]:
    return [SubmittedAnswer(qid, sel, ms) for qid, sel in zip(ROUND_IDS, selected)]


async def _points(db_session, user_id: int) -> int:
    return (await db_session.execute(select(User.points).where(User.id == user_id))).scalar_one()


class TestQuestionBank:
    """Built-in backup questions."""

    def test_bank(self):
        assert len(BACKUP_QUESTIONS) == 10
        assert BACKUP_BY_ID["sf-1"].category == "landmarks"
        assert all(0 <= q.correct_answer < len(q.options) for q in BACKUP_QUESTIONS)

    def test_category_filter(self):
        picked = backup_questions(10, "sports")
        assert len(picked) == 5
        assert {q.category for q in picked} == {"sports"}

    def test_unknown_category_uses_whole_bank(self):
        assert len(backup_questions(3, "astronomy")) == 3


class TestGetQuestions:
    """Database questions with a one-shot fallback."""

    async def test_empty_table_falls_back(self, db_session):
        batch = await get_questions(db_session, count=5)
        assert batch.source == "backup"
        assert batch.message == BACKUP_MESSAGE
        assert len(batch.questions) == 5

    async def test_database_questions(self, db_session):
        db_session.add(TriviaQuestion(
            id="db-1", question="Which bridge?", options=["Golden Gate", "Bay"], correct_answer=0,
            category="landmarks",
        ))
        db_session.add(TriviaQuestion(
            id="db-2", question="Retired?", options=["A", "B"], correct_answer=1,
            category="landmarks", is_active=False,
        ))
        await db_session.commit()
        batch = await get_questions(db_session, count=5)
        assert batch.source == "database"
        assert [q.id for q in batch.questions] == ["db-1"]
        assert batch.message is None

    async def test_timeout_falls_back(self, db_session, monkeypatch):
        async def slow(*args, **kwargs):
            await asyncio.sleep(1)
            return []

        monkeypatch.setattr(service, "_load_active", slow)
        monkeypatch.setattr(service.get_settings(), "trivia_question_timeout_seconds", 0.01)
        batch = await get_questions(db_session, count=2)
        assert batch.source == "backup"
        assert len(batch.questions) == 2

    async def test_resolve_prefers_stored_questions(self, db_session):
        db_session.add(TriviaQuestion(
            id="sf-1", question="Overridden", options=["A", "B"], correct_answer=1, category="landmarks",
        ))
        await db_session.commit()
        questions = await resolve_questions(db_session, ["sf-2", "sf-1"])
        assert [q.id for q in questions] == ["sf-2", "sf-1"]
        assert questions[1].question == "Overridden"

    async def test_resolve_unknown(self, db_session):
        with pytest.raises(LookupError):
            await resolve_questions(db_session, ["nope"])


class TestReplay:
    """Server-side scoring from reported timings."""

    def test_three_correct(self):
        rnd = replay_round([BACKUP_BY_ID[q] for q in ROUND_IDS], answers([0, 2, 0, 0, 0]))
        assert rnd.correct_answers == 3
        assert rnd.completion_points == 80
        assert rnd.max_streak == 3

    def test_slow_answer_gets_no_time_bonus(self):
        rnd = replay_round([BACKUP_BY_ID["sf-1"]], [SubmittedAnswer("sf-1", 0, 45_000)])
        result = rnd.results[0]
        assert result.auto_submitted
        assert result.is_correct
        assert result.points == 10

    def test_challenge_mode_has_shorter_timer(self):
        rnd = replay_round([BACKUP_BY_ID["sf-1"]], [SubmittedAnswer("sf-1", 0, 20_000)], "challenge")
        assert rnd.question_seconds == 15
        assert rnd.results[0].auto_submitted

    def test_rejects_bad_mode_and_mismatch(self):
        questions = [BACKUP_BY_ID["sf-1"]]
        with pytest.raises(ValueError):
            replay_round(questions, [SubmittedAnswer("sf-1", 0, 1000)], "blitz")
        with pytest.raises(ValueError):
            replay_round(questions, [])

    def test_rejects_repeated_question(self):
        question = BACKUP_BY_ID["sf-1"]
        with pytest.raises(ValueError):
            replay_round([question, question], [SubmittedAnswer("sf-1", 0, 1000), SubmittedAnswer("sf-1", 0, 1000)])

    def test_rejects_out_of_range_answer(self):
        with pytest.raises(ValueError):
            replay_round([BACKUP_BY_ID["sf-1"]], [SubmittedAnswer("sf-1", 7, 1000)])


class TestSubmitRound:
    """Stored attempts, completion award and badges."""

    async def test_submit_awards_and_stores(self, db_session, user):
        result = await submit_round(db_session, None, user.id, "round-1", answers([0, 2, 0, 0, 0]))
        assert not result.duplicate
        assert result.points_awarded == 80
        assert result.attempt.correct_answers == 3
        assert result.attempt.total_questions == 5
        assert result.attempt.category_results["landmarks"] == {"correct": 2, "total": 2}
        assert result.badges_awarded == ["trivia-participant"]
        # 80 completion + 10 for the participant badge
        assert await _points(db_session, user.id) == 90

        stored = (await db_session.execute(
            select(func.count()).select_from(TriviaAnswer).where(TriviaAnswer.attempt_id == result.attempt.id)
        )).scalar()
        assert stored == 5

    async def test_resubmission_is_duplicate(self, db_session, user):
        await submit_round(db_session, None, user.id, "round-1", answers([0, 2, 0, 2, 3]))
        again = await submit_round(db_session, None, user.id, "round-1", answers([0, 0, 0, 0, 0]))
        assert again.duplicate
        assert again.points_awarded == 100
        assert again.attempt.correct_answers == 5

    async def test_round_id_owned_by_someone_else(self, db_session, user, make_recruit):
        other = await make_recruit(email="other@example.com")
        await submit_round(db_session, None, user.id, "shared", answers([0, 0, 0, 0, 0]))
        with pytest.raises(ValueError):
            await submit_round(db_session, None, other.id, "shared", answers([0, 0, 0, 0, 0]))

    async def test_perfect_challenge_round(self, db_session, user):
        result = await submit_round(
            db_session, None, user.id, "c-1", answers([0, 2, 0, 2, 3], ms=1000), game_mode="challenge",
        )
        assert set(result.badges_awarded) == {"trivia-participant", "challenge-champion"}

    async def test_unknown_question(self, db_session, user):
        with pytest.raises(LookupError):
            await submit_round(db_session, None, user.id, "r", [SubmittedAnswer("nope", 0, 1000)])

    async def test_badge_race_keeps_round(self, db_session, user, monkeypatch):
        async def never_held(db, user_id, badge_type):
            return False

        monkeypatch.setattr(badge_service, "has_badge", never_held)
        db_session.add(UserBadge(user_id=user.id, badge_type="trivia-participant", earned_at=datetime.now(timezone.utc)))
        await db_session.commit()

        result = await submit_round(db_session, None, user.id, "round-race", answers([0, 2, 0, 0, 0]))
        assert result.badges_awarded == []
        assert result.attempt.score > 0
        assert result.attempt.correct_answers == 3
        assert await _points(db_session, user.id) == 80

    async def test_repeated_question_rejected(self, db_session, user):
        repeated = [SubmittedAnswer("sf-1", 0, 1000) for _ in range(5)]
        with pytest.raises(ValueError):
            await submit_round(db_session, None, user.id, "r", repeated)


class TestShare:
    """Share rewards."""

    async def test_share_with_round_pays_once(self, db_session, user):
        assert await record_share(db_session, user.id, "facebook", round_id="r1") == (15, False)
        assert await record_share(db_session, user.id, "twitter", round_id="r1") == (15, True)
        assert await _points(db_session, user.id) == 15

    async def test_share_without_round(self, db_session, user):
        await record_share(db_session, user.id, "facebook", question_id="sf-1")
        await record_share(db_session, user.id, "facebook", question_id="sf-2")
        assert await _points(db_session, user.id) == 30
