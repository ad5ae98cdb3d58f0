"""Trivia question delivery, round submission and share rewards."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.config import get_settings
from recruit.db.models import TriviaAnswer, TriviaAttempt, TriviaQuestion
from recruit.gamification.badge_rules import BadgeRuleEvaluator
from recruit.points.service import award_points
from recruit.trivia.engine import Question, RoundState, TriviaRound
from recruit.trivia.questions import BACKUP_BY_ID, BACKUP_QUESTIONS

logger = logging.getLogger(__name__)

GAME_MODES = ("normal", "challenge", "study")
BACKUP_MESSAGE = "Using backup questions"
MAX_QUESTIONS = 20


@dataclass
class QuestionBatch:
    questions: list[Question]
    source: str
    message: str | None = None


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: str
    selected_answer: int | None
    time_spent_ms: int


@dataclass
class RoundResult:
    attempt: TriviaAttempt
    points_awarded: int
    duplicate: bool = False
    badges_awarded: list[str] = field(default_factory=list)


# -- Questions --


async def _load_active(db: AsyncSession, count: int, category: str | None) -> list[Question]:
    stmt = select(TriviaQuestion).where(TriviaQuestion.is_active.is_(True))
    if category:
        stmt = stmt.where(TriviaQuestion.category == category)
    result = await db.execute(stmt.order_by(func.random()).limit(count))
    return [Question.from_row(row) for row in result.scalars().all()]


def backup_questions(count: int, category: str | None = None) -> list[Question]:
    """Random sample from the built-in bank, narrowed to `category` when it has any."""
    pool = [q for q in BACKUP_QUESTIONS if category is None or q.category == category] or BACKUP_QUESTIONS
    return random.sample(pool, min(count, len(pool)))


async def get_questions(db: AsyncSession, count: int = 5, category: str | None = None) -> QuestionBatch:
    """Active questions from the database, or the built-in bank on failure.

    The query is bounded by `trivia_question_timeout_seconds`; a timeout,
    database error or empty result all fall back once, without retry.
    """
    count = max(1, min(count, MAX_QUESTIONS))
    timeout = get_settings().trivia_question_timeout_seconds
    try:
        questions = await asyncio.wait_for(_load_active(db, count, category), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Trivia question query timed out after %.1fs", timeout)
        questions = []
    except SQLAlchemyError:
        logger.warning("Trivia question query failed", exc_info=True)
        await db.rollback()
        questions = []

    if questions:
        return QuestionBatch(questions=questions, source="database")
    return QuestionBatch(questions=backup_questions(count, category), source="backup", message=BACKUP_MESSAGE)


async def resolve_questions(db: AsyncSession, question_ids: list[str]) -> list[Question]:
    """Questions for `question_ids` in order, from the table first, then the built-in bank.

    Raises:
        LookupError: If any id is unknown to both.
    """
    result = await db.execute(select(TriviaQuestion).where(TriviaQuestion.id.in_(set(question_ids))))
    stored = {row.id: Question.from_row(row) for row in result.scalars().all()}

    questions: list[Question] = []
    for qid in question_ids:
        question = stored.get(qid) or BACKUP_BY_ID.get(qid)
        if question is None:
            msg = f"Unknown trivia question: {qid}"
            raise LookupError(msg)
        questions.append(question)
    return questions


# -- Rounds --


def replay_round(questions: list[Question], answers: list[SubmittedAnswer], game_mode: str = "normal") -> TriviaRound:
    """Re-run a finished round through the state machine using reported timings.

    Answers slower than the question timer are treated as auto-submitted with
    no time bonus.
    """
    if game_mode not in GAME_MODES:
        msg = f"Unknown game mode: {game_mode}"
        raise ValueError(msg)
    if len(questions) != len(answers):
        msg = "Every question needs exactly one answer"
        raise ValueError(msg)
    if len({a.question_id for a in answers}) != len(answers):
        msg = "A question may appear only once per round"
        raise ValueError(msg)

    settings = get_settings()
    seconds = (
        settings.trivia_challenge_question_seconds if game_mode == "challenge"
        else settings.trivia_question_seconds
    )
    rnd = TriviaRound(
        points_per_question=settings.trivia_points_per_question,
        points_per_game=settings.trivia_points_per_game,
        question_seconds=float(seconds),
        game_mode=game_mode,
    )
    rnd.load(questions)
    for answer in answers:
        rnd.select(answer.selected_answer)
        if rnd.tick(answer.time_spent_ms / 1000) is None:
            rnd.submit()
        if rnd.state == RoundState.SHARE_PROMPT:
            rnd.dismiss_share_prompt()
        rnd.next_question()
    return rnd


async def _find_attempt(db: AsyncSession, round_id: str) -> TriviaAttempt | None:
    result = await db.execute(select(TriviaAttempt).where(TriviaAttempt.round_id == round_id))
    return result.scalar_one_or_none()


def _duplicate(attempt: TriviaAttempt, user_id: int) -> RoundResult:
    if attempt.user_id != user_id:
        msg = "Round id already used"
        raise ValueError(msg)
    return RoundResult(attempt=attempt, points_awarded=attempt.points_awarded, duplicate=True)


async def submit_round(
    db: AsyncSession,
    redis: object,
    user_id: int,
    round_id: str,
    answers: list[SubmittedAnswer],
    game_mode: str = "normal",
) -> RoundResult:
    """Score a finished round, store it, and credit the completion award once.

    Resubmitting the same `round_id` returns the stored attempt with
    `duplicate=True` and awards nothing.

    Raises:
        LookupError: For an unknown question id.
        ValueError: For an invalid game mode, answer index or round id owned by another user.
    """
    existing = await _find_attempt(db, round_id)
    if existing is not None:
        return _duplicate(existing, user_id)

    questions = await resolve_questions(db, [a.question_id for a in answers])
    rnd = replay_round(questions, answers, game_mode)
    points = rnd.completion_points

    attempt = TriviaAttempt(
        user_id=user_id,
        round_id=round_id,
        game_mode=game_mode,
        score=rnd.score,
        correct_answers=rnd.correct_answers,
        total_questions=len(questions),
        max_streak=rnd.max_streak,
        fast_correct=rnd.fast_correct,
        points_awarded=points,
        category_results=rnd.category_results(),
        completed_at=datetime.now(timezone.utc),
    )
    try:
        async with db.begin_nested():
            db.add(attempt)
    except IntegrityError:
        existing = await _find_attempt(db, round_id)
        if existing is None:
            raise
        return _duplicate(existing, user_id)

    for result in rnd.results:
        db.add(TriviaAnswer(
            attempt_id=attempt.id,
            question_id=result.question_id,
            selected_answer=result.selected_answer,
            is_correct=result.is_correct,
            time_spent_ms=int(result.time_spent * 1000),
            points=result.points,
        ))

    await award_points(
        db,
        user_id,
        points,
        "trivia_game_completion",
        description=f"Completed {game_mode} trivia round: {rnd.correct_answers}/{len(questions)} correct",
        idempotency_key=f"trivia:{user_id}:{round_id}",
    )
    await db.commit()
    logger.info(
        "Trivia round %s for user %d: %d/%d correct, +%d points",
        round_id, user_id, rnd.correct_answers, len(questions), points,
    )

    badges: list[str] = []
    try:
        badges = await BadgeRuleEvaluator(db, redis).check_and_award(
            user_id,
            "trivia_round",
            {"correct": rnd.correct_answers, "total": len(questions), "game_mode": game_mode},
        )
    except Exception:
        logger.warning("Trivia badge evaluation failed for user %d", user_id, exc_info=True)
        await db.rollback()
        await db.refresh(attempt)

    return RoundResult(attempt=attempt, points_awarded=points, badges_awarded=badges)


async def record_share(
    db: AsyncSession,
    user_id: int,
    platform: str,
    question_id: str | None = None,
    round_id: str | None = None,
) -> tuple[int, bool]:
    """Credit the share reward. With a `round_id`, a round pays out at most once.

    Returns (points, duplicate).
    """
    points = get_settings().trivia_share_points
    target = f"question {question_id}" if question_id else "trivia results"
    result = await award_points(
        db,
        user_id,
        points,
        "trivia_share",
        description=f"Shared {target} on {platform}",
        idempotency_key=f"trivia-share:{user_id}:{round_id}" if round_id else None,
    )
    await db.commit()
    return result.points, result.duplicate
