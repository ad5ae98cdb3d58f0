"""Trivia API endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.auth.dependencies import get_current_user
from recruit.database import get_session
from recruit.db.models import User
from recruit.redis_client import get_redis_optional
from recruit.trivia.schemas import (
    TriviaQuestionResponse,
    TriviaQuestionsResponse,
    TriviaShareRequest,
    TriviaShareResponse,
    TriviaSubmitRequest,
    TriviaSubmitResponse,
)
from recruit.trivia.service import SubmittedAnswer, get_questions, record_share, submit_round

router = APIRouter(prefix="/api/trivia", tags=["Trivia"])


@router.get("/questions", response_model=TriviaQuestionsResponse)
async def questions(
    count: int = Query(5, ge=1, le=20),
    category: str | None = Query(None, max_length=64),
    db: AsyncSession = Depends(get_session),
) -> TriviaQuestionsResponse:
    """A batch of questions for one round. Falls back to built-in questions."""
    batch = await get_questions(db, count=count, category=category)
    return TriviaQuestionsResponse(
        questions=[TriviaQuestionResponse(**asdict(q)) for q in batch.questions],
        source=batch.source,
        message=batch.message,
    )


@router.post("/submit", response_model=TriviaSubmitResponse)
async def submit(
    body: TriviaSubmitRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_optional),
) -> TriviaSubmitResponse:
    answers = [SubmittedAnswer(a.question_id, a.selected_answer, a.time_spent_ms) for a in body.answers]
    try:
        result = await submit_round(db, redis, user.id, body.round_id, answers, body.game_mode)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    attempt = result.attempt
    return TriviaSubmitResponse(
        attempt_id=attempt.id,
        score=attempt.score,
        correct_answers=attempt.correct_answers,
        total_questions=attempt.total_questions,
        max_streak=attempt.max_streak,
        points_awarded=result.points_awarded,
        category_results=attempt.category_results,
        badges_awarded=result.badges_awarded,
        duplicate=result.duplicate,
        completed_at=attempt.completed_at,
    )


@router.post("/share", response_model=TriviaShareResponse)
async def share(
    body: TriviaShareRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> TriviaShareResponse:
    points, duplicate = await record_share(db, user.id, body.platform, body.question_id, body.round_id)
    return TriviaShareResponse(points_awarded=points, duplicate=duplicate)
