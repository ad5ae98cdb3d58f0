"""Pydantic schemas for trivia endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class TriviaQuestionResponse(BaseModel):
    id: str
    question: str
    options: list[str]
    correct_answer: int
    explanation: str
    difficulty: str
    category: str
    image_url: str | None = None
    image_alt: str | None = None


class TriviaQuestionsResponse(BaseModel):
    questions: list[TriviaQuestionResponse]
    source: str
    message: str | None = None


class TriviaAnswerRequest(BaseModel):
    question_id: str = Field(..., min_length=1, max_length=64)
    selected_answer: int | None = Field(None, ge=0)
    time_spent_ms: int = Field(0, ge=0)


class TriviaSubmitRequest(BaseModel):
    round_id: str = Field(..., min_length=1, max_length=64)
    game_mode: str = "normal"
    answers: list[TriviaAnswerRequest] = Field(..., min_length=1, max_length=20)


class TriviaSubmitResponse(BaseModel):
    attempt_id: int
    score: int
    correct_answers: int
    total_questions: int
    max_streak: int
    points_awarded: int
    category_results: dict[str, dict[str, int]]
    badges_awarded: list[str] = []
    duplicate: bool = False
    completed_at: datetime | None = None


class TriviaShareRequest(BaseModel):
    platform: str = Field(..., min_length=1, max_length=32)
    question_id: str | None = None
    round_id: str | None = Field(None, max_length=64)


class TriviaShareResponse(BaseModel):
    success: bool = True
    points_awarded: int
    duplicate: bool = False
