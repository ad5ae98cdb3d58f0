"""Pydantic schemas for the chat endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field

from recruit.chat.session import ChatState


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)
    session_id: str | None = Field(None, min_length=1, max_length=64)
    # Echoed back by clients when the server has no session store.
    state: ChatState | None = None


class ChatResponse(BaseModel):
    session_id: str
    state: ChatState
    message: str
    question: str
    topic: str | None = None
    quick_replies: list[str] = []
    registration_required: bool = False
    points_awarded: int = 0
