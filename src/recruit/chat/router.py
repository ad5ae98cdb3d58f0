"""Recruiting chat endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Response
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.auth.dependencies import get_current_user_optional
from recruit.chat.schemas import ChatRequest, ChatResponse
from recruit.chat.service import handle_message
from recruit.database import get_session
from recruit.db.models import User
from recruit.redis_client import get_redis_optional

router = APIRouter(prefix="/api", tags=["Chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    response: Response,
    x_chat_session: str | None = Header(None, max_length=64),
    user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_optional),
) -> ChatResponse:
    """Answer a chat message. Anonymous visitors get one answer before registration is required."""
    reply = await handle_message(
        db,
        redis,
        body.message,
        user=user,
        session_id=body.session_id or x_chat_session,
        client_state=body.state.value if body.state else None,
    )
    response.headers["X-Chat-Session"] = reply.session_id
    return ChatResponse(
        session_id=reply.session_id,
        state=reply.state,
        message=reply.message,
        question=reply.question,
        topic=reply.topic,
        quick_replies=reply.quick_replies,
        registration_required=reply.registration_required,
        points_awarded=reply.points_awarded,
    )
