"""Chat turn handling: state machine, knowledge-base answer, logging and points."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.chat.knowledge_base import generate_response, quick_replies
from recruit.chat.session import FIRST_QUESTION, ChatState, advance, load_session, save_session
from recruit.config import get_settings
from recruit.db.models import ChatInteraction, User
from recruit.points.service import award_points

logger = logging.getLogger(__name__)

GREETING = "Hey there! "
REGISTRATION_PROMPT = (
    "Thanks for chatting with me! To keep the conversation going, please create a free account "
    "or log in. You'll also earn points for every question you ask."
)


@dataclass
class ChatReply:
    session_id: str
    state: ChatState
    message: str
    question: str
    topic: str | None = None
    quick_replies: list[str] = field(default_factory=list)
    registration_required: bool = False
    points_awarded: int = 0


def new_session_id() -> str:
    return uuid.uuid4().hex


async def _record(
    db: AsyncSession,
    session_id: str,
    user: User | None,
    message: str,
    response: str,
    award: bool,
) -> int:
    """Log the interaction and credit participation points. Failures are non-fatal."""
    points = 0
    try:
        db.add(ChatInteraction(
            session_id=session_id,
            user_id=user.id if user else None,
            message=message,
            response=response,
            created_at=datetime.now(timezone.utc),
        ))
        if award and user is not None:
            result = await award_points(
                db, user.id, get_settings().chat_points, "chat_participation",
                description="Asked a recruiting question in chat",
            )
            points = result.points if result.success else 0
        await db.commit()
    except SQLAlchemyError:
        logger.warning("Failed to record chat interaction for session %s", session_id, exc_info=True)
        await db.rollback()
        return 0
    return points


async def handle_message(
    db: AsyncSession,
    redis: object,
    message: str,
    user: User | None = None,
    session_id: str | None = None,
    client_state: str | None = None,
) -> ChatReply:
    """Process one chat message and produce the assistant's reply."""
    session = await load_session(redis, session_id or new_session_id(), client_state)
    turn = advance(session, authenticated=user is not None)

    if turn.answer:
        question = FIRST_QUESTION if turn.scripted else message
        topic, text = generate_response(question)
        reply = ChatReply(
            session_id=session.session_id,
            state=turn.state,
            message=GREETING + text,
            question=question,
            topic=topic,
            quick_replies=quick_replies(question),
        )
    else:
        reply = ChatReply(
            session_id=session.session_id,
            state=turn.state,
            message=REGISTRATION_PROMPT,
            question=message,
            registration_required=True,
        )

    reply.points_awarded = await _record(db, session.session_id, user, message, reply.message, turn.answer)
    await save_session(redis, session)
    return reply
