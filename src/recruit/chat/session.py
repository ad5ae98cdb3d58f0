"""Chat session state machine and storage.

idle -> first_question_answered -> (free_chat | registration_required)

The first turn is always answered with the scripted opening question. Every
later turn needs an authenticated user; anonymous sessions are parked in
registration_required until they return with a token.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass

from recruit.config import get_settings

logger = logging.getLogger(__name__)

FIRST_QUESTION = "What does a Deputy Sheriff earn?"
SESSION_KEY_PREFIX = "chat:session:"


class ChatState(str, enum.Enum):
    IDLE = "idle"
    FIRST_QUESTION_ANSWERED = "first_question_answered"
    FREE_CHAT = "free_chat"
    REGISTRATION_REQUIRED = "registration_required"


@dataclass
class ChatSession:
    session_id: str
    state: ChatState = ChatState.IDLE
    turns: int = 0

    def to_json(self) -> str:
        return json.dumps({"state": self.state.value, "turns": self.turns})

    @classmethod
    def from_json(cls, session_id: str, raw: str) -> ChatSession:
        data = json.loads(raw)
        return cls(session_id=session_id, state=ChatState(data["state"]), turns=int(data.get("turns", 0)))


@dataclass(frozen=True)
class Turn:
    """What to do with one incoming message."""

    state: ChatState
    answer: bool
    scripted: bool = False


def advance(session: ChatSession, authenticated: bool) -> Turn:
    """Apply one user message to `session` and return the resulting turn."""
    session.turns += 1
    if session.state == ChatState.IDLE:
        session.state = ChatState.FIRST_QUESTION_ANSWERED
        return Turn(session.state, answer=True, scripted=True)
    if authenticated:
        session.state = ChatState.FREE_CHAT
        return Turn(session.state, answer=True)
    session.state = ChatState.REGISTRATION_REQUIRED
    return Turn(session.state, answer=False)


async def load_session(redis: object, session_id: str, client_state: str | None = None) -> ChatSession:
    """Server-side state from Redis; falls back to the state the client echoed back.

    Raises:
        ValueError: If the client-supplied state is not a known state.
    """
    if redis is not None:
        try:
            raw = await redis.get(SESSION_KEY_PREFIX + session_id)  # type: ignore[attr-defined]
        except Exception:
            logger.warning("Chat session read failed for %s", session_id, exc_info=True)
        else:
            if raw:
                return ChatSession.from_json(session_id, raw)
            return ChatSession(session_id=session_id)

    state = ChatState(client_state) if client_state else ChatState.IDLE
    return ChatSession(session_id=session_id, state=state)


async def save_session(redis: object, session: ChatSession) -> None:
    if redis is None:
        return
    try:
        await redis.set(  # type: ignore[attr-defined]
            SESSION_KEY_PREFIX + session.session_id,
            session.to_json(),
            ex=get_settings().chat_session_ttl_seconds,
        )
    except Exception:
        logger.warning("Chat session write failed for %s", session.session_id, exc_info=True)
