"""Leaderboard API endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.auth.dependencies import get_current_user_optional
from recruit.database import get_session
from recruit.db.models import User
from recruit.leaderboard.schemas import LeaderboardEntryResponse, LeaderboardResponse
from recruit.leaderboard.service import build_query, fetch_leaderboard
from recruit.redis_client import get_redis_optional

router = APIRouter(prefix="/api", tags=["Leaderboard"])


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    timeframe: str = Query("all-time"),
    category: str = Query("points"),
    limit: int = Query(10, ge=1),
    offset: int = Query(0, ge=0),
    search: str | None = Query(None, max_length=64),
    user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_optional),
) -> LeaderboardResponse:
    """Ranked users by category and timeframe. Anonymous access is allowed."""
    try:
        query = build_query(timeframe, category, limit, offset, search)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    page = await fetch_leaderboard(db, redis, query, current_user_id=user.id if user else None)
    return LeaderboardResponse(
        timeframe=query.timeframe,
        category=query.category,
        entries=[LeaderboardEntryResponse(**e) for e in page["entries"]],
        total=page["total"],
        limit=query.limit,
        offset=query.offset,
        is_mock=page["is_mock"],
    )
