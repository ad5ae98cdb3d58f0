"""Pydantic schemas for the leaderboard endpoint."""

from __future__ import annotations

from pydantic import BaseModel


class LeaderboardEntryResponse(BaseModel):
    rank: int
    user_id: int | None = None
    display_name: str
    avatar_url: str | None = None
    score: int
    points: int
    badge_count: int = 0
    nft_count: int = 0
    referral_count: int = 0
    has_applied: bool = False
    is_current_user: bool = False
    is_mock: bool = False


class LeaderboardResponse(BaseModel):
    timeframe: str
    category: str
    entries: list[LeaderboardEntryResponse]
    total: int
    limit: int
    offset: int
    is_mock: bool = False
