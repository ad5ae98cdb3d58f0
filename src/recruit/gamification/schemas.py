"""Pydantic schemas for badge and NFT endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class BadgeDefinitionResponse(BaseModel):
    slug: str
    name: str
    description: str
    category: str
    points: int

    model_config = {"from_attributes": True}


class AllBadgesResponse(BaseModel):
    badges: list[BadgeDefinitionResponse]


class EarnedBadgeResponse(BaseModel):
    badge_type: str
    name: str
    description: str
    category: str | None = None
    earned_at: datetime
    progress: int | None = None
    requirements: dict[str, Any] | None = None


class UserBadgesResponse(BaseModel):
    badges: list[EarnedBadgeResponse]
    total: int


class AwardBadgeRequest(BaseModel):
    """Award a badge. `user_id` and `participation_points` are honoured for admins only."""

    badge_type: str = Field(..., min_length=1, max_length=64)
    user_id: int | None = None
    participation_points: int | None = Field(None, ge=0, le=1000)


class AwardBadgeResponse(BaseModel):
    success: bool = True
    badge: EarnedBadgeResponse
    already_earned: bool


class NftResponse(BaseModel):
    tier: str
    points_at_award: int
    token_id: str
    awarded_at: datetime

    model_config = {"from_attributes": True}


class UserNftsResponse(BaseModel):
    nfts: list[NftResponse]
