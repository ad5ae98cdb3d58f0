"""Pydantic schemas for points endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PointActionResponse(BaseModel):
    action: str
    points: int | None
    description: str
    variable: bool
    max_points: int | None = None


class PointActionsResponse(BaseModel):
    actions: list[PointActionResponse]


class AwardPointsRequest(BaseModel):
    """Award points for an action. `points` is only read for variable actions."""

    action: str = Field(..., min_length=1, max_length=64)
    points: int | None = None
    description: str | None = Field(None, max_length=512)
    idempotency_key: str | None = Field(None, min_length=1, max_length=200)
    user_id: int | None = Field(None, description="Admin only: award to another user")


class AwardPointsResponse(BaseModel):
    success: bool
    points: int
    new_total: int | None = None
    duplicate: bool = False


class UserPointsResponse(BaseModel):
    user_id: int
    points: int
    donation_points: int
    total: int


class PointHistoryEntry(BaseModel):
    id: int
    points: int
    action: str
    balance: str
    description: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PointHistoryResponse(BaseModel):
    entries: list[PointHistoryEntry]
    total: int
    limit: int
    offset: int
