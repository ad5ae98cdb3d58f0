"""Pydantic schemas for donation endpoints."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class DonationRuleResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    min_amount: Decimal
    max_amount: Decimal | None = None
    points_per_dollar: Decimal
    recurring_multiplier: Decimal
    is_active: bool
    campaign_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class DonationRulesResponse(BaseModel):
    rules: list[DonationRuleResponse]


class CreateDonationRuleRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: str | None = None
    min_amount: Decimal = Field(Decimal("0"), ge=0)
    max_amount: Decimal | None = Field(None, ge=0)
    points_per_dollar: Decimal = Field(..., ge=0)
    recurring_multiplier: Decimal = Field(Decimal("1"), ge=0)
    is_active: bool = True
    campaign_id: int | None = None

    @model_validator(mode="after")
    def check_range(self) -> CreateDonationRuleRequest:
        if self.max_amount is not None and self.max_amount < self.min_amount:
            msg = "max_amount must be greater than or equal to min_amount"
            raise ValueError(msg)
        return self


class UpdateDonationRuleRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=128)
    description: str | None = None
    min_amount: Decimal | None = Field(None, ge=0)
    max_amount: Decimal | None = Field(None, ge=0)
    points_per_dollar: Decimal | None = Field(None, ge=0)
    recurring_multiplier: Decimal | None = Field(None, ge=0)
    is_active: bool | None = None
    campaign_id: int | None = None


class CampaignResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    multiplier: Decimal
    is_active: bool

    model_config = {"from_attributes": True}


class CampaignsResponse(BaseModel):
    campaigns: list[CampaignResponse]


class CreateCampaignRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    multiplier: Decimal = Field(Decimal("1"), gt=0, le=10)
    is_active: bool = True


class RecordDonationRequest(BaseModel):
    user_id: int
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    is_recurring: bool = False
    status: str = Field("completed", pattern="^(pending|completed)$")


class UpdateDonationStatusRequest(BaseModel):
    status: str = Field(..., pattern="^(pending|completed|refunded)$")


class DonationStatusResponse(BaseModel):
    donation_id: int
    status: str
    points: int = 0
    duplicate: bool = False
    badges_awarded: list[str] = []
    nfts_awarded: list[str] = []


class DonationAwardResponse(BaseModel):
    donation_id: int
    success: bool
    points: int = 0
    duplicate: bool = False
    message: str | None = None
    badges_awarded: list[str] = []
    nfts_awarded: list[str] = []


class UserDonationPointsResponse(BaseModel):
    user_id: int
    points: int
    donation_count: int


class DonationLeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    display_name: str
    avatar_url: str | None = None
    donation_points: int


class DonationLeaderboardResponse(BaseModel):
    entries: list[DonationLeaderboardEntry]
    total: int
