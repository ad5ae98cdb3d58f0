"""Pydantic schemas for applicant endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class ApplicantRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=64)
    last_name: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    phone: str | None = Field(None, max_length=32)
    zip_code: str | None = Field(None, max_length=10)
    referral_source: str | None = Field(None, max_length=64)
    referral_code: str | None = Field(None, max_length=64)


class ApplicantSubmitResponse(BaseModel):
    id: int
    tracking_number: str
    application_status: str
    points_awarded: int = 0


class ApplicantResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    zip_code: str | None = None
    referral_source: str | None = None
    referral_code: str | None = None
    tracking_number: str
    application_status: str
    user_id: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ApplicantListResponse(BaseModel):
    applicants: list[ApplicantResponse]
    total: int
    limit: int
    offset: int
    status_counts: dict[str, int]


class ApplicantStatusUpdate(BaseModel):
    application_status: str
