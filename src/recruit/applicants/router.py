"""Applicant intake and admin review endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.applicants.schemas import (
    ApplicantListResponse,
    ApplicantRequest,
    ApplicantResponse,
    ApplicantStatusUpdate,
    ApplicantSubmitResponse,
)
from recruit.applicants.service import list_applicants, status_counts, submit_application, update_status
from recruit.auth.dependencies import get_current_user_optional, require_admin
from recruit.database import get_session
from recruit.db.models import User
from recruit.redis_client import get_redis_optional

router = APIRouter(prefix="/api", tags=["Applicants"])


@router.post("/applicants", response_model=ApplicantSubmitResponse, status_code=201)
async def submit(
    body: ApplicantRequest,
    user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_optional),
) -> ApplicantSubmitResponse:
    """Public application form. Signed-in submitters are linked and rewarded."""
    result = await submit_application(db, redis, **body.model_dump(), user_id=user.id if user else None)
    return ApplicantSubmitResponse(
        id=result.applicant.id,
        tracking_number=result.applicant.tracking_number,
        application_status=result.applicant.application_status,
        points_awarded=result.points_awarded,
    )


@router.get("/admin/applicants", response_model=ApplicantListResponse)
async def applicants(
    status: str | None = Query(None),
    search: str | None = Query(None, max_length=128),
    limit: int = Query(25, ge=1, le=100),
    offset: int = Query(0, ge=0),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> ApplicantListResponse:
    rows, total = await list_applicants(db, status=status, search=search, limit=limit, offset=offset)
    return ApplicantListResponse(
        applicants=[ApplicantResponse.model_validate(a) for a in rows],
        total=total,
        limit=limit,
        offset=offset,
        status_counts=await status_counts(db),
    )


@router.patch("/admin/applicants/{applicant_id}", response_model=ApplicantResponse)
async def set_status(
    applicant_id: int,
    body: ApplicantStatusUpdate,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> ApplicantResponse:
    try:
        applicant = await update_status(db, applicant_id, body.application_status)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return ApplicantResponse.model_validate(applicant)
