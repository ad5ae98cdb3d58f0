"""Background checklist API."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.auth.dependencies import get_current_user
from recruit.checklist.documents import DOCUMENTS, REQUIRED_DOCUMENT_IDS
from recruit.checklist.schemas import (
    ChecklistResponse,
    ChecklistUpdateResponse,
    DocumentResponse,
    ImportChecklistRequest,
    ToggleDocumentRequest,
)
from recruit.checklist.service import ChecklistUpdate, get_checked, import_progress, set_document
from recruit.config import get_settings
from recruit.database import get_session
from recruit.db.models import User
from recruit.redis_client import get_redis_optional

router = APIRouter(prefix="/api/background-checklist", tags=["Background Checklist"])


def _update_response(update: ChecklistUpdate) -> ChecklistUpdateResponse:
    return ChecklistUpdateResponse(
        checked=sorted(update.checked),
        points_awarded=update.points_awarded,
        badges_awarded=update.badges_awarded,
    )


@router.get("", response_model=ChecklistResponse)
async def get_checklist(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ChecklistResponse:
    """Document catalogue with the caller's progress.

    `unlocked` tells the site whether the detailed preparation guide should be
    shown; checking documents off works either way.
    """
    checked = await get_checked(db, user.id)
    unlock_points = get_settings().checklist_unlock_points
    return ChecklistResponse(
        documents=[DocumentResponse(**asdict(d), checked=d.id in checked) for d in DOCUMENTS],
        checked=sorted(checked),
        required_total=len(REQUIRED_DOCUMENT_IDS),
        required_completed=len(REQUIRED_DOCUMENT_IDS & checked),
        total=len(DOCUMENTS),
        completed=len(checked),
        unlocked=user.points >= unlock_points,
        points_needed=max(0, unlock_points - user.points),
    )


@router.put("/{document_id}", response_model=ChecklistUpdateResponse)
async def toggle_document(
    document_id: str,
    body: ToggleDocumentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_optional),
) -> ChecklistUpdateResponse:
    """Check or uncheck one document."""
    try:
        update = await set_document(db, redis, user.id, document_id, body.checked)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _update_response(update)


@router.post("/import", response_model=ChecklistUpdateResponse)
async def import_checklist(
    body: ImportChecklistRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_optional),
) -> ChecklistUpdateResponse:
    """Merge progress previously kept in browser storage."""
    update = await import_progress(db, redis, user.id, body.document_ids)
    return _update_response(update)
