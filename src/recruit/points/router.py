"""Points API: balances, history, action catalogue and awards."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.auth.dependencies import get_current_user
from recruit.database import get_session
from recruit.db.models import User
from recruit.points.actions import POINT_ACTIONS, get_action, resolve_amount
from recruit.points.schemas import (
    AwardPointsRequest,
    AwardPointsResponse,
    PointActionResponse,
    PointActionsResponse,
    PointHistoryEntry,
    PointHistoryResponse,
    UserPointsResponse,
)
from recruit.points.service import award_points, get_history, get_user_points

router = APIRouter(prefix="/api", tags=["Points"])


@router.get("/points", response_model=PointActionsResponse)
async def list_point_actions() -> PointActionsResponse:
    """List the actions that earn points."""
    return PointActionsResponse(actions=[
        PointActionResponse(
            action=a.name,
            points=a.points,
            description=a.description,
            variable=a.is_variable,
            max_points=a.max_points,
        )
        for a in POINT_ACTIONS.values()
    ])


@router.post("/points/award", response_model=AwardPointsResponse)
async def award(
    body: AwardPointsRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> AwardPointsResponse:
    """Award points to the caller. Admins may award any action to any user."""
    is_admin = user.role == "admin"
    try:
        action = get_action(body.action)
    except LookupError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if not is_admin and (not action.client_awardable or body.user_id not in (None, user.id)):
        raise HTTPException(status_code=403, detail=f"Action '{action.name}' cannot be self-awarded")

    try:
        amount = resolve_amount(action, body.points)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    target_id = body.user_id if is_admin and body.user_id is not None else user.id
    idempotency_key = f"client:{target_id}:{body.idempotency_key}" if body.idempotency_key else None
    result = await award_points(
        db,
        target_id,
        amount,
        action.name,
        description=body.description or action.description,
        idempotency_key=idempotency_key,
    )
    if not result.success:
        raise HTTPException(status_code=404, detail=result.error or "User not found")
    await db.commit()

    return AwardPointsResponse(
        success=True,
        points=result.points,
        new_total=result.new_total,
        duplicate=result.duplicate,
    )


@router.get("/user/points", response_model=UserPointsResponse)
async def my_points(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserPointsResponse:
    """Current point balances for the authenticated user."""
    balances = await get_user_points(db, user.id)
    if balances is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserPointsResponse(user_id=user.id, **balances)


@router.get("/user/points/history", response_model=PointHistoryResponse)
async def my_point_history(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> PointHistoryResponse:
    """Paginated ledger for the authenticated user, newest first."""
    entries, total = await get_history(db, user.id, limit=limit, offset=offset)
    return PointHistoryResponse(
        entries=[PointHistoryEntry.model_validate(e) for e in entries],
        total=total,
        limit=limit,
        offset=offset,
    )
