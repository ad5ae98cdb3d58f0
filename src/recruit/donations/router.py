"""Donation points API: public reads plus admin rule, campaign and donation management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.auth.dependencies import get_current_user, require_admin
from recruit.database import get_session
from recruit.db.models import User
from recruit.donations.schemas import (
    CampaignResponse,
    CampaignsResponse,
    CreateCampaignRequest,
    CreateDonationRuleRequest,
    DonationAwardResponse,
    DonationLeaderboardEntry,
    DonationLeaderboardResponse,
    DonationRuleResponse,
    DonationRulesResponse,
    DonationStatusResponse,
    RecordDonationRequest,
    UpdateDonationRuleRequest,
    UpdateDonationStatusRequest,
    UserDonationPointsResponse,
)
from recruit.donations.service import (
    create_campaign,
    create_rule,
    get_active_campaigns,
    get_donation_leaderboard,
    get_rules,
    get_user_donation_points,
    record_donation,
    update_donation_status,
    update_rule,
)
from recruit.redis_client import get_redis_optional

router = APIRouter(prefix="/api", tags=["Donations"])


# -- Public / user --


@router.get("/donations/campaigns", response_model=CampaignsResponse)
async def active_campaigns(db: AsyncSession = Depends(get_session)) -> CampaignsResponse:
    """Campaigns currently boosting donation points."""
    campaigns = await get_active_campaigns(db)
    return CampaignsResponse(campaigns=[CampaignResponse.model_validate(c) for c in campaigns])


@router.get("/donations/leaderboard", response_model=DonationLeaderboardResponse)
async def donation_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
) -> DonationLeaderboardResponse:
    entries, total = await get_donation_leaderboard(db, limit=limit, offset=offset)
    return DonationLeaderboardResponse(
        entries=[DonationLeaderboardEntry(**e) for e in entries],
        total=total,
    )


@router.get("/user/donation-points", response_model=UserDonationPointsResponse)
async def my_donation_points(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserDonationPointsResponse:
    data = await get_user_donation_points(db, user.id)
    if data is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserDonationPointsResponse(user_id=user.id, **data)


# -- Admin --


@router.get("/admin/donation-rules", response_model=DonationRulesResponse)
async def list_rules(
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> DonationRulesResponse:
    rules = await get_rules(db)
    return DonationRulesResponse(rules=[DonationRuleResponse.model_validate(r) for r in rules])


@router.post("/admin/donation-rules", response_model=DonationRuleResponse, status_code=201)
async def add_rule(
    body: CreateDonationRuleRequest,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> DonationRuleResponse:
    try:
        rule = await create_rule(db, **body.model_dump())
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return DonationRuleResponse.model_validate(rule)


@router.patch("/admin/donation-rules/{rule_id}", response_model=DonationRuleResponse)
async def edit_rule(
    rule_id: int,
    body: UpdateDonationRuleRequest,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> DonationRuleResponse:
    try:
        rule = await update_rule(db, rule_id, body.model_dump(exclude_unset=True))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        await db.rollback()
        raise HTTPException(status_code=400, detail=str(e)) from e
    return DonationRuleResponse.model_validate(rule)


@router.post("/admin/donation-campaigns", response_model=CampaignResponse, status_code=201)
async def add_campaign(
    body: CreateCampaignRequest,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> CampaignResponse:
    try:
        campaign = await create_campaign(db, **body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return CampaignResponse.model_validate(campaign)


@router.post("/admin/donations", response_model=DonationAwardResponse, status_code=201)
async def add_donation(
    body: RecordDonationRequest,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_optional),
) -> DonationAwardResponse:
    """Record a donation and credit its points."""
    try:
        donation, award = await record_donation(
            db, redis, body.user_id, body.amount, body.is_recurring, body.status,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    if award is None:
        return DonationAwardResponse(donation_id=donation.id, success=True, message="Donation not completed")
    return DonationAwardResponse(
        donation_id=donation.id,
        success=award.success,
        points=award.points,
        duplicate=award.duplicate,
        message=award.message,
        badges_awarded=award.badges_awarded,
        nfts_awarded=award.nfts_awarded,
    )


@router.patch("/admin/donations/{donation_id}", response_model=DonationStatusResponse)
async def change_donation_status(
    donation_id: int,
    body: UpdateDonationStatusRequest,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_optional),
) -> DonationStatusResponse:
    """Complete or refund a donation, crediting or reversing its points."""
    try:
        _, award = await update_donation_status(db, redis, donation_id, body.status)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if award is None:
        return DonationStatusResponse(donation_id=donation_id, status=body.status)
    return DonationStatusResponse(
        donation_id=donation_id,
        status=body.status,
        points=award.points,
        duplicate=award.duplicate,
        badges_awarded=award.badges_awarded,
        nfts_awarded=award.nfts_awarded,
    )
