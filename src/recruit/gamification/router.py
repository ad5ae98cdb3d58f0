"""Badge and NFT API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.auth.dependencies import get_current_user
from recruit.database import get_session
from recruit.db.models import BadgeDefinition, User, UserBadge
from recruit.gamification.badge_service import claim_badge, get_badge_by_slug, get_user_badges, list_badges
from recruit.gamification.nft_service import get_user_nfts
from recruit.gamification.schemas import (
    AllBadgesResponse,
    AwardBadgeRequest,
    AwardBadgeResponse,
    BadgeDefinitionResponse,
    EarnedBadgeResponse,
    NftResponse,
    UserBadgesResponse,
    UserNftsResponse,
)
from recruit.gamification.seed import SELF_AWARDABLE_CATEGORIES
from recruit.redis_client import get_redis_optional

router = APIRouter(prefix="/api", tags=["Badges"])


def _earned(user_badge: UserBadge, badge: BadgeDefinition | None) -> EarnedBadgeResponse:
    return EarnedBadgeResponse(
        badge_type=user_badge.badge_type,
        name=badge.name if badge else user_badge.badge_type,
        description=badge.description if badge else f"Earned the {user_badge.badge_type} badge",
        category=badge.category if badge else None,
        earned_at=user_badge.earned_at,
        progress=user_badge.progress,
        requirements=user_badge.requirements,
    )


@router.get("/badges", response_model=AllBadgesResponse)
async def all_badges(db: AsyncSession = Depends(get_session)) -> AllBadgesResponse:
    """Every active badge definition."""
    badges = await list_badges(db)
    return AllBadgesResponse(badges=[BadgeDefinitionResponse.model_validate(b) for b in badges])


@router.get("/user/badges", response_model=UserBadgesResponse)
async def my_badges(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserBadgesResponse:
    """Badges earned by the authenticated user."""
    rows = await get_user_badges(db, user.id)
    return UserBadgesResponse(badges=[_earned(ub, b) for ub, b in rows], total=len(rows))


@router.post("/award-badge", response_model=AwardBadgeResponse)
async def award_badge_endpoint(
    body: AwardBadgeRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_optional),
) -> AwardBadgeResponse:
    """Award a badge, reporting whether it had already been earned.

    Regular users may only claim preparation and engagement badges for
    themselves; rule-driven badges are awarded by the rule evaluator.
    """
    is_admin = user.role == "admin"
    target_id = body.user_id if body.user_id is not None else user.id

    if not is_admin:
        if target_id != user.id:
            raise HTTPException(status_code=403, detail="Cannot award badges to other users")
        badge = await get_badge_by_slug(db, body.badge_type)
        if badge is not None and badge.category not in SELF_AWARDABLE_CATEGORIES:
            raise HTTPException(status_code=403, detail=f"Badge '{body.badge_type}' cannot be self-awarded")

    try:
        user_badge, definition, already_earned = await claim_badge(
            db,
            redis,
            target_id,
            body.badge_type,
            participation_points=body.participation_points if is_admin else None,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return AwardBadgeResponse(badge=_earned(user_badge, definition), already_earned=already_earned)


@router.get("/user/nfts", response_model=UserNftsResponse)
async def my_nfts(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserNftsResponse:
    """Collectible tiers unlocked by the authenticated user."""
    nfts = await get_user_nfts(db, user.id)
    return UserNftsResponse(nfts=[NftResponse.model_validate(n) for n in nfts])
