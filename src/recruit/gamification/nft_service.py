"""Point-threshold collectible unlocks."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.db.models import NftAward

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NftTier:
    slug: str
    name: str
    point_threshold: int


NFT_TIERS: list[NftTier] = [
    NftTier("bronze-deputy", "Bronze Deputy", 1000),
    NftTier("silver-deputy", "Silver Deputy", 2500),
    NftTier("gold-deputy", "Gold Deputy", 5000),
    NftTier("platinum-sheriff", "Platinum Sheriff", 10000),
]


def eligible_tiers(current_points: int, owned: set[str] | frozenset[str] = frozenset()) -> list[NftTier]:
    """Tiers whose threshold is met and which the user does not own yet."""
    return [t for t in NFT_TIERS if t.point_threshold <= current_points and t.slug not in owned]


async def get_user_nfts(db: AsyncSession, user_id: int) -> list[NftAward]:
    result = await db.execute(
        select(NftAward).where(NftAward.user_id == user_id).order_by(NftAward.awarded_at, NftAward.id)
    )
    return list(result.scalars().all())


async def check_and_award_nfts(
    db: AsyncSession,
    redis: object,
    user_id: int,
    current_points: int,
) -> list[str]:
    """Unlock every eligible tier for the user. Returns the tier slugs awarded."""
    owned = {n.tier for n in await get_user_nfts(db, user_id)}
    awarded: list[str] = []
    now = datetime.now(timezone.utc)

    for tier in eligible_tiers(current_points, owned):
        db.add(NftAward(
            user_id=user_id,
            tier=tier.slug,
            points_at_award=current_points,
            token_id=f"{tier.slug}-{uuid.uuid4().hex[:16]}",
            awarded_at=now,
        ))
        awarded.append(tier.slug)

    if not awarded:
        return []

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("NFT unlock for user %d already recorded", user_id)
        return []

    if redis is not None:
        try:
            await redis.publish(  # type: ignore[attr-defined]
                "pubsub:nft_unlocked",
                json.dumps({"user_id": user_id, "tiers": awarded, "points": current_points}),
            )
        except Exception:
            logger.warning("Failed to publish nft_unlocked notification", exc_info=True)

    logger.info("Unlocked NFT tiers %s for user %d", awarded, user_id)
    return awarded
