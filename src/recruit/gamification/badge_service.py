"""Badge award service with duplicate prevention and pub/sub notification."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.db.models import BadgeDefinition, User, UserBadge
from recruit.points.service import award_points

logger = logging.getLogger(__name__)


async def get_badge_by_slug(db: AsyncSession, slug: str) -> BadgeDefinition | None:
    """Fetch a badge definition by slug."""
    result = await db.execute(
        select(BadgeDefinition).where(BadgeDefinition.slug == slug)
    )
    return result.scalar_one_or_none()


async def has_badge(db: AsyncSession, user_id: int, badge_type: str) -> bool:
    """Check if user already has a specific badge."""
    result = await db.execute(
        select(UserBadge.id).where(
            UserBadge.user_id == user_id,
            UserBadge.badge_type == badge_type,
        )
    )
    return result.scalar_one_or_none() is not None


async def award_badge(
    db: AsyncSession,
    redis: object,
    user_id: int,
    badge_type: str,
    progress: int | None = None,
    requirements: dict[str, Any] | None = None,
    points: int | None = None,
) -> bool:
    """Award a badge to a user.

    Returns True if awarded, False if already earned or the badge is unknown.
    The UNIQUE(user_id, badge_type) constraint backs the `has_badge` check, so
    concurrent awards produce one row. The insert runs in a savepoint, so a
    lost race leaves the rest of the caller's transaction intact. Badge points go through the ledger with a
    per-(badge, user) idempotency key. The caller commits.
    """
    badge = await get_badge_by_slug(db, badge_type)
    if badge is None or not badge.is_active:
        logger.warning("Badge not found: %s", badge_type)
        return False

    if await has_badge(db, user_id, badge_type):
        return False

    try:
        async with db.begin_nested():
            db.add(UserBadge(
                user_id=user_id,
                badge_type=badge_type,
                earned_at=datetime.now(timezone.utc),
                progress=progress,
                requirements=requirements,
            ))
    except IntegrityError:
        logger.info("Badge %s already held by user %d", badge_type, user_id)
        return False

    reward = badge.points if points is None else points
    if reward:
        await award_points(
            db,
            user_id,
            reward,
            "badge_earned",
            description=f'Earned badge: "{badge.name}"',
            idempotency_key=f"badge:{badge_type}:{user_id}",
        )

    await _publish_badge_earned(redis, user_id, badge, reward)
    logger.info("Badge %s awarded to user %d", badge_type, user_id)
    return True


async def _publish_badge_earned(redis: object, user_id: int, badge: BadgeDefinition, points: int) -> None:
    if redis is None:
        return
    try:
        await redis.publish(  # type: ignore[attr-defined]
            "pubsub:badge_earned",
            json.dumps({
                "user_id": user_id,
                "badge_type": badge.slug,
                "badge_name": badge.name,
                "points": points,
            }),
        )
    except Exception:
        logger.warning("Failed to publish badge_earned notification", exc_info=True)


async def claim_badge(
    db: AsyncSession,
    redis: object,
    user_id: int,
    badge_type: str,
    participation_points: int | None = None,
) -> tuple[UserBadge, BadgeDefinition, bool]:
    """Award a badge on request and return (user_badge, definition, already_earned).

    Raises:
        LookupError: If the user or the badge type does not exist.
    """
    if (await db.execute(select(User.id).where(User.id == user_id))).scalar_one_or_none() is None:
        msg = "User not found"
        raise LookupError(msg)
    badge = await get_badge_by_slug(db, badge_type)
    if badge is None or not badge.is_active:
        msg = f"Unknown badge type: {badge_type}"
        raise LookupError(msg)

    awarded = await award_badge(db, redis, user_id, badge_type, points=participation_points)
    if awarded:
        await db.commit()

    result = await db.execute(
        select(UserBadge).where(UserBadge.user_id == user_id, UserBadge.badge_type == badge_type)
    )
    return result.scalar_one(), badge, not awarded


async def list_badges(db: AsyncSession) -> list[BadgeDefinition]:
    """All active badge definitions in display order."""
    result = await db.execute(
        select(BadgeDefinition)
        .where(BadgeDefinition.is_active.is_(True))
        .order_by(BadgeDefinition.sort_order)
    )
    return list(result.scalars().all())


async def get_user_badges(db: AsyncSession, user_id: int) -> list[tuple[UserBadge, BadgeDefinition | None]]:
    """Badges earned by a user, newest first, joined to their definitions."""
    result = await db.execute(
        select(UserBadge, BadgeDefinition)
        .outerjoin(BadgeDefinition, BadgeDefinition.slug == UserBadge.badge_type)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc(), UserBadge.id.desc())
    )
    return [(row[0], row[1]) for row in result.all()]
