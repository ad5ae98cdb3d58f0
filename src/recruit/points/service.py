"""Points ledger: append-only award log plus denormalized user totals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.db.models import PointAward, User

logger = logging.getLogger(__name__)

BALANCES = ("points", "donation_points")


@dataclass
class AwardResult:
    success: bool
    new_total: int | None = None
    points: int = 0
    duplicate: bool = False
    error: str | None = None


async def _current_total(db: AsyncSession, user_id: int, balance: str) -> int | None:
    column = getattr(User, balance)
    result = await db.execute(select(column).where(User.id == user_id))
    return result.scalar_one_or_none()


async def award_points(
    db: AsyncSession,
    user_id: int,
    points: int,
    action: str,
    description: str | None = None,
    idempotency_key: str | None = None,
    balance: str = "points",
) -> AwardResult:
    """Append a ledger row and add `points` to the user's running total.

    Both writes share the caller's transaction. The ledger row is inserted in
    a savepoint, so a lost idempotency race rolls back only that row. The total
    is incremented with a single `UPDATE ... SET points = points + :delta` so
    concurrent awards cannot lose an increment. Negative amounts are accepted
    and reduce the total.

    With an `idempotency_key`, the award happens at most once; a repeat returns
    `duplicate=True` and leaves the total unchanged. The caller commits.
    """
    if balance not in BALANCES:
        msg = f"Unknown balance: {balance}"
        raise ValueError(msg)

    if idempotency_key is not None:
        existing = await db.execute(
            select(PointAward.points).where(PointAward.idempotency_key == idempotency_key)
        )
        previous = existing.scalar_one_or_none()
        if previous is not None:
            return AwardResult(
                success=True,
                new_total=await _current_total(db, user_id, balance),
                points=previous,
                duplicate=True,
            )

    if await _current_total(db, user_id, balance) is None:
        return AwardResult(success=False, error="User not found")

    try:
        async with db.begin_nested():
            db.add(PointAward(
                user_id=user_id,
                points=points,
                action=action,
                balance=balance,
                description=description,
                idempotency_key=idempotency_key,
                created_at=datetime.now(timezone.utc),
            ))
    except IntegrityError:
        # Concurrent award with the same key won the race.
        return AwardResult(success=True, new_total=await _current_total(db, user_id, balance), duplicate=True)

    column = getattr(User, balance)
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values({column: column + points, User.updated_at: datetime.now(timezone.utc)})
    )
    new_total = await _current_total(db, user_id, balance)

    logger.info("Awarded %d %s to user %d for %s", points, balance, user_id, action)
    return AwardResult(success=True, new_total=new_total, points=points)


async def get_user_points(db: AsyncSession, user_id: int) -> dict[str, int] | None:
    """Return the user's point balances, or None for an unknown user."""
    result = await db.execute(
        select(User.points, User.donation_points).where(User.id == user_id)
    )
    row = result.one_or_none()
    if row is None:
        return None
    return {
        "points": row.points,
        "donation_points": row.donation_points,
        "total": row.points + row.donation_points,
    }


async def get_history(
    db: AsyncSession,
    user_id: int,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[PointAward], int]:
    """Newest-first ledger page and the total entry count."""
    total = (await db.execute(
        select(func.count()).select_from(PointAward).where(PointAward.user_id == user_id)
    )).scalar() or 0

    result = await db.execute(
        select(PointAward)
        .where(PointAward.user_id == user_id)
        .order_by(PointAward.created_at.desc(), PointAward.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total

