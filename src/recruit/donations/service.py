"""Donation point accrual, rules and campaigns."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.db.models import Donation, DonationCampaign, DonationPointAward, DonationPointRule, User
from recruit.donations.calculator import points_for_donation, to_decimal
from recruit.gamification.badge_rules import BadgeRuleEvaluator
from recruit.gamification.nft_service import check_and_award_nfts
from recruit.points.service import award_points, get_user_points

logger = logging.getLogger(__name__)

RULE_FIELDS = (
    "name", "description", "min_amount", "max_amount", "points_per_dollar",
    "recurring_multiplier", "is_active", "campaign_id",
)


@dataclass
class DonationAwardResult:
    success: bool
    points: int = 0
    message: str | None = None
    duplicate: bool = False
    badges_awarded: list[str] = field(default_factory=list)
    nfts_awarded: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


async def get_rules(db: AsyncSession, active_only: bool = False) -> list[DonationPointRule]:
    """Rules ordered by ascending min_amount."""
    stmt = select(DonationPointRule).order_by(DonationPointRule.min_amount.asc(), DonationPointRule.id.asc())
    if active_only:
        stmt = stmt.where(DonationPointRule.is_active.is_(True))
    result = await db.execute(stmt)
    return list(result.unique().scalars().all())


def _validate_range(min_amount: Decimal, max_amount: Decimal | None) -> None:
    if min_amount < 0:
        msg = "min_amount must not be negative"
        raise ValueError(msg)
    if max_amount is not None and max_amount < min_amount:
        msg = "max_amount must be greater than or equal to min_amount"
        raise ValueError(msg)


async def _check_campaign(db: AsyncSession, campaign_id: int | None) -> None:
    if campaign_id is not None and await db.get(DonationCampaign, campaign_id) is None:
        msg = f"Campaign {campaign_id} not found"
        raise LookupError(msg)


async def create_rule(db: AsyncSession, **values: Any) -> DonationPointRule:
    """Create a rule. Raises ValueError on an inverted range, LookupError on a bad campaign."""
    data = {k: v for k, v in values.items() if k in RULE_FIELDS and v is not None}
    _validate_range(to_decimal(data.get("min_amount", 0)), data.get("max_amount"))
    await _check_campaign(db, data.get("campaign_id"))
    now = datetime.now(timezone.utc)
    rule = DonationPointRule(**data, created_at=now, updated_at=now)
    db.add(rule)
    await db.commit()
    await db.refresh(rule)
    return rule


async def update_rule(db: AsyncSession, rule_id: int, changes: dict[str, Any]) -> DonationPointRule:
    """Apply a partial update. Only keys present in `changes` are written."""
    rule = await db.get(DonationPointRule, rule_id)
    if rule is None:
        msg = f"Rule {rule_id} not found"
        raise LookupError(msg)

    for key, value in changes.items():
        if key in RULE_FIELDS:
            setattr(rule, key, value)
    _validate_range(to_decimal(rule.min_amount), rule.max_amount)
    if "campaign_id" in changes:
        await _check_campaign(db, rule.campaign_id)
    rule.updated_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(rule)
    return rule


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------


async def get_active_campaigns(db: AsyncSession, now: datetime | None = None) -> list[DonationCampaign]:
    """Campaigns that are flagged active, have started, and have not ended. Newest start first."""
    now = now or datetime.now(timezone.utc)
    result = await db.execute(
        select(DonationCampaign)
        .where(
            DonationCampaign.is_active.is_(True),
            DonationCampaign.start_date <= now,
            or_(DonationCampaign.end_date.is_(None), DonationCampaign.end_date >= now),
        )
        .order_by(DonationCampaign.start_date.desc())
    )
    return list(result.scalars().all())


async def create_campaign(
    db: AsyncSession,
    name: str,
    start_date: datetime,
    multiplier: Decimal,
    end_date: datetime | None = None,
    description: str | None = None,
    is_active: bool = True,
) -> DonationCampaign:
    if end_date is not None and end_date < start_date:
        msg = "end_date must not be before start_date"
        raise ValueError(msg)
    campaign = DonationCampaign(
        name=name,
        description=description,
        start_date=start_date,
        end_date=end_date,
        multiplier=multiplier,
        is_active=is_active,
        created_at=datetime.now(timezone.utc),
    )
    db.add(campaign)
    await db.commit()
    await db.refresh(campaign)
    return campaign


# ---------------------------------------------------------------------------
# Accrual
# ---------------------------------------------------------------------------


async def award_donation_points(
    db: AsyncSession,
    redis: object,
    user_id: int,
    donation_id: int,
    amount: Decimal | float | int | str,
    is_recurring: bool = False,
) -> DonationAwardResult:
    """Credit points for a donation, then evaluate donation badges and NFT unlocks.

    The point credit is committed first. Badge and NFT failures are logged and
    reported nowhere else; they never undo the credit. A donation is credited
    at most once.
    """
    existing = (await db.execute(
        select(DonationPointAward).where(DonationPointAward.donation_id == donation_id)
    )).scalar_one_or_none()
    if existing is not None:
        return DonationAwardResult(success=True, points=existing.points, duplicate=True)

    try:
        donation = await db.get(Donation, donation_id)
        if donation is None or donation.user_id != user_id:
            return DonationAwardResult(success=False, message="Donation not found")

        rules = await get_rules(db, active_only=True)
        points, rule, campaign = points_for_donation(rules, amount, is_recurring)

        db.add(DonationPointAward(
            donation_id=donation_id,
            user_id=user_id,
            rule_id=rule.id if rule is not None else None,
            campaign_id=campaign.id if campaign is not None else None,
            points=points,
            created_at=datetime.now(timezone.utc),
        ))
        await award_points(
            db,
            user_id,
            points,
            "donation",
            description=f"Donation of ${to_decimal(amount):.2f}" + (" (recurring)" if is_recurring else ""),
            idempotency_key=f"donation:{donation_id}",
            balance="donation_points",
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error awarding donation points for donation %s", donation_id, exc_info=True)
        return DonationAwardResult(success=False, message=str(e))

    result = DonationAwardResult(success=True, points=points)

    try:
        result.badges_awarded = await BadgeRuleEvaluator(db, redis).check_and_award(
            user_id, "donation", {"amount": to_decimal(amount), "is_recurring": is_recurring},
        )
    except Exception:
        await db.rollback()
        logger.warning("Donation badge evaluation failed for user %d", user_id, exc_info=True)

    try:
        balances = await get_user_points(db, user_id)
        if balances is not None:
            result.nfts_awarded = await check_and_award_nfts(db, redis, user_id, balances["total"])
    except Exception:
        await db.rollback()
        logger.warning("NFT unlock check failed for user %d", user_id, exc_info=True)

    logger.info("Donation %s credited %d points to user %d", donation_id, points, user_id)
    return result


async def record_donation(
    db: AsyncSession,
    redis: object,
    user_id: int,
    amount: Decimal,
    is_recurring: bool = False,
    status: str = "completed",
) -> tuple[Donation, DonationAwardResult | None]:
    """Store a donation and, once completed, credit its points.

    Raises:
        LookupError: If the user does not exist.
    """
    if await db.get(User, user_id) is None:
        msg = "User not found"
        raise LookupError(msg)

    donation = Donation(
        user_id=user_id,
        amount=amount,
        is_recurring=is_recurring,
        status=status,
        created_at=datetime.now(timezone.utc),
    )
    db.add(donation)
    await db.commit()
    await db.refresh(donation)

    if status != "completed":
        return donation, None
    award = await award_donation_points(db, redis, user_id, donation.id, amount, is_recurring)
    # A fail-soft rollback above expires the row.
    await db.refresh(donation)
    return donation, award


DONATION_TRANSITIONS = {
    "pending": {"completed", "refunded"},
    "completed": {"refunded"},
    "refunded": set(),
}


async def update_donation_status(
    db: AsyncSession,
    redis: object,
    donation_id: int,
    status: str,
) -> tuple[Donation, DonationAwardResult | None]:
    """Move a donation to `status`.

    Completing a pending donation credits its points. Refunding a credited
    donation takes the credited points back out of the donation balance;
    badges already earned are kept. Setting the current status again is a
    no-op.

    Raises:
        LookupError: If the donation does not exist.
        ValueError: For an unknown status or a transition that is not allowed.
    """
    if status not in DONATION_TRANSITIONS:
        msg = f"Unknown donation status: {status}"
        raise ValueError(msg)

    donation = await db.get(Donation, donation_id)
    if donation is None:
        msg = "Donation not found"
        raise LookupError(msg)
    if donation.status == status:
        return donation, None
    if status not in DONATION_TRANSITIONS[donation.status]:
        msg = f"Cannot move a {donation.status} donation to {status}"
        raise ValueError(msg)

    previous = donation.status
    donation.status = status
    await db.commit()
    logger.info("Donation %s moved from %s to %s", donation_id, previous, status)

    if status == "completed":
        award = await award_donation_points(
            db, redis, donation.user_id, donation.id, donation.amount, donation.is_recurring,
        )
        return donation, award

    credited = (await db.execute(
        select(DonationPointAward.points).where(DonationPointAward.donation_id == donation_id)
    )).scalar_one_or_none()
    if not credited:
        return donation, None

    result = await award_points(
        db,
        donation.user_id,
        -credited,
        "donation",
        description=f"Refund of donation #{donation_id}",
        idempotency_key=f"donation-refund:{donation_id}",
        balance="donation_points",
    )
    await db.commit()
    return donation, DonationAwardResult(success=result.success, points=result.points, duplicate=result.duplicate)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def get_user_donation_points(db: AsyncSession, user_id: int) -> dict[str, int] | None:
    points = (await db.execute(select(User.donation_points).where(User.id == user_id))).scalar_one_or_none()
    if points is None:
        return None
    count = (await db.execute(
        select(func.count(DonationPointAward.id)).where(DonationPointAward.user_id == user_id)
    )).scalar() or 0
    return {"points": points, "donation_count": int(count)}


async def get_donation_leaderboard(
    db: AsyncSession,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int]:
    """Users ranked by donation points, highest first."""
    base = select(User).where(User.donation_points > 0, User.is_banned.is_(False))
    total = (await db.execute(select(func.count()).select_from(base.subquery()))).scalar() or 0

    result = await db.execute(
        base.order_by(User.donation_points.desc(), User.id.asc()).offset(offset).limit(limit)
    )
    entries = [
        {
            "rank": offset + i + 1,
            "user_id": u.id,
            "display_name": u.display_name or f"Supporter #{u.id}",
            "avatar_url": u.avatar_url,
            "donation_points": u.donation_points,
        }
        for i, u in enumerate(result.scalars().all())
    ]
    return entries, total
