"""Leaderboard aggregation with a cached, time-boxed query and mock fallback.

Rankings are computed at query time from the users table and the ledger.
When the query fails, times out, or returns nothing, a fixed set of
low-scoring example entries is returned instead. Example entries are flagged
`is_mock` and never counted in `total`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from recruit.config import get_settings
from recruit.db.models import NftAward, PointAward, User, UserBadge

logger = logging.getLogger(__name__)

TIMEFRAMES: dict[str, timedelta | None] = {
    "daily": timedelta(days=1),
    "weekly": timedelta(days=7),
    "monthly": timedelta(days=30),
    "all-time": None,
}
CATEGORIES = ("points", "badges", "nfts", "referrals", "application")
CATEGORY_ALIASES = {"participation": "points"}

MOCK_ENTRIES: list[dict[str, Any]] = [
    {"display_name": "John Smith", "score": 85, "badge_count": 2, "nft_count": 0},
    {"display_name": "Maria Garcia", "score": 65, "badge_count": 1, "nft_count": 0},
    {"display_name": "James Johnson", "score": 45, "badge_count": 1, "nft_count": 0},
    {"display_name": "David Williams", "score": 35, "badge_count": 0, "nft_count": 0},
    {"display_name": "Sarah Brown", "score": 25, "badge_count": 0, "nft_count": 0},
]


@dataclass(frozen=True)
class LeaderboardQuery:
    timeframe: str = "all-time"
    category: str = "points"
    limit: int = 10
    offset: int = 0
    search: str | None = None

    def cache_key(self) -> str:
        return (
            f"leaderboard:{self.category}:{self.timeframe}:{self.limit}:{self.offset}:"
            f"{(self.search or '').lower()}"
        )


def build_query(
    timeframe: str = "all-time",
    category: str = "points",
    limit: int = 10,
    offset: int = 0,
    search: str | None = None,
) -> LeaderboardQuery:
    """Validate and normalize leaderboard filters.

    Raises:
        ValueError: For an unknown timeframe or category, or a negative offset.
    """
    category = CATEGORY_ALIASES.get(category, category)
    if timeframe not in TIMEFRAMES:
        msg = f"Unknown timeframe: {timeframe}"
        raise ValueError(msg)
    if category not in CATEGORIES:
        msg = f"Unknown category: {category}"
        raise ValueError(msg)
    if offset < 0:
        msg = "offset must not be negative"
        raise ValueError(msg)
    max_limit = get_settings().leaderboard_max_limit
    search = search.strip() if search else None
    return LeaderboardQuery(timeframe, category, max(1, min(limit, max_limit)), offset, search or None)


def mock_entries() -> list[dict[str, Any]]:
    """Example entries with deliberately low, strictly decreasing scores."""
    return [
        {
            "rank": i + 1,
            "user_id": None,
            "display_name": m["display_name"],
            "avatar_url": None,
            "score": m["score"],
            "points": m["score"],
            "badge_count": m["badge_count"],
            "nft_count": m["nft_count"],
            "referral_count": 0,
            "has_applied": False,
            "is_current_user": False,
            "is_mock": True,
        }
        for i, m in enumerate(MOCK_ENTRIES)
    ]


def _score_subquery(category: str, cutoff: datetime | None):  # noqa: ANN202
    """Per-user score for the category, or None when users.points is the score."""
    if category in ("points", "application"):
        if cutoff is None:
            return None
        stmt = (
            select(PointAward.user_id.label("user_id"), func.sum(PointAward.points).label("score"))
            .where(PointAward.balance == "points", PointAward.created_at >= cutoff)
            .group_by(PointAward.user_id)
        )
    elif category == "badges":
        stmt = select(UserBadge.user_id.label("user_id"), func.count(UserBadge.id).label("score"))
        if cutoff is not None:
            stmt = stmt.where(UserBadge.earned_at >= cutoff)
        stmt = stmt.group_by(UserBadge.user_id)
    elif category == "nfts":
        stmt = select(NftAward.user_id.label("user_id"), func.count(NftAward.id).label("score"))
        if cutoff is not None:
            stmt = stmt.where(NftAward.awarded_at >= cutoff)
        stmt = stmt.group_by(NftAward.user_id)
    else:
        referred = aliased(User)
        stmt = (
            select(referred.referred_by_id.label("user_id"), func.count(referred.id).label("score"))
            .where(referred.referred_by_id.is_not(None))
        )
        if cutoff is not None:
            stmt = stmt.where(referred.created_at >= cutoff)
        stmt = stmt.group_by(referred.referred_by_id)
    return stmt.subquery()


async def _batch_counts(db: AsyncSession, user_ids: list[int]) -> dict[str, dict[int, int]]:
    """All-time badge, NFT and referral counts for the users on a page."""
    if not user_ids:
        return {"badges": {}, "nfts": {}, "referrals": {}}

    badges = await db.execute(
        select(UserBadge.user_id, func.count(UserBadge.id))
        .where(UserBadge.user_id.in_(user_ids))
        .group_by(UserBadge.user_id)
    )
    nfts = await db.execute(
        select(NftAward.user_id, func.count(NftAward.id))
        .where(NftAward.user_id.in_(user_ids))
        .group_by(NftAward.user_id)
    )
    referred = aliased(User)
    referrals = await db.execute(
        select(referred.referred_by_id, func.count(referred.id))
        .where(referred.referred_by_id.in_(user_ids))
        .group_by(referred.referred_by_id)
    )
    return {
        "badges": {uid: int(c) for uid, c in badges.all()},
        "nfts": {uid: int(c) for uid, c in nfts.all()},
        "referrals": {uid: int(c) for uid, c in referrals.all()},
    }


async def query_leaderboard(
    db: AsyncSession,
    query: LeaderboardQuery,
    now: datetime | None = None,
) -> tuple[list[dict[str, Any]], int]:
    """Ranked page of real users and the total number of ranked users.

    Ties on score are broken by ascending user id, so ranks are stable.
    """
    delta = TIMEFRAMES[query.timeframe]
    cutoff = (now or datetime.now(timezone.utc)) - delta if delta is not None else None

    sq = _score_subquery(query.category, cutoff)
    if sq is None:
        score_col = User.points
        stmt = select(User, score_col.label("score"))
    else:
        score_col = func.coalesce(sq.c.score, 0)
        stmt = select(User, score_col.label("score")).outerjoin(sq, sq.c.user_id == User.id)

    stmt = stmt.where(User.is_banned.is_(False))
    if query.category == "application":
        stmt = stmt.where(User.has_applied.is_(True))
    else:
        stmt = stmt.where(score_col > 0)
    if query.search:
        stmt = stmt.where(func.lower(User.display_name).contains(query.search.lower(), autoescape=True))

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar() or 0

    result = await db.execute(
        stmt.order_by(score_col.desc(), User.id.asc()).offset(query.offset).limit(query.limit)
    )
    rows = result.all()
    counts = await _batch_counts(db, [row[0].id for row in rows])

    entries = [
        {
            "rank": query.offset + i + 1,
            "user_id": user.id,
            "display_name": user.display_name or f"Recruit #{user.id}",
            "avatar_url": user.avatar_url,
            "score": int(score or 0),
            "points": user.points,
            "badge_count": counts["badges"].get(user.id, 0),
            "nft_count": counts["nfts"].get(user.id, 0),
            "referral_count": counts["referrals"].get(user.id, 0),
            "has_applied": user.has_applied,
            "is_current_user": False,
            "is_mock": False,
        }
        for i, (user, score) in enumerate(rows)
    ]
    return entries, int(total)


async def _cache_get(redis: object, key: str) -> dict[str, Any] | None:
    if redis is None:
        return None
    try:
        raw = await redis.get(key)  # type: ignore[attr-defined]
    except Exception:
        logger.warning("Leaderboard cache read failed", exc_info=True)
        return None
    return json.loads(raw) if raw else None


async def _cache_set(redis: object, key: str, value: dict[str, Any]) -> None:
    if redis is None:
        return
    try:
        await redis.set(key, json.dumps(value), ex=get_settings().leaderboard_cache_ttl_seconds)  # type: ignore[attr-defined]
    except Exception:
        logger.warning("Leaderboard cache write failed", exc_info=True)


async def fetch_leaderboard(
    db: AsyncSession,
    redis: object,
    query: LeaderboardQuery,
    current_user_id: int | None = None,
) -> dict[str, Any]:
    """Leaderboard page for `query`, falling back to mock entries.

    Returns a dict with `entries`, `total` and `is_mock`.
    """
    key = query.cache_key()
    page = await _cache_get(redis, key)

    if page is None:
        timeout = get_settings().leaderboard_timeout_seconds
        try:
            entries, total = await asyncio.wait_for(query_leaderboard(db, query), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Leaderboard query timed out after %.1fs", timeout)
            entries, total = [], 0
        except Exception:
            logger.warning("Leaderboard query failed", exc_info=True)
            await db.rollback()
            entries, total = [], 0

        page = {"entries": entries, "total": total}
        if entries:
            await _cache_set(redis, key, page)

    if not page["entries"]:
        return {"entries": mock_entries(), "total": 0, "is_mock": True}

    for entry in page["entries"]:
        entry["is_current_user"] = current_user_id is not None and entry["user_id"] == current_user_id
    return {"entries": page["entries"], "total": page["total"], "is_mock": False}
