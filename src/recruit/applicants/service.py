"""Applicant intake and admin pipeline management."""

from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.config import get_settings
from recruit.db.models import APPLICANT_STATUSES, Applicant, User
from recruit.gamification.badge_service import award_badge
from recruit.points.service import award_points

logger = logging.getLogger(__name__)

TRACKING_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_ATTEMPTS = 5


@dataclass
class SubmissionResult:
    applicant: Applicant
    points_awarded: int = 0
    badge_awarded: bool = False


def generate_tracking_number(now: datetime | None = None) -> str:
    """SD-YYYYMMDD-XXXXXX with a random uppercase alphanumeric suffix."""
    day = (now or datetime.now(timezone.utc)).strftime("%Y%m%d")
    suffix = "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(6))
    return f"SD-{day}-{suffix}"


async def _unused_tracking_number(db: AsyncSession) -> str:
    for _ in range(TRACKING_ATTEMPTS):
        candidate = generate_tracking_number()
        taken = await db.execute(select(Applicant.id).where(Applicant.tracking_number == candidate))
        if taken.scalar_one_or_none() is None:
            return candidate
    msg = "Could not allocate a tracking number"
    raise RuntimeError(msg)


async def submit_application(
    db: AsyncSession,
    redis: object,
    first_name: str,
    last_name: str,
    email: str,
    phone: str | None = None,
    zip_code: str | None = None,
    referral_source: str | None = None,
    referral_code: str | None = None,
    user_id: int | None = None,
) -> SubmissionResult:
    """Create a pending applicant.

    When the submitter is signed in, the record is linked to the account,
    `has_applied` is set and the application award is credited once per user.
    """
    applicant = Applicant(
        first_name=first_name,
        last_name=last_name,
        email=email.lower(),
        phone=phone,
        zip_code=zip_code,
        referral_source=referral_source,
        referral_code=referral_code,
        tracking_number=await _unused_tracking_number(db),
        application_status="pending",
        user_id=user_id,
    )
    db.add(applicant)
    await db.flush()

    points = 0
    if user_id is not None:
        await db.execute(update(User).where(User.id == user_id).values(has_applied=True))
        result = await award_points(
            db,
            user_id,
            get_settings().application_points,
            "application_submission",
            description=f"Submitted application {applicant.tracking_number}",
            idempotency_key=f"application:{user_id}",
        )
        points = result.points if result.success and not result.duplicate else 0

    await db.commit()
    logger.info("Applicant %s submitted (user %s)", applicant.tracking_number, user_id)

    badge = False
    if user_id is not None:
        try:
            badge = await award_badge(db, redis, user_id, "application-completed")
            await db.commit()
        except Exception:
            logger.warning("Application badge award failed for user %d", user_id, exc_info=True)
            await db.rollback()
            await db.refresh(applicant)

    return SubmissionResult(applicant=applicant, points_awarded=points, badge_awarded=badge)


async def get_applicant(db: AsyncSession, applicant_id: int) -> Applicant | None:
    result = await db.execute(select(Applicant).where(Applicant.id == applicant_id))
    return result.scalar_one_or_none()


async def list_applicants(
    db: AsyncSession,
    status: str | None = None,
    search: str | None = None,
    limit: int = 25,
    offset: int = 0,
) -> tuple[list[Applicant], int]:
    """Newest-first page of applicants filtered by status and name/email/tracking search."""
    stmt = select(Applicant)
    if status:
        stmt = stmt.where(Applicant.application_status == status)
    if search:
        term = search.strip().lower()
        stmt = stmt.where(or_(
            func.lower(Applicant.first_name).contains(term, autoescape=True),
            func.lower(Applicant.last_name).contains(term, autoescape=True),
            func.lower(Applicant.email).contains(term, autoescape=True),
            func.lower(Applicant.tracking_number).contains(term, autoescape=True),
        ))

    total = (await db.execute(select(func.count()).select_from(stmt.subquery()))).scalar() or 0
    result = await db.execute(
        stmt.order_by(Applicant.created_at.desc(), Applicant.id.desc()).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total


async def status_counts(db: AsyncSession) -> dict[str, int]:
    """Applicant count per status, with zero for empty statuses."""
    result = await db.execute(
        select(Applicant.application_status, func.count(Applicant.id)).group_by(Applicant.application_status)
    )
    counts = {status: 0 for status in APPLICANT_STATUSES}
    counts.update({status: int(n) for status, n in result.all()})
    return counts


async def update_status(db: AsyncSession, applicant_id: int, status: str) -> Applicant:
    """Set an applicant's pipeline status.

    Raises:
        ValueError: For an unknown status.
        LookupError: For an unknown applicant.
    """
    if status not in APPLICANT_STATUSES:
        msg = f"Unknown status: {status}"
        raise ValueError(msg)
    applicant = await get_applicant(db, applicant_id)
    if applicant is None:
        msg = f"Applicant {applicant_id} not found"
        raise LookupError(msg)

    previous = applicant.application_status
    applicant.application_status = status
    applicant.updated_at = datetime.now(timezone.utc)
    await db.commit()
    logger.info("Applicant %d status %s -> %s", applicant_id, previous, status)
    return applicant
