"""Server-side background checklist progress."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.checklist.documents import DOCUMENTS_BY_ID
from recruit.config import get_settings
from recruit.db.models import ChecklistProgress
from recruit.gamification.badge_rules import BadgeRuleEvaluator
from recruit.points.service import award_points

logger = logging.getLogger(__name__)


@dataclass
class ChecklistUpdate:
    checked: set[str]
    points_awarded: int = 0
    badges_awarded: list[str] = field(default_factory=list)


def checklist_award_key(user_id: int, document_id: str) -> str:
    """Ledger idempotency key: each document pays out once per user, ever."""
    return f"checklist:{user_id}:{document_id}"


async def get_checked(db: AsyncSession, user_id: int) -> set[str]:
    result = await db.execute(
        select(ChecklistProgress.document_id).where(
            ChecklistProgress.user_id == user_id,
            ChecklistProgress.checked.is_(True),
        )
    )
    return set(result.scalars().all())


async def _set_row(db: AsyncSession, user_id: int, document_id: str, checked: bool) -> None:
    result = await db.execute(
        select(ChecklistProgress).where(
            ChecklistProgress.user_id == user_id,
            ChecklistProgress.document_id == document_id,
        )
    )
    row = result.scalar_one_or_none()
    now = datetime.now(timezone.utc)
    if row is None:
        db.add(ChecklistProgress(user_id=user_id, document_id=document_id, checked=checked, updated_at=now))
    else:
        row.checked = checked
        row.updated_at = now
    await db.flush()


async def _award_document(db: AsyncSession, user_id: int, document_id: str) -> int:
    settings = get_settings()
    result = await award_points(
        db,
        user_id,
        settings.checklist_document_points,
        "background_prep",
        description=f"Checked off background document: {DOCUMENTS_BY_ID[document_id].title}",
        idempotency_key=checklist_award_key(user_id, document_id),
    )
    return result.points if result.success and not result.duplicate else 0


async def _evaluate_badges(db: AsyncSession, redis: object, user_id: int, checked: set[str]) -> list[str]:
    try:
        return await BadgeRuleEvaluator(db, redis).check_and_award(user_id, "checklist", {"checked": checked})
    except Exception:
        await db.rollback()
        logger.warning("Checklist badge evaluation failed for user %d", user_id, exc_info=True)
        return []


async def set_document(
    db: AsyncSession,
    redis: object,
    user_id: int,
    document_id: str,
    checked: bool,
) -> ChecklistUpdate:
    """Check or uncheck a document.

    Checking pays out once per document; unchecking and re-checking does not
    award again.

    Raises:
        LookupError: For an unknown document id.
    """
    if document_id not in DOCUMENTS_BY_ID:
        msg = f"Unknown document: {document_id}"
        raise LookupError(msg)

    await _set_row(db, user_id, document_id, checked)
    points = await _award_document(db, user_id, document_id) if checked else 0
    await db.commit()

    current = await get_checked(db, user_id)
    badges = await _evaluate_badges(db, redis, user_id, current) if checked else []
    return ChecklistUpdate(checked=current, points_awarded=points, badges_awarded=badges)


async def import_progress(
    db: AsyncSession,
    redis: object,
    user_id: int,
    document_ids: list[str],
) -> ChecklistUpdate:
    """Merge a legacy browser-stored list of checked ids. Unknown ids are skipped."""
    points = 0
    already = await get_checked(db, user_id)
    for document_id in dict.fromkeys(document_ids):
        if document_id not in DOCUMENTS_BY_ID:
            logger.info("Skipping unknown checklist document %s", document_id)
            continue
        if document_id not in already:
            await _set_row(db, user_id, document_id, True)
        points += await _award_document(db, user_id, document_id)
    await db.commit()

    current = await get_checked(db, user_id)
    badges = await _evaluate_badges(db, redis, user_id, current)
    return ChecklistUpdate(checked=current, points_awarded=points, badges_awarded=badges)
