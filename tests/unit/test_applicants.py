"""Unit tests for applicant intake and admin status management."""

from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest
from sqlalchemy import select

from recruit.applicants.service import (
    generate_tracking_number,
    get_applicant,
    list_applicants,
    status_counts,
    submit_application,
    update_status,
)
from recruit.db.models import User
from recruit.gamification.badge_service import has_badge


class TestTrackingNumber:
    """SD-YYYYMMDD-XXXXXX tracking numbers."""

    def test_format(self):
        number = generate_tracking_number(datetime(2026, 3, 9, tzinfo=timezone.utc))
        assert re.fullmatch(r"SD-20260309-[A-Z0-9]{6}", number)

    def test_random_suffix(self):
        assert len({generate_tracking_number() for _ in range(50)}) > 1


class TestSubmit:
    """Public submissions and signed-in rewards."""

    async def test_anonymous_submission(self, db_session):
        result = await submit_application(db_session, None, "Ana", "Reyes", "Ana@Example.com", zip_code="94103")
        assert result.applicant.application_status == "pending"
        assert result.applicant.email == "ana@example.com"
        assert result.applicant.user_id is None
        assert result.points_awarded == 0
        assert not result.badge_awarded

    async def test_signed_in_submission_rewards_once(self, db_session, user):
        first = await submit_application(db_session, None, "Sam", "Lee", user.email, user_id=user.id)
        assert first.points_awarded == 500
        assert first.badge_awarded
        assert await has_badge(db_session, user.id, "application-completed")

        second = await submit_application(db_session, None, "Sam", "Lee", user.email, user_id=user.id)
        assert second.points_awarded == 0
        assert not second.badge_awarded
        assert second.applicant.tracking_number != first.applicant.tracking_number

        row = (await db_session.execute(
            select(User.points, User.has_applied).where(User.id == user.id)
        )).one()
        assert row.has_applied is True
        assert row.points == 500 + 100


class TestAdmin:
    """Listing, counting and status changes."""

    async def _seed(self, db_session) -> list[int]:
        ids = []
        for first, last, email in [
            ("Ana", "Reyes", "ana@example.com"),
            ("Ben", "Ortiz", "ben@example.com"),
            ("Cara", "Nguyen", "cara@example.com"),
        ]:
            result = await submit_application(db_session, None, first, last, email)
            ids.append(result.applicant.id)
        return ids

    async def test_list_newest_first(self, db_session):
        ids = await self._seed(db_session)
        rows, total = await list_applicants(db_session)
        assert total == 3
        assert [r.id for r in rows] == list(reversed(ids))

    async def test_search(self, db_session):
        await self._seed(db_session)
        rows, total = await list_applicants(db_session, search="ORTIZ")
        assert total == 1
        assert rows[0].first_name == "Ben"

        tracking = rows[0].tracking_number
        rows, _ = await list_applicants(db_session, search=tracking)
        assert [r.first_name for r in rows] == ["Ben"]

    async def test_status_filter_and_counts(self, db_session):
        ids = await self._seed(db_session)
        await update_status(db_session, ids[0], "contacted")
        await update_status(db_session, ids[1], "hired")

        rows, total = await list_applicants(db_session, status="hired")
        assert total == 1
        assert rows[0].id == ids[1]

        counts = await status_counts(db_session)
        assert counts["pending"] == 1
        assert counts["contacted"] == 1
        assert counts["hired"] == 1
        assert counts["rejected"] == 0

    async def test_update_status_validation(self, db_session):
        ids = await self._seed(db_session)
        with pytest.raises(ValueError):
            await update_status(db_session, ids[0], "promoted")
        with pytest.raises(LookupError):
            await update_status(db_session, 9999, "hired")

    async def test_get_applicant(self, db_session):
        ids = await self._seed(db_session)
        applicant = await get_applicant(db_session, ids[2])
        assert applicant.last_name == "Nguyen"
        assert await get_applicant(db_session, 9999) is None
