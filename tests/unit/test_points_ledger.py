"""Unit tests for the points ledger and action catalogue."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from recruit.db.models import PointAward, User
from recruit.points.actions import POINT_ACTIONS, get_action, resolve_amount
from recruit.points.service import award_points, get_history, get_user_points


async def _points(db_session, user_id: int) -> int:
    return (await db_session.execute(select(User.points).where(User.id == user_id))).scalar_one()


async def sum_ledger(db_session, user_id: int, balance: str = "points") -> int:
    """Re-derive a balance from the ledger rows."""
    result = await db_session.execute(
        select(func.coalesce(func.sum(PointAward.points), 0))
        .where(PointAward.user_id == user_id, PointAward.balance == balance)
    )
    return int(result.scalar() or 0)


class TestActionCatalogue:
    """Fixed actions ignore client amounts; variable actions require one."""

    def test_fixed_action_ignores_requested_amount(self):
        assert resolve_amount(get_action("chat_participation"), 999) == 5

    def test_variable_action_requires_amount(self):
        with pytest.raises(ValueError):
            resolve_amount(get_action("sgt_ken_game_win"), None)

    def test_variable_action_cap(self):
        action = get_action("sgt_ken_game_win")
        assert resolve_amount(action, 220) == 220
        with pytest.raises(ValueError):
            resolve_amount(action, 221)

    def test_unknown_action(self):
        with pytest.raises(LookupError):
            get_action("free_money")

    def test_server_only_actions(self):
        for name in ("application_submission", "trivia_share", "badge_earned", "donation"):
            assert not POINT_ACTIONS[name].client_awardable


class TestAwardPoints:
    """Ledger rows and running totals move together."""

    async def test_award_updates_total_and_ledger(self, db_session, user):
        result = await award_points(db_session, user.id, 20, "practice_test")
        await db_session.commit()
        assert result.success
        assert result.new_total == 20
        assert result.points == 20
        assert await _points(db_session, user.id) == 20
        assert await sum_ledger(db_session, user.id) == 20

    async def test_negative_amount_reduces_total(self, db_session, make_recruit):
        recruit = await make_recruit(email="neg@example.com", points=0)
        await award_points(db_session, recruit.id, 50, "practice_test")
        result = await award_points(db_session, recruit.id, -30, "admin_adjustment")
        await db_session.commit()
        assert result.new_total == 20
        assert await sum_ledger(db_session, recruit.id) == 20

    async def test_unknown_user(self, db_session):
        result = await award_points(db_session, 9999, 10, "practice_test")
        assert not result.success
        assert result.error == "User not found"

    async def test_unknown_balance(self, db_session, user):
        with pytest.raises(ValueError):
            await award_points(db_session, user.id, 10, "practice_test", balance="karma")

    async def test_idempotency_key_awards_once(self, db_session, user):
        first = await award_points(db_session, user.id, 15, "trivia_share", idempotency_key="share:1")
        await db_session.commit()
        second = await award_points(db_session, user.id, 15, "trivia_share", idempotency_key="share:1")
        await db_session.commit()
        assert not first.duplicate
        assert second.duplicate
        assert second.points == 15
        assert second.new_total == 15
        assert await _points(db_session, user.id) == 15
        count = (await db_session.execute(
            select(func.count()).select_from(PointAward).where(PointAward.user_id == user.id)
        )).scalar()
        assert count == 1

    async def test_donation_balance_is_separate(self, db_session, user):
        await award_points(db_session, user.id, 40, "donation", balance="donation_points")
        await award_points(db_session, user.id, 10, "resource_download")
        await db_session.commit()
        assert await get_user_points(db_session, user.id) == {"points": 10, "donation_points": 40, "total": 50}
        assert await sum_ledger(db_session, user.id, "donation_points") == 40


class TestHistory:
    """Newest-first pagination over the ledger."""

    async def test_history_pages(self, db_session, user):
        for amount in (1, 2, 3, 4, 5):
            await award_points(db_session, user.id, amount, "practice_test")
        await db_session.commit()

        entries, total = await get_history(db_session, user.id, limit=2, offset=0)
        assert total == 5
        assert [e.points for e in entries] == [5, 4]

        entries, _ = await get_history(db_session, user.id, limit=2, offset=4)
        assert [e.points for e in entries] == [1]

    async def test_unknown_user_points(self, db_session):
        assert await get_user_points(db_session, 12345) is None
