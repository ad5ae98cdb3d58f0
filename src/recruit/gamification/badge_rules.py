"""Badge rule evaluator: checks threshold rules after engagement events."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.checklist.documents import ALL_DOCUMENT_IDS, REQUIRED_DOCUMENT_IDS
from recruit.db.models import BadgeDefinition, Donation, DonationPointAward, TriviaAttempt
from recruit.gamification.badge_service import award_badge

logger = logging.getLogger(__name__)

GENEROUS_DONATION_AMOUNT = Decimal("100")

DONATION_COUNT_BADGES = [
    ("donation-milestone-5", 5),
    ("donation-milestone-10", 10),
    ("donation-milestone-25", 25),
]

DONATION_AMOUNT_BADGES = [
    ("donation-amount-250", Decimal("250")),
    ("donation-amount-500", Decimal("500")),
    ("donation-amount-1000", Decimal("1000")),
]

TRIVIA_ATTEMPT_BADGES = [
    ("trivia-participant", 1),
    ("trivia-enthusiast", 5),
]
TRIVIA_PERFECT_BADGES = [
    ("trivia-master", 3),
]
SPEED_DEMON_FAST_CORRECT = 10


class BadgeRuleEvaluator:
    """Evaluates badge rules for donation, trivia and checklist events.

    Every rule is independent, so a single call may award several badges.
    Awards are guarded by `award_badge`, so re-evaluating never duplicates rows.
    """

    def __init__(self, db: AsyncSession, redis: object) -> None:
        self.db = db
        self.redis = redis
        self._badge_cache: dict[str, BadgeDefinition] | None = None

    async def _load_badges(self) -> dict[str, BadgeDefinition]:
        """Load and cache all active badge definitions."""
        if self._badge_cache is None:
            result = await self.db.execute(
                select(BadgeDefinition).where(BadgeDefinition.is_active.is_(True))
            )
            self._badge_cache = {b.slug: b for b in result.scalars()}
        return self._badge_cache

    async def check_and_award(self, user_id: int, event: str, context: dict[str, Any] | None = None) -> list[str]:
        """Evaluate the rules for `event` and return the badge types awarded."""
        context = context or {}
        if event == "donation":
            awarded = await self._check_donation_rules(user_id, context)
        elif event == "trivia_round":
            awarded = await self._check_trivia_rules(user_id, context)
        elif event == "checklist":
            awarded = await self._check_checklist_rules(user_id, context)
        else:
            logger.warning("No badge rules for event %s", event)
            return []

        if awarded:
            await self.db.commit()
        return awarded

    async def _award(
        self,
        user_id: int,
        slug: str,
        requirements: dict[str, Any] | None = None,
    ) -> bool:
        badges = await self._load_badges()
        if slug not in badges:
            return False
        return await award_badge(
            self.db, self.redis, user_id, slug,
            progress=100,
            requirements=requirements,
        )

    # -- Donations --

    async def donation_counters(self, user_id: int) -> tuple[int, Decimal]:
        """(credited donation count, lifetime completed amount)."""
        count = (await self.db.execute(
            select(func.count(DonationPointAward.id)).where(DonationPointAward.user_id == user_id)
        )).scalar() or 0
        total = (await self.db.execute(
            select(func.coalesce(func.sum(Donation.amount), 0))
            .where(Donation.user_id == user_id, Donation.status == "completed")
        )).scalar() or 0
        return int(count), Decimal(str(total))

    async def _check_donation_rules(self, user_id: int, context: dict[str, Any]) -> list[str]:
        count, total = await self.donation_counters(user_id)
        amount = Decimal(str(context.get("amount", 0)))
        awarded: list[str] = []

        if count == 1 and await self._award(user_id, "first-donation", {"donation_count": 1}):
            awarded.append("first-donation")

        if context.get("is_recurring") and await self._award(user_id, "recurring-donor", {"is_recurring": True}):
            awarded.append("recurring-donor")

        if amount >= GENEROUS_DONATION_AMOUNT and await self._award(
            user_id, "generous-donor", {"amount": str(amount), "threshold": str(GENEROUS_DONATION_AMOUNT)},
        ):
            awarded.append("generous-donor")

        for slug, threshold in DONATION_COUNT_BADGES:
            if count >= threshold and await self._award(
                user_id, slug, {"donation_count": count, "threshold": threshold},
            ):
                awarded.append(slug)

        for slug, threshold in DONATION_AMOUNT_BADGES:
            if total >= threshold and await self._award(
                user_id, slug, {"total_donated": str(total), "threshold": str(threshold)},
            ):
                awarded.append(slug)

        return awarded

    # -- Trivia --

    async def trivia_counters(self, user_id: int) -> dict[str, int]:
        """Attempt count, perfect-round count and total fast correct answers."""
        perfect = func.sum(case(
            (and_(
                TriviaAttempt.correct_answers == TriviaAttempt.total_questions,
                TriviaAttempt.total_questions > 0,
            ), 1),
            else_=0,
        ))
        result = await self.db.execute(
            select(
                func.count(TriviaAttempt.id),
                func.coalesce(perfect, 0),
                func.coalesce(func.sum(TriviaAttempt.fast_correct), 0),
            ).where(TriviaAttempt.user_id == user_id)
        )
        attempts, perfect_rounds, fast_correct = result.one()
        return {
            "attempts": int(attempts),
            "perfect_rounds": int(perfect_rounds),
            "fast_correct": int(fast_correct),
        }

    async def _check_trivia_rules(self, user_id: int, context: dict[str, Any]) -> list[str]:
        counters = await self.trivia_counters(user_id)
        awarded: list[str] = []

        for slug, threshold in TRIVIA_ATTEMPT_BADGES:
            if counters["attempts"] >= threshold and await self._award(
                user_id, slug, {"attempts": counters["attempts"], "threshold": threshold},
            ):
                awarded.append(slug)

        for slug, threshold in TRIVIA_PERFECT_BADGES:
            if counters["perfect_rounds"] >= threshold and await self._award(
                user_id, slug, {"perfect_rounds": counters["perfect_rounds"], "threshold": threshold},
            ):
                awarded.append(slug)

        total = int(context.get("total", 0))
        perfect_round = total > 0 and int(context.get("correct", 0)) == total
        if perfect_round and context.get("game_mode") == "challenge" and await self._award(
            user_id, "challenge-champion", {"game_mode": "challenge", "correct": total},
        ):
            awarded.append("challenge-champion")

        if counters["fast_correct"] >= SPEED_DEMON_FAST_CORRECT and await self._award(
            user_id, "speed-demon", {"fast_correct": counters["fast_correct"]},
        ):
            awarded.append("speed-demon")

        return awarded

    # -- Background checklist --

    async def _check_checklist_rules(self, user_id: int, context: dict[str, Any]) -> list[str]:
        checked = set(context.get("checked", ()))
        awarded: list[str] = []

        if REQUIRED_DOCUMENT_IDS <= checked and await self._award(
            user_id, "background-prepared", {"required_documents": len(REQUIRED_DOCUMENT_IDS)},
        ):
            awarded.append("background-prepared")

        if ALL_DOCUMENT_IDS <= checked and await self._award(
            user_id, "document-master", {"documents": len(ALL_DOCUMENT_IDS)},
        ):
            awarded.append("document-master")

        return awarded
