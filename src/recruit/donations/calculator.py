"""Donation point arithmetic.

Rules are matched in ascending `min_amount` order; the first rule whose
[min_amount, max_amount] range contains the amount wins, with a NULL
max_amount meaning "no upper bound". Overlapping ranges are not rejected,
so ordering decides.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol


class RuleLike(Protocol):
    min_amount: Decimal
    max_amount: Decimal | None
    points_per_dollar: Decimal
    recurring_multiplier: Decimal
    is_active: bool


class CampaignLike(Protocol):
    start_date: datetime
    end_date: datetime | None
    multiplier: Decimal
    is_active: bool


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def select_rule(rules: Iterable[RuleLike], amount: Decimal) -> RuleLike | None:
    """First active rule, by ascending min_amount, whose range contains `amount`."""
    for rule in sorted((r for r in rules if r.is_active), key=lambda r: to_decimal(r.min_amount)):
        if to_decimal(rule.min_amount) > amount:
            continue
        if rule.max_amount is not None and amount > to_decimal(rule.max_amount):
            continue
        return rule
    return None


def campaign_is_active(campaign: CampaignLike | None, now: datetime | None = None) -> bool:
    """A campaign is live when flagged active, already started, and not yet ended."""
    if campaign is None or not campaign.is_active:
        return False
    now = now or datetime.now(timezone.utc)
    if _as_utc(campaign.start_date) > now:
        return False
    return campaign.end_date is None or _as_utc(campaign.end_date) >= now


def calculate_points(
    amount: Decimal | float | int | str,
    points_per_dollar: Decimal | float | int | str,
    recurring_multiplier: Decimal | float | int | str = 1,
    is_recurring: bool = False,
    campaign_multiplier: Decimal | float | int | str = 1,
) -> int:
    """amount x points_per_dollar x (recurring multiplier if recurring) x campaign multiplier, rounded half-up."""
    raw = to_decimal(amount) * to_decimal(points_per_dollar)
    if is_recurring:
        raw *= to_decimal(recurring_multiplier)
    raw *= to_decimal(campaign_multiplier)
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def points_for_donation(
    rules: Iterable[RuleLike],
    amount: Decimal | float | int | str,
    is_recurring: bool,
    now: datetime | None = None,
) -> tuple[int, RuleLike | None, CampaignLike | None]:
    """Points for a donation, the matching rule, and the campaign that boosted it.

    No matching rule yields 0 points. A rule's campaign multiplier applies only
    while that campaign is live.
    """
    amount = to_decimal(amount)
    rule = select_rule(rules, amount)
    if rule is None:
        return 0, None, None
    campaign = getattr(rule, "campaign", None)
    if not campaign_is_active(campaign, now):
        campaign = None
    points = calculate_points(
        amount,
        rule.points_per_dollar,
        rule.recurring_multiplier,
        is_recurring,
        campaign.multiplier if campaign is not None else 1,
    )
    return points, rule, campaign
