"""Unit tests for donation point arithmetic, rule matching and campaign windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from recruit.donations.calculator import (
    calculate_points,
    campaign_is_active,
    points_for_donation,
    select_rule,
)

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


@dataclass
class Campaign:
    start_date: datetime
    end_date: datetime | None = None
    multiplier: Decimal = Decimal("2")
    is_active: bool = True


@dataclass
class Rule:
    min_amount: Decimal
    max_amount: Decimal | None
    points_per_dollar: Decimal
    recurring_multiplier: Decimal = Decimal("1")
    is_active: bool = True
    campaign: Campaign | None = None


class TestCalculatePoints:
    """amount x rate x recurring multiplier x campaign multiplier, rounded half up."""

    def test_simple_rate(self):
        assert calculate_points(25, 2) == 50

    def test_recurring_multiplier_applies_only_when_recurring(self):
        assert calculate_points(10, 1, recurring_multiplier="1.5", is_recurring=False) == 10
        assert calculate_points(10, 1, recurring_multiplier="1.5", is_recurring=True) == 15

    def test_campaign_multiplier(self):
        assert calculate_points(10, 1, campaign_multiplier=3) == 30

    def test_all_multipliers_stack(self):
        assert calculate_points(10, 2, recurring_multiplier="1.5", is_recurring=True, campaign_multiplier=2) == 60

    def test_rounds_half_up(self):
        assert calculate_points("2.50", 1) == 3
        assert calculate_points("2.49", 1) == 2

    def test_fractional_cents(self):
        """$12.34 at 1.5 pts/$ = 18.51 -> 19."""
        assert calculate_points("12.34", "1.5") == 19


class TestSelectRule:
    """First active rule by ascending min_amount whose range contains the amount."""

    def test_picks_matching_tier(self):
        small = Rule(Decimal("0"), Decimal("49.99"), Decimal("1"))
        large = Rule(Decimal("50"), None, Decimal("2"))
        assert select_rule([large, small], Decimal("20")) is small
        assert select_rule([large, small], Decimal("50")) is large
        assert select_rule([large, small], Decimal("5000")) is large

    def test_bounds_are_inclusive(self):
        rule = Rule(Decimal("10"), Decimal("20"), Decimal("1"))
        assert select_rule([rule], Decimal("10")) is rule
        assert select_rule([rule], Decimal("20")) is rule
        assert select_rule([rule], Decimal("20.01")) is None

    def test_inactive_rules_skipped(self):
        inactive = Rule(Decimal("0"), None, Decimal("5"), is_active=False)
        active = Rule(Decimal("0"), None, Decimal("1"))
        assert select_rule([inactive, active], Decimal("10")) is active

    def test_overlap_resolved_by_min_amount(self):
        wide = Rule(Decimal("0"), None, Decimal("1"))
        narrow = Rule(Decimal("100"), Decimal("200"), Decimal("3"))
        assert select_rule([narrow, wide], Decimal("150")) is wide

    def test_below_every_rule(self):
        rule = Rule(Decimal("5"), None, Decimal("1"))
        assert select_rule([rule], Decimal("1")) is None


class TestCampaignWindow:
    """A campaign applies while flagged active and between its start and end."""

    def test_none_is_inactive(self):
        assert campaign_is_active(None, NOW) is False

    def test_live_campaign(self):
        campaign = Campaign(start_date=NOW - timedelta(days=1), end_date=NOW + timedelta(days=1))
        assert campaign_is_active(campaign, NOW) is True

    def test_open_ended_campaign(self):
        assert campaign_is_active(Campaign(start_date=NOW - timedelta(days=30)), NOW) is True

    def test_not_started(self):
        assert campaign_is_active(Campaign(start_date=NOW + timedelta(hours=1)), NOW) is False

    def test_ended(self):
        campaign = Campaign(start_date=NOW - timedelta(days=10), end_date=NOW - timedelta(seconds=1))
        assert campaign_is_active(campaign, NOW) is False

    def test_flagged_inactive(self):
        assert campaign_is_active(Campaign(start_date=NOW - timedelta(days=1), is_active=False), NOW) is False

    def test_naive_dates_treated_as_utc(self):
        campaign = Campaign(start_date=datetime(2026, 6, 1), end_date=datetime(2026, 7, 1))
        assert campaign_is_active(campaign, NOW) is True


class TestPointsForDonation:
    """End-to-end calculation from a rule set."""

    def test_no_rule_yields_zero(self):
        points, rule, campaign = points_for_donation([], "25", is_recurring=False, now=NOW)
        assert (points, rule, campaign) == (0, None, None)

    def test_live_campaign_boosts(self):
        campaign = Campaign(start_date=NOW - timedelta(days=1), multiplier=Decimal("2"))
        rule = Rule(Decimal("0"), None, Decimal("1"), campaign=campaign)
        points, matched, applied = points_for_donation([rule], "40", is_recurring=False, now=NOW)
        assert points == 80
        assert matched is rule
        assert applied is campaign

    def test_expired_campaign_ignored(self):
        campaign = Campaign(start_date=NOW - timedelta(days=10), end_date=NOW - timedelta(days=1))
        rule = Rule(Decimal("0"), None, Decimal("1"), campaign=campaign)
        points, _, applied = points_for_donation([rule], "40", is_recurring=False, now=NOW)
        assert points == 40
        assert applied is None

    def test_recurring(self):
        rule = Rule(Decimal("0"), None, Decimal("1"), recurring_multiplier=Decimal("1.25"))
        points, _, _ = points_for_donation([rule], "20", is_recurring=True, now=NOW)
        assert points == 25
