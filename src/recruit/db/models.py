"""ORM models for the recruitment engagement schema.

All models are portable between PostgreSQL (production) and SQLite (tests):
JSON columns use JSONB on PostgreSQL only and BIGINT keys fall back to INTEGER
on SQLite.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recruit.db.base import Base, BigIntPK, JSONType, utcnow

USER_ROLES = ("recruit", "volunteer", "admin")
APPLICANT_STATUSES = ("pending", "contacted", "interested", "applied", "hired", "rejected", "started")
DONATION_STATUSES = ("pending", "completed", "refunded")
TRIVIA_DIFFICULTIES = ("easy", "medium", "hard")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Registered site user. `points` and `donation_points` are denormalized ledger totals."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(256), nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="recruit")
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    donation_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    has_applied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    referred_by_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


# ---------------------------------------------------------------------------
# Points ledger
# ---------------------------------------------------------------------------


class PointAward(Base):
    """Append-only point ledger. Never updated or deleted."""

    __tablename__ = "point_awards"
    __table_args__ = (Index("idx_point_awards_user_created", "user_id", "created_at"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    balance: Mapped[str] = mapped_column(String(16), nullable=False, default="points")
    description: Mapped[str | None] = mapped_column(String(512), nullable=True)
    idempotency_key: Mapped[str | None] = mapped_column(String(256), unique=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------


class BadgeDefinition(Base):
    """Badge catalogue, seeded on startup."""

    __tablename__ = "badge_definitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class UserBadge(Base):
    """Badges earned by users. UNIQUE(user_id, badge_type) prevents duplicates."""

    __tablename__ = "user_badges"
    __table_args__ = (
        UniqueConstraint("user_id", "badge_type", name="user_badges_user_id_badge_type_key"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    badge_type: Mapped[str] = mapped_column(String(64), nullable=False)
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    progress: Mapped[int | None] = mapped_column(Integer, nullable=True)
    requirements: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)


class NftAward(Base):
    """Point-threshold collectible unlocked once per (user, tier)."""

    __tablename__ = "nft_awards"
    __table_args__ = (UniqueConstraint("user_id", "tier", name="nft_awards_user_id_tier_key"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    tier: Mapped[str] = mapped_column(String(64), nullable=False)
    points_at_award: Mapped[int] = mapped_column(Integer, nullable=False)
    token_id: Mapped[str] = mapped_column(String(128), nullable=False)
    awarded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


# ---------------------------------------------------------------------------
# Donations
# ---------------------------------------------------------------------------


class DonationCampaign(Base):
    """Time-boxed point multiplier."""

    __tablename__ = "donation_campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    multiplier: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("1.00"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class DonationPointRule(Base):
    """Tiered points-per-dollar rule. Ranges are evaluated in ascending min_amount order."""

    __tablename__ = "donation_point_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    min_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    max_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    points_per_dollar: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    recurring_multiplier: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("1.00"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    campaign_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("donation_campaigns.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    campaign: Mapped[DonationCampaign | None] = relationship("DonationCampaign", lazy="joined")


class Donation(Base):
    """A donation made by a user."""

    __tablename__ = "donations"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="completed")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class DonationPointAward(Base):
    """One row per credited donation. UNIQUE(donation_id) makes accrual idempotent."""

    __tablename__ = "donation_point_awards"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    donation_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("donations.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    rule_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("donation_point_rules.id", ondelete="SET NULL"), nullable=True
    )
    campaign_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("donation_campaigns.id", ondelete="SET NULL"), nullable=True
    )
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


# ---------------------------------------------------------------------------
# Applicants
# ---------------------------------------------------------------------------


class Applicant(Base):
    """Recruitment funnel record. Status changes only through admin actions."""

    __tablename__ = "applicants"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    referral_source: Mapped[str | None] = mapped_column(String(64), nullable=True)
    referral_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tracking_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    application_status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    user_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


# ---------------------------------------------------------------------------
# Trivia
# ---------------------------------------------------------------------------


class TriviaQuestion(Base):
    """Immutable trivia reference data."""

    __tablename__ = "trivia_questions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list[str]] = mapped_column(JSONType, nullable=False)
    correct_answer: Mapped[int] = mapped_column(Integer, nullable=False)
    explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False, default="medium")
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_alt: Mapped[str | None] = mapped_column(String(256), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class TriviaAttempt(Base):
    """A completed trivia round."""

    __tablename__ = "trivia_attempts"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    round_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    game_mode: Mapped[str] = mapped_column(String(16), nullable=False, default="normal")
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    correct_answers: Mapped[int] = mapped_column(Integer, nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False)
    max_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    fast_correct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_awarded: Mapped[int] = mapped_column(Integer, nullable=False)
    category_results: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    answers: Mapped[list[TriviaAnswer]] = relationship("TriviaAnswer", back_populates="attempt")


class TriviaAnswer(Base):
    """One answer within a trivia attempt. NULL selected_answer means the timer ran out."""

    __tablename__ = "trivia_answers"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    attempt_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("trivia_attempts.id", ondelete="CASCADE"), nullable=False
    )
    question_id: Mapped[str] = mapped_column(String(64), nullable=False)
    selected_answer: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)
    time_spent_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    attempt: Mapped[TriviaAttempt] = relationship("TriviaAttempt", back_populates="answers")


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatInteraction(Base):
    """Logged chat turn."""

    __tablename__ = "chat_interactions"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    user_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


# ---------------------------------------------------------------------------
# Background checklist
# ---------------------------------------------------------------------------


class ChecklistProgress(Base):
    """Per-user document checklist state."""

    __tablename__ = "checklist_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "document_id", name="checklist_progress_user_id_document_id_key"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    document_id: Mapped[str] = mapped_column(String(64), nullable=False)
    checked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
