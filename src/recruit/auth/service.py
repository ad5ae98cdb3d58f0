"""
Authentication business logic.

Handles user registration, credential checks, and user lookups.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select

from recruit.auth.password import (
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from recruit.db.models import User
from recruit.points.actions import POINT_ACTIONS
from recruit.points.service import award_points

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession,
    email: str,
    password: str,
    display_name: str | None = None,
    role: str = "recruit",
    referred_by_id: int | None = None,
) -> User:
    """
    Register a new user with email + password.

    A valid `referred_by_id` credits the referrer with the referral reward,
    once per referred account.

    Raises:
        PasswordStrengthError: If the password is weak.
        ValueError: If the email is already registered.
    """
    validate_password_strength(password)

    if await get_user_by_email(db, email) is not None:
        msg = "Email already registered"
        raise ValueError(msg)

    if referred_by_id is not None and await get_user_by_id(db, referred_by_id) is None:
        referred_by_id = None

    now = datetime.now(timezone.utc)
    user = User(
        email=email.lower().strip(),
        password_hash=hash_password(password),
        display_name=display_name or email.split("@", 1)[0],
        role=role,
        referred_by_id=referred_by_id,
        created_at=now,
        updated_at=now,
        last_login=now,
    )
    db.add(user)
    await db.flush()
    logger.info("user_created", user_id=user.id, role=role)

    if referred_by_id is not None:
        await award_points(
            db,
            referred_by_id,
            POINT_ACTIONS["referral"].points,
            "referral",
            description=f"Referred {user.display_name}",
            idempotency_key=f"referral:{user.id}",
        )
        logger.info("referral_credited", referrer_id=referred_by_id, user_id=user.id)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """
    Authenticate a user with email + password.

    Raises:
        ValueError: If the credentials are invalid.
        PermissionError: If the account is banned.
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash or ""):
        msg = "Invalid email or password"
        raise ValueError(msg)

    if user.is_banned:
        msg = "Account is banned"
        raise PermissionError(msg)

    user.last_login = datetime.now(timezone.utc)
    if user.password_hash and check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        logger.info("password_rehashed", user_id=user.id)
    await db.flush()
    return user
