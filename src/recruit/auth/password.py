"""Password hashing (argon2id) and strength rules."""

from __future__ import annotations

import argon2

from recruit.config import get_settings

_hasher = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=argon2.Type.ID,
)


class PasswordStrengthError(ValueError):
    """Raised when a password does not meet strength requirements."""


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if the password matches. Never raises on mismatch."""
    try:
        return _hasher.verify(password_hash, password)
    except (argon2.exceptions.VerifyMismatchError, argon2.exceptions.InvalidHashError):
        return False


def check_needs_rehash(password_hash: str) -> bool:
    return _hasher.check_needs_rehash(password_hash)


def validate_password_strength(password: str) -> None:
    """
    Validate a new password.

    Requires the configured minimum length, at most the configured maximum,
    and at least one letter and one digit.

    Raises:
        PasswordStrengthError: If the password is too weak.
    """
    settings = get_settings()
    if not password or not password.strip():
        msg = "Password cannot be empty"
        raise PasswordStrengthError(msg)
    if len(password) < settings.password_min_length:
        msg = f"Password must be at least {settings.password_min_length} characters"
        raise PasswordStrengthError(msg)
    if len(password) > settings.password_max_length:
        msg = f"Password must not exceed {settings.password_max_length} characters"
        raise PasswordStrengthError(msg)
    if not any(c.isalpha() for c in password):
        msg = "Password must contain at least one letter"
        raise PasswordStrengthError(msg)
    if not any(c.isdigit() for c in password):
        msg = "Password must contain at least one digit"
        raise PasswordStrengthError(msg)
