"""
RS256 JWT access tokens.

Tokens carry the user's role so admin-only routes can reject a caller before
touching the database. The role is still re-read from the user row on every
request, so a demoted admin loses access immediately.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import jwt

from recruit.config import get_settings

_private_key: str | None = None
_public_key: str | None = None


def _load_keys() -> tuple[str, str]:
    """Load RSA keys from disk (cached after first call)."""
    global _private_key, _public_key  # noqa: PLW0603
    if _private_key is None or _public_key is None:
        settings = get_settings()
        _private_key = Path(settings.jwt_private_key_path).read_text()
        _public_key = Path(settings.jwt_public_key_path).read_text()
    return _private_key, _public_key


def reset_keys() -> None:
    """Reset cached keys (useful for testing)."""
    global _private_key, _public_key  # noqa: PLW0603
    _private_key = None
    _public_key = None


def create_access_token(user_id: int, email: str, role: str = "recruit") -> str:
    """
    Create a signed access token.

    Args:
        user_id: The user's database ID.
        email: The user's email address.
        role: One of recruit, volunteer, admin.

    Returns:
        Encoded JWT string.
    """
    private_key, _ = _load_keys()
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_access_token_expire_minutes),
        "iss": settings.jwt_issuer,
        "type": "access",
    }
    return jwt.encode(payload, private_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, expected_type: str = "access") -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or of the wrong type.
    """
    _, public_key = _load_keys()
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            public_key,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    if payload.get("type") != expected_type:
        msg = f"Expected token type '{expected_type}', got '{payload.get('type')}'"
        raise jwt.InvalidTokenError(msg)

    return payload
