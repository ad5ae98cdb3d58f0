"""FastAPI authentication dependencies.

The authenticated `User` row is the per-request session object; handlers
receive it explicitly instead of reading ambient state.
"""

from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.auth.jwt import verify_token
from recruit.auth.service import get_user_by_id
from recruit.database import get_session
from recruit.db.models import User

_bearer = HTTPBearer()
_optional_bearer = HTTPBearer(auto_error=False)


async def _resolve_user(token: str, db: AsyncSession) -> User:
    try:
        payload = verify_token(token, expected_type="access")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    user = await get_user_by_id(db, int(payload["sub"]))
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    if user.is_banned:
        raise HTTPException(status_code=403, detail="Account is banned")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> User:
    """Extract and verify the bearer JWT. Raises 401/403 on failure."""
    return await _resolve_user(credentials.credentials, db)


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Security(_optional_bearer),
    db: AsyncSession = Depends(get_session),
) -> User | None:
    """Like get_current_user, but anonymous callers get None instead of 401."""
    if credentials is None:
        return None
    try:
        return await _resolve_user(credentials.credentials, db)
    except HTTPException:
        return None


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Allow only admin users."""
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
