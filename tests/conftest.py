"""Shared test fixtures.

Tests run against an in-memory SQLite database (one per test) with Redis
disabled, so every Redis-backed feature exercises its fallback path.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncGenerator

os.environ["RECRUIT_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RECRUIT_REDIS_URL"] = ""
os.environ["RECRUIT_LOG_FORMAT"] = "console"

import pytest_asyncio  # noqa: E402
from cryptography.hazmat.primitives import serialization  # noqa: E402
from cryptography.hazmat.primitives.asymmetric import rsa  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from recruit.auth.jwt import create_access_token, reset_keys  # noqa: E402
from recruit.auth.password import hash_password  # noqa: E402
from recruit.config import get_settings  # noqa: E402
from recruit.database import close_db, create_all, get_session, init_db  # noqa: E402
from recruit.db.models import User  # noqa: E402
from recruit.gamification.seed import seed_badges  # noqa: E402


def _ensure_test_keys() -> None:
    """Generate an RSA key pair for signing test tokens."""
    if os.environ.get("RECRUIT_JWT_PRIVATE_KEY_PATH"):
        return

    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    tmpdir = tempfile.mkdtemp(prefix="recruit_test_keys_")
    private_path = os.path.join(tmpdir, "jwt_private.pem")
    public_path = os.path.join(tmpdir, "jwt_public.pem")

    with open(private_path, "wb") as f:
        f.write(key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ))
    with open(public_path, "wb") as f:
        f.write(key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ))

    os.environ["RECRUIT_JWT_PRIVATE_KEY_PATH"] = private_path
    os.environ["RECRUIT_JWT_PUBLIC_KEY_PATH"] = public_path
    get_settings.cache_clear()
    reset_keys()


_ensure_test_keys()


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh in-memory schema with badge definitions seeded."""
    await init_db(get_settings().database_url)
    await create_all()
    async for session in get_session():
        await seed_badges(session)
        break
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for setup and assertions."""
    async for session in get_session():
        yield session
        break


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to a freshly created app."""
    from recruit.main import create_app

    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def make_user(
    db: AsyncSession,
    email: str = "recruit@example.com",
    display_name: str | None = "Recruit",
    role: str = "recruit",
    points: int = 0,
    **fields: object,
) -> User:
    """Insert a user directly, bypassing the ledger for the starting balance."""
    user = User(
        email=email,
        display_name=display_name,
        password_hash=hash_password("Deputy2024"),
        role=role,
        points=points,
        **fields,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role)}"}


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    return await make_user(db_session)


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await make_user(db_session, email="admin@example.com", display_name="Admin", role="admin")


@pytest_asyncio.fixture
async def make_recruit(db_session: AsyncSession):  # noqa: ANN201
    """Factory fixture: `await make_recruit(email=..., points=...)`."""

    async def _make(**kwargs: object) -> User:
        return await make_user(db_session, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest_asyncio.fixture
async def headers():  # noqa: ANN201
    """`headers(user)` builds bearer auth headers for a user."""
    return auth_headers
