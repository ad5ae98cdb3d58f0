"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from recruit.applicants.router import router as applicants_router
from recruit.auth.router import router as auth_router
from recruit.chat.router import router as chat_router
from recruit.checklist.router import router as checklist_router
from recruit.config import get_settings
from recruit.database import close_db, create_all, get_session, init_db
from recruit.donations.router import router as donations_router
from recruit.gamification.router import router as gamification_router
from recruit.gamification.seed import seed_badges
from recruit.health.router import router as health_router
from recruit.leaderboard.router import router as leaderboard_router
from recruit.middleware import setup_middleware
from recruit.points.router import router as points_router
from recruit.redis_client import close_redis, init_redis
from recruit.trivia.router import router as trivia_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.database_url.startswith("sqlite"):
        await create_all()
    if settings.redis_url:
        await init_redis(settings.redis_url)

    # Seed badge definitions (idempotent)
    try:
        async for db in get_session():
            await seed_badges(db)
            break
    except Exception:
        logger.warning("Badge seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Sheriff Recruitment API",
        description="Backend API for the Deputy Sheriff recruitment site: points, badges, trivia and chat",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(points_router)
    app.include_router(gamification_router)
    app.include_router(donations_router)
    app.include_router(leaderboard_router)
    app.include_router(trivia_router)
    app.include_router(chat_router)
    app.include_router(checklist_router)
    app.include_router(applicants_router)

    return app


app = create_app()
