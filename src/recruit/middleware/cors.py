"""CORS middleware configuration."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recruit.config import Settings


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow the recruitment site and admin dashboard origins."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-Id", "X-Chat-Session"],
        expose_headers=["X-Request-Id", "X-Chat-Session", "X-RateLimit-Remaining", "X-RateLimit-Limit", "Retry-After"],
    )
