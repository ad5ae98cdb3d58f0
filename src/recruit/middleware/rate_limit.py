"""Redis-backed fixed-window rate limiting middleware."""

import time
from typing import Any

import structlog
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from recruit.redis_client import get_redis_optional

logger = structlog.get_logger()

_EXEMPT_PATHS = frozenset({"/health", "/ready", "/version"})

# Credential endpoints get a tighter budget than the rest of the API.
_AUTH_PREFIX = "/api/v1/auth/"
_AUTH_DIVISOR = 10


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limit requests per client IP using Redis counters.

    Requests pass through unthrottled when Redis is not configured or unreachable.
    """

    def __init__(self, app: Any, requests_per_window: int = 100, window_seconds: int = 60) -> None:  # noqa: ANN401
        super().__init__(app)
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds

    def _limit_for(self, path: str) -> tuple[str, int]:
        if path.startswith(_AUTH_PREFIX):
            return "auth", max(1, self.requests_per_window // _AUTH_DIVISOR)
        return "api", self.requests_per_window

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        redis = get_redis_optional()
        if path in _EXEMPT_PATHS or redis is None:
            return await call_next(request)

        group, limit = self._limit_for(path)
        client_ip = request.client.host if request.client else "unknown"
        window = int(time.time()) // self.window_seconds
        rate_key = f"ratelimit:{group}:{client_ip}:{window}"

        try:
            pipe = redis.pipeline()
            pipe.incr(rate_key)
            pipe.expire(rate_key, self.window_seconds + 1)
            results: list[Any] = await pipe.execute()
        except RedisError:
            logger.warning("rate_limit_unavailable", exc_info=True)
            return await call_next(request)

        current_count: int = results[0]
        if current_count > limit:
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Try again later."},
                headers={
                    "Retry-After": str(self.window_seconds),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Limit": str(limit),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(max(0, limit - current_count))
        response.headers["X-RateLimit-Limit"] = str(limit)
        return response
