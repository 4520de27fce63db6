"""Rate limiting middleware using Redis.

Sliding-window limits per caller: per user when a valid bearer token is
presented, per client IP otherwise. The public auth endpoints get much
tighter windows to slow down password guessing and phone enumeration.
"""

import logging
import time
from typing import Callable, Optional

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from app.auth.jwt import decode_token
from app.config import settings
from app.middleware.exceptions import create_error_response
from app.utils.redis_client import get_redis

logger = logging.getLogger(__name__)

# path prefix -> (requests, window seconds)
AUTH_LIMITS: dict[str, tuple[int, int]] = {
    "/api/auth/login": (5, 60),
    "/api/auth/register": (3, 300),
    "/api/auth/check-phone": (10, 60),
}


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware with Redis backend."""

    def __init__(
        self,
        app,
        default_limit: int = 100,  # requests
        authenticated_limit: int = 500,
        default_window: int = 60,  # seconds
        exempt_paths: Optional[list[str]] = None,
        custom_limits: Optional[dict[str, tuple[int, int]]] = None,
    ):
        super().__init__(app)
        self.default_limit = default_limit
        self.authenticated_limit = authenticated_limit
        self.default_window = default_window
        self.exempt_paths = exempt_paths or ["/health", "/docs", "/openapi.json"]
        self.custom_limits = AUTH_LIMITS if custom_limits is None else custom_limits

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not settings.rate_limit_enabled:
            return await call_next(request)
        if any(request.url.path.startswith(path) for path in self.exempt_paths):
            return await call_next(request)

        key, authenticated = self._get_rate_limit_key(request)
        limit, window = self._get_limit_for_path(request.url.path, authenticated)
        allowed, remaining, reset_time = await self._check_rate_limit(
            f"{key}:{request.url.path}" if request.url.path in self.custom_limits else key,
            limit,
            window,
        )

        if not allowed:
            retry_after = max(int(reset_time - time.time()), 1)
            return create_error_response(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                message=f"Too many requests. Try again in {retry_after} seconds.",
                error_code="RATE_LIMITED",
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(int(reset_time)),
                    "Retry-After": str(retry_after),
                },
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        response.headers["X-RateLimit-Reset"] = str(int(reset_time))

        return response

    def _get_limit_for_path(self, path: str, authenticated: bool) -> tuple[int, int]:
        for pattern, (limit, window) in self.custom_limits.items():
            if path.startswith(pattern):
                return limit, window
        if authenticated:
            return self.authenticated_limit, self.default_window
        return self.default_limit, self.default_window

    def _get_rate_limit_key(self, request: Request) -> tuple[str, bool]:
        """(key, authenticated): user ID from a valid token, else client IP."""
        auth_header = request.headers.get("authorization", "")
        if auth_header.startswith("Bearer "):
            user_id = decode_token(auth_header[7:]).get("sub")
            if user_id:
                return f"user:{user_id}", True

        return f"ip:{self._client_ip(request)}", False

    @staticmethod
    def _client_ip(request: Request) -> str:
        """Socket peer, or the hop recorded by the outermost trusted proxy.

        Each trusted proxy appends the address it saw, so with N of them
        the client is the N-th entry from the right. Anything further left
        came from the client and is ignored.
        """
        peer = request.client.host if request.client else "unknown"
        trusted = settings.trusted_proxy_count
        if trusted <= 0:
            return peer

        forwarded = request.headers.get("x-forwarded-for", "")
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        if len(hops) < trusted:
            return peer
        return hops[-trusted]

    async def _check_rate_limit(
        self, key: str, limit: int, window: int
    ) -> tuple[bool, int, float]:
        """Sliding window check.

        Returns:
            (allowed, remaining, reset_time)
        """
        current_time = time.time()
        window_start = current_time - window
        redis_key = f"ratelimit:{key}"

        try:
            redis_client = await get_redis()
            await redis_client.zremrangebyscore(redis_key, 0, window_start)
            count = await redis_client.zcard(redis_key)

            if count >= limit:
                oldest = await redis_client.zrange(redis_key, 0, 0, withscores=True)
                reset_time = oldest[0][1] + window if oldest else current_time + window
                return False, 0, reset_time

            await redis_client.zadd(redis_key, {str(current_time): current_time})
            await redis_client.expire(redis_key, window)

            return True, limit - count - 1, current_time + window

        except Exception as e:
            # Fail open: a Redis outage must not take the API down
            logger.error(f"Rate limit check failed: {e}")
            return True, limit, current_time + window
