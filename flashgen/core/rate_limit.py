"""Redis-based rate limiting for API endpoints.

This module provides rate limiting using Redis sliding window algorithm.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from fastapi import Request

from flashgen.core.config import settings
from flashgen.core.dependencies import RedisManager
from flashgen.core.exceptions import RateLimitError
from flashgen.core.logging import get_structured_logger

P = ParamSpec("P")
R = TypeVar("R")

logger = get_structured_logger(__name__)

RATE_LIMIT_MESSAGE = "You've reached the generation rate limit. Please try again later."


class RedisRateLimiter:
    """Redis-based sliding window rate limiter.

    Uses sorted sets to implement a sliding window rate limiting algorithm.

    Attributes:
        key_prefix: Prefix for Redis keys.
        limit: Maximum number of requests allowed in the window.
        window_seconds: Size of the sliding window in seconds.
    """

    PREFIX = "rate_limit:"

    def __init__(
        self,
        key_prefix: str,
        limit: int,
        window_seconds: int,
    ) -> None:
        self.key_prefix = key_prefix
        self.limit = limit
        self.window_seconds = window_seconds

    async def is_allowed(self, identifier: str) -> tuple[bool, int]:
        """Check if request is allowed and record it.

        Args:
            identifier: Unique identifier for the client (user_id or IP).

        Returns:
            Tuple of (is_allowed, retry_after_seconds).
        """
        redis = await RedisManager.get_client()
        key = f"{self.PREFIX}{self.key_prefix}:{identifier}"

        now = time.time()
        window_start = now - self.window_seconds

        pipe = redis.pipeline()
        # Remove old entries outside the window
        pipe.zremrangebyscore(key, 0, window_start)
        # Count current entries in window
        pipe.zcard(key)
        # Unique member so requests within the same second are all counted
        pipe.zadd(key, {f"{now}:{uuid.uuid4().hex}": now})
        pipe.expire(key, self.window_seconds)

        results = await pipe.execute()
        count = results[1]

        if count >= self.limit:
            oldest = await redis.zrange(key, 0, 0, withscores=True)
            if oldest:
                oldest_time = float(oldest[0][1])
                retry_after = int(oldest_time + self.window_seconds - now)
                return False, max(retry_after, 1)
            return False, self.window_seconds

        return True, 0


GENERATION_LIMITER = RedisRateLimiter(
    key_prefix="generation",
    limit=settings.rate_limit.generation_limit,
    window_seconds=settings.rate_limit.window_seconds,
)


def rate_limit(
    limiter: RedisRateLimiter,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator for rate-limited endpoints.

    The wrapped endpoint must accept ``user_id`` or ``request`` as keyword
    arguments; FastAPI always passes endpoint parameters by keyword.

    Raises:
        RateLimitError: 429 Too Many Requests when rate limit exceeded.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if not settings.rate_limit.enabled:
                return await func(*args, **kwargs)

            user_id = kwargs.get("user_id")
            request: Request | None = kwargs.get("request")  # type: ignore[assignment]
            if user_id:
                identifier = str(user_id)
            elif request and request.client:
                identifier = request.client.host
            else:
                identifier = "unknown"

            allowed, retry_after = await limiter.is_allowed(identifier)

            if not allowed:
                logger.warning(
                    "Rate limit exceeded",
                    limiter=limiter.key_prefix,
                    identifier=identifier,
                    retry_after=retry_after,
                )
                raise RateLimitError(RATE_LIMIT_MESSAGE, retry_after=retry_after)

            return await func(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "RedisRateLimiter",
    "GENERATION_LIMITER",
    "rate_limit",
]
