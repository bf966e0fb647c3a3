"""Unit tests for the Redis sliding-window rate limiter."""

import time
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from flashgen.core.config import settings
from flashgen.core.dependencies import RedisManager
from flashgen.core.exceptions import RateLimitError
from flashgen.core.rate_limit import RATE_LIMIT_MESSAGE, RedisRateLimiter, rate_limit


@pytest.fixture
def mock_redis(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Redis client whose pipeline reports a configurable window count."""
    redis = MagicMock()
    pipeline = MagicMock()
    pipeline.execute = AsyncMock(return_value=[0, 0, 1, True])
    redis.pipeline.return_value = pipeline
    redis.zrange = AsyncMock(return_value=[])
    monkeypatch.setattr(RedisManager, "get_client", AsyncMock(return_value=redis))
    return redis


def _set_window_count(redis: MagicMock, count: int) -> None:
    redis.pipeline.return_value.execute.return_value = [0, count, 1, True]


@pytest.mark.asyncio
class TestRedisRateLimiter:
    """Tests for RedisRateLimiter.is_allowed."""

    async def test_allows_under_limit(self, mock_redis: MagicMock):
        limiter = RedisRateLimiter("generation", limit=3, window_seconds=60)
        _set_window_count(mock_redis, 2)

        allowed, retry_after = await limiter.is_allowed("user-1")

        assert allowed is True
        assert retry_after == 0
        pipeline = mock_redis.pipeline.return_value
        key = pipeline.zcard.call_args.args[0]
        assert key == "rate_limit:generation:user-1"
        pipeline.expire.assert_called_once_with(key, 60)

    async def test_each_request_gets_unique_member(self, mock_redis: MagicMock):
        limiter = RedisRateLimiter("generation", limit=10, window_seconds=60)

        await limiter.is_allowed("user-1")
        await limiter.is_allowed("user-1")

        zadd_calls = mock_redis.pipeline.return_value.zadd.call_args_list
        first_member = next(iter(zadd_calls[0].args[1]))
        second_member = next(iter(zadd_calls[1].args[1]))
        assert first_member != second_member

    async def test_denies_at_limit_with_retry_after(self, mock_redis: MagicMock):
        limiter = RedisRateLimiter("generation", limit=3, window_seconds=60)
        _set_window_count(mock_redis, 3)
        mock_redis.zrange.return_value = [("oldest", time.time() - 20)]

        allowed, retry_after = await limiter.is_allowed("user-1")

        assert allowed is False
        assert 1 <= retry_after <= 40

    async def test_retry_after_is_at_least_one_second(self, mock_redis: MagicMock):
        limiter = RedisRateLimiter("generation", limit=1, window_seconds=60)
        _set_window_count(mock_redis, 5)
        mock_redis.zrange.return_value = [("oldest", time.time() - 600)]

        allowed, retry_after = await limiter.is_allowed("user-1")

        assert allowed is False
        assert retry_after == 1

    async def test_denies_with_full_window_when_no_entries(self, mock_redis: MagicMock):
        limiter = RedisRateLimiter("generation", limit=1, window_seconds=90)
        _set_window_count(mock_redis, 1)

        assert await limiter.is_allowed("user-1") == (False, 90)


@pytest.mark.asyncio
class TestRateLimitDecorator:
    """Tests for the rate_limit decorator."""

    async def test_disabled_skips_limiter(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings.rate_limit, "enabled", False)
        limiter = MagicMock(spec=RedisRateLimiter)
        limiter.is_allowed = AsyncMock()

        @rate_limit(limiter)
        async def endpoint(user_id):
            return "ok"

        assert await endpoint(user_id=uuid4()) == "ok"
        limiter.is_allowed.assert_not_called()

    async def test_keyed_by_user_id(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings.rate_limit, "enabled", True)
        limiter = MagicMock(spec=RedisRateLimiter)
        limiter.is_allowed = AsyncMock(return_value=(True, 0))
        user_id = uuid4()

        @rate_limit(limiter)
        async def endpoint(user_id):
            return "ok"

        assert await endpoint(user_id=user_id) == "ok"
        limiter.is_allowed.assert_awaited_once_with(str(user_id))

    async def test_falls_back_to_client_host(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings.rate_limit, "enabled", True)
        limiter = MagicMock(spec=RedisRateLimiter)
        limiter.is_allowed = AsyncMock(return_value=(True, 0))
        request = MagicMock()
        request.client.host = "10.0.0.7"

        @rate_limit(limiter)
        async def endpoint(request):
            return "ok"

        await endpoint(request=request)

        limiter.is_allowed.assert_awaited_once_with("10.0.0.7")

    async def test_exceeded_raises(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings.rate_limit, "enabled", True)
        limiter = MagicMock(spec=RedisRateLimiter)
        limiter.key_prefix = "generation"
        limiter.is_allowed = AsyncMock(return_value=(False, 120))
        called = False

        @rate_limit(limiter)
        async def endpoint(user_id):
            nonlocal called
            called = True

        with pytest.raises(RateLimitError) as exc_info:
            await endpoint(user_id=uuid4())

        assert exc_info.value.retry_after == 120
        assert exc_info.value.message == RATE_LIMIT_MESSAGE
        assert called is False
