"""Redis fixed-window rate limiter adapter."""

from typing import Optional

from redis import asyncio as aioredis

from app.application.ports.rate_limiter import RateLimitDecision, RateLimiter


class RedisRateLimiter(RateLimiter):
    """Redis adapter sharing the fixed-window counters across processes."""

    KEY_PREFIX = "ratelimit:"

    def __init__(self, redis_url: str, max_requests: int, window_seconds: int) -> None:
        """
        Initialize Redis rate limiter.

        Args:
            redis_url: Redis connection URL
            max_requests: Requests allowed per key within one window
            window_seconds: Window length in seconds
        """
        self._redis_url = redis_url
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._client: Optional[aioredis.Redis] = None

    async def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = await aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    async def hit(self, key: str) -> RateLimitDecision:
        """
        Count one request; the first hit in a window starts the window's expiry.

        Args:
            key: Client identifier combined with the operation name

        Returns:
            Decision telling whether the request is within the limit
        """
        client = await self._get_client()
        redis_key = self._make_key(key)
        count = await client.incr(redis_key)
        if count == 1:
            await client.expire(redis_key, self._window_seconds)

        if count > self._max_requests:
            ttl = await client.ttl(redis_key)
            if ttl is None or ttl < 0:
                # Key lost its expiry; restart the window so the client is not locked out
                await client.expire(redis_key, self._window_seconds)
                ttl = self._window_seconds
            return RateLimitDecision(allowed=False, remaining=0, retry_after_seconds=max(1, ttl))

        return RateLimitDecision(allowed=True, remaining=self._max_requests - count)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            self._client = None
