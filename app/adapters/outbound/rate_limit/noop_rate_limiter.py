"""No-op rate limiter adapter for when rate limiting is disabled."""

from app.application.ports.rate_limiter import RateLimitDecision, RateLimiter


class NoOpRateLimiter(RateLimiter):
    """No-op adapter that allows every request."""

    async def hit(self, key: str) -> RateLimitDecision:
        """
        Always allow.

        Args:
            key: Rate limit key (ignored)

        Returns:
            Decision allowing the request
        """
        return RateLimitDecision(allowed=True, remaining=0)
