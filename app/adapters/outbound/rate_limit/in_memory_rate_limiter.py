"""In-memory fixed-window rate limiter adapter."""

import math
import time
from typing import Callable

from app.application.ports.rate_limiter import RateLimitDecision, RateLimiter


class InMemoryRateLimiter(RateLimiter):
    """Process-local fixed-window counter per key."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize in-memory rate limiter.

        Args:
            max_requests: Requests allowed per key within one window
            window_seconds: Window length in seconds
            clock: Monotonic time source (injectable for tests)
        """
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        # key -> (window start, count)
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_sweep = clock()

    def _sweep(self, now: float) -> None:
        """Drop windows that have expired, at most once per window length."""
        if now - self._last_sweep < self._window_seconds:
            return
        self._last_sweep = now
        expired = [
            key for key, (started, _) in self._windows.items() if now - started >= self._window_seconds
        ]
        for key in expired:
            del self._windows[key]

    async def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        self._sweep(now)
        started, count = self._windows.get(key, (now, 0))
        if now - started >= self._window_seconds:
            started, count = now, 0

        if count >= self._max_requests:
            retry_after = max(1, math.ceil(started + self._window_seconds - now))
            return RateLimitDecision(allowed=False, remaining=0, retry_after_seconds=retry_after)

        count += 1
        self._windows[key] = (started, count)
        return RateLimitDecision(allowed=True, remaining=self._max_requests - count)
