"""Rate limiter port."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of counting one request against a window."""

    allowed: bool
    remaining: int
    retry_after_seconds: int = 0


class RateLimiter(ABC):
    """Port interface for a fixed-window request counter."""

    @abstractmethod
    async def hit(self, key: str) -> RateLimitDecision:
        """
        Count one request for a key.

        Args:
            key: Client identifier combined with the operation name

        Returns:
            Decision telling whether the request is within the limit
        """
        pass
