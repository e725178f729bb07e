"""Dependency injection factory functions."""

from app.adapters.outbound.buyer import InMemoryBuyerRepository, PostgresBuyerRepository
from app.adapters.outbound.buyer.demo_data import DEMO_OWNER, demo_buyers
from app.adapters.outbound.rate_limit.in_memory_rate_limiter import InMemoryRateLimiter
from app.adapters.outbound.rate_limit.noop_rate_limiter import NoOpRateLimiter
from app.adapters.outbound.rate_limit.redis_rate_limiter import RedisRateLimiter
from app.adapters.outbound.tabular.csv_buyer_codec import CsvBuyerCodec
from app.application.ports.buyer_repository import BuyerRepository
from app.application.ports.buyer_tabular_codec import BuyerTabularCodec
from app.application.ports.rate_limiter import RateLimiter
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import log_event


def create_buyer_repository() -> BuyerRepository:
    """
    Factory function to create buyer repository.

    Returns:
        BuyerRepository instance
    """
    if settings.buyer_repository == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when BUYER_REPOSITORY=postgres")
        return PostgresBuyerRepository()

    repository = InMemoryBuyerRepository()
    if settings.seed_demo_data:
        count = repository.seed(DEMO_OWNER, demo_buyers(DEMO_OWNER.id))
        log_event("wiring", "seeded_demo_data", count=count)
    return repository


def create_rate_limiter() -> RateLimiter:
    """
    Factory function to create rate limiter.

    Returns:
        RateLimiter instance (in-memory, Redis or NoOp)
    """
    if not settings.rate_limit_enabled:
        return NoOpRateLimiter()

    if settings.rate_limiter == "redis":
        if not settings.redis_url:
            raise ValueError("REDIS_URL is required when RATE_LIMITER=redis")
        return RedisRateLimiter(
            settings.redis_url,
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_duration_seconds,
        )

    return InMemoryRateLimiter(
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_duration_seconds,
    )


def create_tabular_codec() -> BuyerTabularCodec:
    """
    Factory function to create the import/export codec.

    Returns:
        BuyerTabularCodec instance
    """
    return CsvBuyerCodec()
