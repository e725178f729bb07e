"""Buyer repository adapters."""

from app.adapters.outbound.buyer.in_memory_buyer_repository import InMemoryBuyerRepository
from app.adapters.outbound.buyer.postgres_buyer_repository import PostgresBuyerRepository

__all__ = [
    "InMemoryBuyerRepository",
    "PostgresBuyerRepository",
]
