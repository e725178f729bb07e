"""In-memory buyer repository adapter."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Optional

from app.application.dtos.buyer import BuyerListCriteria, BuyerPage
from app.application.ports.buyer_repository import BuyerRepository, BuyerUnitOfWork
from app.application.use_cases.list_buyers import filter_and_page
from app.domain.entities.buyer import Buyer, BuyerHistoryEntry, User
from app.domain.errors import Conflict, InternalError, NotFound
from app.domain.services.buyer_diff import created_marker


class _InMemoryUnitOfWork(BuyerUnitOfWork):
    """Stages writes against private copies; the repository swaps them in on success."""

    def __init__(self, repository: InMemoryBuyerRepository) -> None:
        self._users = dict(repository._users)
        self._buyers = dict(repository._buyers)
        self._history: list[BuyerHistoryEntry] = []

    async def upsert_user(self, user: User) -> None:
        self._users[user.id] = user

    async def insert(self, buyer: Buyer) -> None:
        if buyer.id in self._buyers:
            raise InternalError(f"Buyer {buyer.id} already exists")
        if buyer.owner_id not in self._users:
            raise InternalError(f"Owner {buyer.owner_id} does not exist")
        self._buyers[buyer.id] = buyer

    async def update(self, buyer: Buyer, expected_version: Optional[int] = None) -> None:
        stored = self._buyers.get(buyer.id)
        if stored is None:
            raise NotFound()
        if expected_version is not None and stored.version != expected_version:
            raise Conflict()
        self._buyers[buyer.id] = buyer

    async def insert_history(self, entry: BuyerHistoryEntry) -> None:
        if entry.buyer_id not in self._buyers:
            raise InternalError(f"Buyer {entry.buyer_id} does not exist")
        if entry.changed_by_id not in self._users:
            raise InternalError(f"User {entry.changed_by_id} does not exist")
        self._history.append(entry)


class InMemoryBuyerRepository(BuyerRepository):
    """In-memory implementation of buyer repository."""

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._users: dict[str, User] = {}
        self._buyers: dict[str, Buyer] = {}
        self._history: list[BuyerHistoryEntry] = []
        # Serializes transactions and deletes so a staged copy is never stale on swap
        self._lock = asyncio.Lock()

    async def get(self, buyer_id: str) -> Optional[Buyer]:
        return self._buyers.get(buyer_id)

    async def list(self, criteria: BuyerListCriteria) -> BuyerPage:
        return filter_and_page(self._buyers.values(), criteria)

    async def list_history(self, buyer_id: str) -> list[BuyerHistoryEntry]:
        # Entries are appended in commit order, so reversing gives newest first
        return [entry for entry in reversed(self._history) if entry.buyer_id == buyer_id]

    async def delete(self, buyer_id: str) -> bool:
        async with self._lock:
            if buyer_id not in self._buyers:
                return False
            self._buyers = {key: value for key, value in self._buyers.items() if key != buyer_id}
            self._history = [entry for entry in self._history if entry.buyer_id != buyer_id]
            return True

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[BuyerUnitOfWork]:
        async with self._lock:
            unit_of_work = _InMemoryUnitOfWork(self)
            yield unit_of_work
            # Reached only when the block did not raise
            self._users = unit_of_work._users
            self._buyers = unit_of_work._buyers
            self._history = self._history + unit_of_work._history

    def seed(self, owner: User, buyers: Iterable[Buyer]) -> int:
        """
        Load demo buyers owned by ``owner``, each with a "created" history entry.

        Args:
            owner: User the demo buyers belong to
            buyers: Buyers to load

        Returns:
            Number of buyers loaded
        """
        self._users[owner.id] = owner
        count = 0
        for buyer in buyers:
            buyer = replace(buyer, owner_id=owner.id)
            self._buyers[buyer.id] = buyer
            self._history.append(
                BuyerHistoryEntry(
                    buyer_id=buyer.id,
                    changed_by_id=owner.id,
                    diff=created_marker(buyer),
                    changed_at=buyer.created_at,
                )
            )
            count += 1
        return count
