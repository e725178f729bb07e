"""Buyer repository port."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Optional

from app.application.dtos.buyer import BuyerListCriteria, BuyerPage
from app.domain.entities.buyer import Buyer, BuyerHistoryEntry, User


class BuyerUnitOfWork(ABC):
    """Writes staged inside one transaction; applied all together or not at all."""

    @abstractmethod
    async def upsert_user(self, user: User) -> None:
        """
        Insert the user or refresh its email/name.

        Args:
            user: Authenticated user acting in this transaction
        """
        pass

    @abstractmethod
    async def insert(self, buyer: Buyer) -> None:
        """
        Insert a new buyer.

        Args:
            buyer: Buyer to insert; its owner must already exist
        """
        pass

    @abstractmethod
    async def update(self, buyer: Buyer, expected_version: Optional[int] = None) -> None:
        """
        Overwrite a stored buyer.

        Args:
            buyer: New state of the buyer
            expected_version: If given, the stored version must still equal it

        Raises:
            NotFound: If the buyer no longer exists
            Conflict: If the stored version moved on
        """
        pass

    @abstractmethod
    async def insert_history(self, entry: BuyerHistoryEntry) -> None:
        """
        Append a history entry.

        Args:
            entry: History entry for a buyer written in this or an earlier transaction
        """
        pass


class BuyerRepository(ABC):
    """Port interface for buyer persistence."""

    @abstractmethod
    async def get(self, buyer_id: str) -> Optional[Buyer]:
        """
        Get a buyer by id.

        Args:
            buyer_id: Buyer identifier

        Returns:
            Buyer entity, or None if not found
        """
        pass

    @abstractmethod
    async def list(self, criteria: BuyerListCriteria) -> BuyerPage:
        """
        List buyers matching the criteria.

        Args:
            criteria: Search, filter, sort and pagination criteria

        Returns:
            Page of buyers with the total number of matches
        """
        pass

    @abstractmethod
    async def list_history(self, buyer_id: str) -> list[BuyerHistoryEntry]:
        """
        List history entries of a buyer, newest first.

        Args:
            buyer_id: Buyer identifier

        Returns:
            History entries (empty if none)
        """
        pass

    @abstractmethod
    async def delete(self, buyer_id: str) -> bool:
        """
        Delete a buyer and, by cascade, its history.

        Args:
            buyer_id: Buyer identifier

        Returns:
            True if a buyer was deleted
        """
        pass

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[BuyerUnitOfWork]:
        """
        Open an all-or-nothing unit of work.

        Returns:
            Async context manager yielding a BuyerUnitOfWork; writes are applied on
            normal exit and discarded if the block raises
        """
        pass
