"""List and export buyers use cases."""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from app.application.dtos.buyer import BuyerListCriteria, BuyerPage, CsvExport
from app.application.ports.buyer_repository import BuyerRepository
from app.application.ports.buyer_tabular_codec import BuyerTabularCodec
from app.domain.entities.buyer import Buyer, User
from app.domain.errors import Unauthorized
from app.infrastructure.logging.logger import log_event

# Sort key name -> Buyer attribute
SORT_ATTRIBUTES: dict[str, str] = {
    "updatedAt": "updated_at",
    "fullName": "full_name",
    "city": "city",
    "propertyType": "property_type",
    "status": "status",
    "timeline": "timeline",
}


def _plain(value: Any) -> Any:
    return getattr(value, "value", value)


def matches(buyer: Buyer, criteria: BuyerListCriteria) -> bool:
    """
    Check a buyer against the filter part of the criteria (all predicates AND-ed).

    Args:
        buyer: Buyer to check
        criteria: Criteria holding search text and exact-match filters

    Returns:
        True if the buyer satisfies every given predicate
    """
    if criteria.search:
        needle = criteria.search.lower()
        haystacks = (buyer.full_name, buyer.email or "", buyer.phone)
        if not any(needle in haystack.lower() for haystack in haystacks):
            return False

    exact_filters = (
        (criteria.city, buyer.city),
        (criteria.property_type, buyer.property_type),
        (criteria.status, buyer.status),
        (criteria.timeline, buyer.timeline),
    )
    for expected, actual in exact_filters:
        if expected and _plain(actual) != expected:
            return False
    return True


def sort_key(criteria: BuyerListCriteria) -> Callable[[Buyer], tuple]:
    """Key function ordering by the requested column, ties broken by id."""
    attribute = SORT_ATTRIBUTES[criteria.sort]
    return lambda buyer: (_plain(getattr(buyer, attribute)), buyer.id)


def filter_and_page(buyers: Iterable[Buyer], criteria: BuyerListCriteria) -> BuyerPage:
    """
    Apply search, filters, sort and pagination to an in-memory collection.

    Args:
        buyers: Candidate buyers
        criteria: Listing criteria; ``limit=None`` returns every match

    Returns:
        Requested page with the total number of matches
    """
    selected = [buyer for buyer in buyers if matches(buyer, criteria)]
    selected.sort(key=sort_key(criteria), reverse=criteria.order == "desc")
    total = len(selected)
    if criteria.limit is not None:
        offset = (criteria.page - 1) * criteria.limit
        selected = selected[offset : offset + criteria.limit]
    return BuyerPage(items=selected, total=total, page=criteria.page, limit=criteria.limit)


class ListBuyers:
    """Use case for paginated buyer listing."""

    def __init__(self, repository: BuyerRepository) -> None:
        self._repository = repository

    async def execute(self, user: Optional[User], criteria: BuyerListCriteria) -> BuyerPage:
        """
        List buyers matching the criteria.

        Args:
            user: Acting user, or None if unauthenticated
            criteria: Listing criteria

        Returns:
            Page of buyers

        Raises:
            Unauthorized: If no user is signed in
        """
        if user is None:
            raise Unauthorized()
        return await self._repository.list(criteria)


class ExportBuyers:
    """Use case for exporting every buyer that matches the criteria."""

    def __init__(self, repository: BuyerRepository, codec: BuyerTabularCodec) -> None:
        self._repository = repository
        self._codec = codec

    async def execute(
        self,
        user: Optional[User],
        criteria: BuyerListCriteria,
        today: Optional[datetime] = None,
    ) -> CsvExport:
        """
        Export matching buyers, ignoring pagination.

        Args:
            user: Acting user, or None if unauthenticated
            criteria: Listing criteria (page and limit are ignored)
            today: Date used to stamp the attachment filename (defaults to now, UTC)

        Returns:
            Encoded export with its attachment filename

        Raises:
            Unauthorized: If no user is signed in
        """
        if user is None:
            raise Unauthorized()

        page = await self._repository.list(criteria.unpaginated())
        stamp = (today or datetime.now(timezone.utc)).date().isoformat()
        log_event("export_buyers", "exported", actor_id=user.id, count=page.total)
        return CsvExport(
            filename=f"buyers-export-{stamp}.csv",
            content=self._codec.format(page.items),
            count=page.total,
        )
