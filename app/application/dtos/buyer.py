"""Buyer DTOs."""

import math
from dataclasses import dataclass, field
from typing import Literal, Optional

from pydantic import ConfigDict, Field

from app.application.dtos.base import DTO
from app.domain.entities.buyer import Buyer, BuyerHistoryEntry

SortField = Literal["updatedAt", "fullName", "city", "propertyType", "status", "timeline"]
SortOrder = Literal["asc", "desc"]


class BuyerListCriteria(DTO):
    """Search, filter, sort and pagination criteria for the buyer collection."""

    search: Optional[str] = None
    city: Optional[str] = None
    property_type: Optional[str] = Field(default=None, alias="propertyType")
    status: Optional[str] = None
    timeline: Optional[str] = None
    sort: SortField = "updatedAt"
    order: SortOrder = "desc"
    page: int = Field(default=1, ge=1)
    # None means unpaginated (export)
    limit: Optional[int] = Field(default=10, ge=1)

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "search": "doe",
                "city": "Chandigarh",
                "propertyType": "Apartment",
                "status": "New",
                "sort": "updatedAt",
                "order": "desc",
                "page": 1,
                "limit": 10,
            }
        },
    )

    def unpaginated(self) -> "BuyerListCriteria":
        """Same criteria without pagination, for bulk export."""
        return self.model_copy(update={"page": 1, "limit": None})


@dataclass(frozen=True)
class BuyerPage:
    """One page of buyers plus total-count metadata."""

    items: list[Buyer]
    total: int
    page: int
    limit: Optional[int]

    @property
    def total_pages(self) -> int:
        if not self.limit:
            return 1 if self.total else 0
        return math.ceil(self.total / self.limit)


@dataclass(frozen=True)
class BuyerDetail:
    """A buyer together with its audit trail, newest entry first."""

    buyer: Buyer
    history: list[BuyerHistoryEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ImportResult:
    count: int
    buyer_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CsvExport:
    filename: str
    content: bytes
    count: int
