"""Buyer, history entry and user entities."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from app.domain.value_objects.buyer_enums import (
    Bhk,
    BuyerStatus,
    City,
    PropertyType,
    Purpose,
    Source,
    Timeline,
)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate an opaque record identifier."""
    return str(uuid4())


# Fields a client may change. Identity, ownership and system fields are excluded.
EDITABLE_FIELDS: tuple[str, ...] = (
    "full_name",
    "email",
    "phone",
    "city",
    "property_type",
    "bhk",
    "purpose",
    "budget_min",
    "budget_max",
    "timeline",
    "source",
    "status",
    "notes",
    "tags",
)


@dataclass(frozen=True)
class User:
    """Authenticated user as reported by the session provider."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class Buyer:
    """Buyer lead entity."""

    full_name: str
    phone: str
    city: City
    property_type: PropertyType
    purpose: Purpose
    timeline: Timeline
    source: Source
    owner_id: str
    status: BuyerStatus = BuyerStatus.NEW
    email: Optional[str] = None
    bhk: Optional[Bhk] = None
    budget_min: Optional[int] = None
    budget_max: Optional[int] = None
    notes: Optional[str] = None
    tags: tuple[str, ...] = ()
    id: str = field(default_factory=new_id)
    version: int = 1
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def editable_values(self) -> dict[str, Any]:
        """Return the client-editable fields as a dictionary."""
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}

    def with_changes(self, changes: dict[str, Any]) -> "Buyer":
        """
        Reconcile a set of field changes onto this buyer, field by field.

        Only editable fields are taken from ``changes``; anything else is ignored.

        Args:
            changes: Mapping of snake_case field name to new value

        Returns:
            New Buyer instance with the changes applied (system fields untouched)
        """
        accepted = {name: changes[name] for name in EDITABLE_FIELDS if name in changes}
        if "tags" in accepted:
            accepted["tags"] = tuple(accepted["tags"] or ())
        return replace(self, **accepted)

    def touched(self, now: Optional[datetime] = None) -> "Buyer":
        """Return a copy stamped as written: fresh updated_at and bumped version."""
        return replace(self, updated_at=now or utc_now(), version=self.version + 1)


@dataclass(frozen=True)
class BuyerHistoryEntry:
    """Immutable audit record of one accepted write."""

    buyer_id: str
    changed_by_id: str
    diff: dict[str, Any]
    id: str = field(default_factory=new_id)
    changed_at: datetime = field(default_factory=utc_now)


