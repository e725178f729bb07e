"""Field-level change diffing for buyer records."""

from enum import Enum
from typing import Any

from app.domain.entities.buyer import EDITABLE_FIELDS, Buyer

# snake_case attribute -> camelCase key used in history payloads and the API
FIELD_KEYS: dict[str, str] = {
    "id": "id",
    "full_name": "fullName",
    "email": "email",
    "phone": "phone",
    "city": "city",
    "property_type": "propertyType",
    "bhk": "bhk",
    "purpose": "purpose",
    "budget_min": "budgetMin",
    "budget_max": "budgetMax",
    "timeline": "timeline",
    "source": "source",
    "status": "status",
    "notes": "notes",
    "tags": "tags",
    "owner_id": "ownerId",
    "version": "version",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def to_plain(value: Any) -> Any:
    """Convert a field value to a JSON-friendly form."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (tuple, list)):
        return [to_plain(item) for item in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def diff_buyer(existing: Buyer, proposed: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """
    Compute the minimal field-level diff between a stored buyer and proposed values.

    Only editable fields present in ``proposed`` are compared; identity, ownership,
    version and timestamps are never part of a diff. Tags are compared as a set,
    so reordering them alone is not a change.

    Args:
        existing: Stored buyer
        proposed: Mapping of snake_case field name to proposed value

    Returns:
        Mapping of camelCase field name to {"old": ..., "new": ...}; empty when
        nothing effectively changes
    """
    changes: dict[str, dict[str, Any]] = {}
    for name in EDITABLE_FIELDS:
        if name not in proposed:
            continue
        old = to_plain(getattr(existing, name))
        new = to_plain(proposed[name])
        if name == "tags":
            old = old or []
            new = new or []
            if set(old) == set(new):
                continue
        if old != new:
            changes[FIELD_KEYS[name]] = {"old": old, "new": new}
    return changes


def snapshot(buyer: Buyer) -> dict[str, Any]:
    """Full JSON-friendly snapshot of a buyer, keyed by camelCase field name."""
    return {key: to_plain(getattr(buyer, name)) for name, key in FIELD_KEYS.items()}


def created_marker(buyer: Buyer) -> dict[str, Any]:
    return {"action": "created", "data": snapshot(buyer)}


def imported_marker(buyer: Buyer) -> dict[str, Any]:
    return {"action": "imported", "data": snapshot(buyer)}
