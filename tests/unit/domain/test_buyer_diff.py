"""Unit tests for buyer field diffing."""

from datetime import datetime, timezone

from app.domain.services.buyer_diff import created_marker, diff_buyer, imported_marker, snapshot
from app.domain.value_objects.buyer_enums import Bhk, BuyerStatus, PropertyType


def test_diff_contains_only_changed_fields(make_buyer):
    existing = make_buyer(notes="old note")

    diff = diff_buyer(
        existing,
        {"full_name": "Test User", "notes": "new note", "status": BuyerStatus.QUALIFIED},
    )

    assert diff == {
        "notes": {"old": "old note", "new": "new note"},
        "status": {"old": "New", "new": "Qualified"},
    }


def test_diff_is_empty_when_nothing_changes(make_buyer):
    existing = make_buyer(tags=("Urgent",))

    assert diff_buyer(existing, existing.editable_values()) == {}


def test_diff_ignores_system_fields(make_buyer):
    existing = make_buyer()

    diff = diff_buyer(
        existing,
        {"id": "other", "owner_id": "someone", "updated_at": datetime.now(timezone.utc), "version": 7},
    )

    assert diff == {}


def test_diff_uses_camel_case_keys_and_plain_values(make_buyer):
    existing = make_buyer()

    diff = diff_buyer(
        existing,
        {"property_type": PropertyType.APARTMENT, "bhk": Bhk.TWO, "budget_max": 5000000},
    )

    assert diff == {
        "propertyType": {"old": "Plot", "new": "Apartment"},
        "bhk": {"old": None, "new": "2"},
        "budgetMax": {"old": None, "new": 5000000},
    }


def test_diff_treats_missing_and_empty_tags_alike(make_buyer):
    existing = make_buyer(tags=())

    assert diff_buyer(existing, {"tags": None}) == {}
    assert diff_buyer(existing, {"tags": ["Cash"]}) == {"tags": {"old": [], "new": ["Cash"]}}


def test_snapshot_and_markers(make_buyer):
    buyer = make_buyer(tags=("Urgent",))

    data = snapshot(buyer)

    assert data["fullName"] == "Test User"
    assert data["ownerId"] == buyer.owner_id
    assert data["tags"] == ["Urgent"]
    assert data["updatedAt"] == buyer.updated_at.isoformat()
    assert created_marker(buyer) == {"action": "created", "data": data}
    assert imported_marker(buyer)["action"] == "imported"


def test_diff_ignores_tag_reordering(make_buyer):
    existing = make_buyer(tags=("Urgent", "Cash"))

    assert diff_buyer(existing, {"tags": ("Cash", "Urgent")}) == {}
    assert diff_buyer(existing, {"tags": ("Cash",)}) == {
        "tags": {"old": ["Urgent", "Cash"], "new": ["Cash"]}
    }
