"""Unit tests for the buyer entity and ownership policy."""

from datetime import datetime, timezone

import pytest

from app.domain.errors import Forbidden
from app.domain.services.ownership import can_modify, ensure_can_modify
from app.domain.value_objects.buyer_enums import BuyerStatus


def test_with_changes_applies_editable_fields_only(make_buyer):
    buyer = make_buyer()

    changed = buyer.with_changes({"status": BuyerStatus.VISITED, "tags": ["a"], "owner_id": "x", "id": "y"})

    assert changed.status == BuyerStatus.VISITED
    assert changed.tags == ("a",)
    assert changed.owner_id == buyer.owner_id
    assert changed.id == buyer.id
    assert buyer.status == BuyerStatus.NEW


def test_touched_bumps_version_and_timestamp(make_buyer):
    buyer = make_buyer()
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)

    touched = buyer.touched(now)

    assert touched.version == buyer.version + 1
    assert touched.updated_at == now
    assert touched.created_at == buyer.created_at


def test_owner_and_admin_can_modify(make_buyer, owner, admin, other_user):
    buyer = make_buyer()

    assert can_modify(buyer, owner, admin.id)
    assert can_modify(buyer, admin, admin.id)
    assert not can_modify(buyer, other_user, admin.id)


def test_admin_bypass_disabled_when_unset(make_buyer, admin):
    assert not can_modify(make_buyer(), admin, "")


def test_ensure_can_modify_raises_forbidden(make_buyer, other_user):
    with pytest.raises(Forbidden):
        ensure_can_modify(make_buyer(), other_user, "1")
