"""Shared fixtures for buyer tests."""

from datetime import datetime, timedelta, timezone

import pytest

from app.adapters.outbound.buyer.in_memory_buyer_repository import InMemoryBuyerRepository
from app.domain.entities.buyer import Buyer, User
from app.domain.value_objects.buyer_enums import (
    City,
    PropertyType,
    Purpose,
    Source,
    Timeline,
)

ADMIN_USER_ID = "1"


@pytest.fixture
def owner():
    """User owning the stored buyers."""
    return User(id="owner-1", email="owner@example.com", name="Owner One")


@pytest.fixture
def other_user():
    """Signed-in user who owns nothing."""
    return User(id="user-2", email="other@example.com", name="Other User")


@pytest.fixture
def admin():
    """The administrative account."""
    return User(id=ADMIN_USER_ID, email="admin@example.com", name="Admin User")


@pytest.fixture
def make_payload():
    """Factory for a valid camelCase create payload (a Plot, so no BHK needed)."""

    def _make(**overrides):
        payload = {
            "fullName": "Test User",
            "phone": "9876543210",
            "city": "Chandigarh",
            "propertyType": "Plot",
            "purpose": "Buy",
            "timeline": "0-3m",
            "source": "Website",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def make_buyer(owner):
    """Factory for a stored Buyer entity."""

    def _make(**overrides):
        stamp = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        fields = {
            "full_name": "Test User",
            "phone": "9876543210",
            "city": City.CHANDIGARH,
            "property_type": PropertyType.PLOT,
            "purpose": Purpose.BUY,
            "timeline": Timeline.ZERO_TO_THREE_MONTHS,
            "source": Source.WEBSITE,
            "owner_id": owner.id,
            "created_at": stamp - timedelta(days=1),
            "updated_at": stamp,
        }
        fields.update(overrides)
        return Buyer(**fields)

    return _make


@pytest.fixture
def repository():
    """Empty in-memory buyer repository."""
    return InMemoryBuyerRepository()
