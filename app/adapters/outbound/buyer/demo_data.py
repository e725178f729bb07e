"""Demo buyers loaded into the in-memory repository when SEED_DEMO_DATA is on."""

from datetime import timedelta

from app.domain.entities.buyer import Buyer, User, utc_now
from app.domain.value_objects.buyer_enums import (
    Bhk,
    BuyerStatus,
    City,
    PropertyType,
    Purpose,
    Source,
    Timeline,
)

DEMO_OWNER = User(id="1", name="Admin User", email="admin@example.com")


def demo_buyers(owner_id: str) -> list[Buyer]:
    """Build the demo buyers, spaced one hour apart so the default sort is stable."""
    now = utc_now()
    rows = [
        dict(
            full_name="John Doe",
            email="john.doe@example.com",
            phone="1234567890",
            city=City.CHANDIGARH,
            property_type=PropertyType.APARTMENT,
            bhk=Bhk.TWO,
            purpose=Purpose.BUY,
            budget_min=2000000,
            budget_max=3000000,
            timeline=Timeline.THREE_TO_SIX_MONTHS,
            source=Source.WEBSITE,
            status=BuyerStatus.NEW,
            notes="Looking for a 2BHK apartment in Chandigarh",
            tags=("Urgent", "Verified"),
        ),
        dict(
            full_name="Jane Smith",
            email="jane.smith@example.com",
            phone="9876543210",
            city=City.MOHALI,
            property_type=PropertyType.VILLA,
            bhk=Bhk.THREE,
            purpose=Purpose.BUY,
            budget_min=5000000,
            budget_max=7000000,
            timeline=Timeline.ZERO_TO_THREE_MONTHS,
            source=Source.REFERRAL,
            status=BuyerStatus.CONTACTED,
            notes="Interested in a 3BHK villa in Mohali",
            tags=("Serious", "Cash"),
        ),
        dict(
            full_name="Robert Johnson",
            email="robert.j@example.com",
            phone="8765432109",
            city=City.CHANDIGARH,
            property_type=PropertyType.APARTMENT,
            bhk=Bhk.ONE,
            purpose=Purpose.RENT,
            budget_min=15000,
            budget_max=25000,
            timeline=Timeline.ZERO_TO_THREE_MONTHS,
            source=Source.WEBSITE,
            status=BuyerStatus.QUALIFIED,
            notes="Looking for a 1BHK apartment in Chandigarh for rent",
            tags=("Urgent", "Ready to move"),
        ),
        dict(
            full_name="Priya Sharma",
            email="priya.s@example.com",
            phone="7654321098",
            city=City.PANCHKULA,
            property_type=PropertyType.PLOT,
            purpose=Purpose.BUY,
            budget_min=7000000,
            budget_max=10000000,
            timeline=Timeline.MORE_THAN_SIX_MONTHS,
            source=Source.CALL,
            status=BuyerStatus.NEW,
            notes="Looking for a residential plot in Panchkula",
            tags=("Budget buyer", "Family"),
        ),
    ]
    buyers = []
    for offset, row in enumerate(rows):
        stamp = now - timedelta(hours=offset)
        buyers.append(Buyer(owner_id=owner_id, created_at=stamp, updated_at=stamp, **row))
    return buyers
