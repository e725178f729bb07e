"""Enumerated buyer attributes."""

from enum import Enum


class City(str, Enum):
    """City the buyer is looking in."""

    CHANDIGARH = "Chandigarh"
    MOHALI = "Mohali"
    ZIRAKPUR = "Zirakpur"
    PANCHKULA = "Panchkula"
    OTHER = "Other"


class PropertyType(str, Enum):
    """Kind of property the buyer wants."""

    APARTMENT = "Apartment"
    VILLA = "Villa"
    PLOT = "Plot"
    OFFICE = "Office"
    RETAIL = "Retail"

    @property
    def requires_bhk(self) -> bool:
        """Whether a BHK size must be given for this property type."""
        return self in (PropertyType.APARTMENT, PropertyType.VILLA)


class Bhk(str, Enum):
    """Bedroom/hall/kitchen size."""

    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    STUDIO = "Studio"


class Purpose(str, Enum):
    BUY = "Buy"
    RENT = "Rent"


class Timeline(str, Enum):
    """Expected purchase timeline."""

    ZERO_TO_THREE_MONTHS = "0-3m"
    THREE_TO_SIX_MONTHS = "3-6m"
    MORE_THAN_SIX_MONTHS = ">6m"
    EXPLORING = "Exploring"


class Source(str, Enum):
    WEBSITE = "Website"
    REFERRAL = "Referral"
    WALK_IN = "Walk-in"
    CALL = "Call"
    OTHER = "Other"


class BuyerStatus(str, Enum):
    """Pipeline status of a lead."""

    NEW = "New"
    QUALIFIED = "Qualified"
    CONTACTED = "Contacted"
    VISITED = "Visited"
    NEGOTIATION = "Negotiation"
    CONVERTED = "Converted"
    DROPPED = "Dropped"
