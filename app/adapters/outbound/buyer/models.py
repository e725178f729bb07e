"""SQLAlchemy ORM models for buyers, their history and users."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=True, index=True)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)


class BuyerModel(Base):
    """SQLAlchemy model for buyers table."""

    __tablename__ = "buyers"

    id = Column(String(36), primary_key=True)
    full_name = Column(String(80), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(15), nullable=False)
    city = Column(String(50), nullable=False)
    property_type = Column(String(50), nullable=False)
    bhk = Column(String(10), nullable=True)
    purpose = Column(String(10), nullable=False)
    budget_min = Column(Integer, nullable=True)
    budget_max = Column(Integer, nullable=True)
    timeline = Column(String(10), nullable=False)
    source = Column(String(50), nullable=False)
    status = Column(String(50), nullable=False, default="New")
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now, index=True)


class BuyerHistoryModel(Base):
    """SQLAlchemy model for buyer_history table."""

    __tablename__ = "buyer_history"

    id = Column(String(36), primary_key=True)
    buyer_id = Column(
        String(36),
        ForeignKey("buyers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    changed_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    changed_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
    diff = Column(JSON, nullable=False)
