"""Postgres-backed buyer repository adapter."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.dtos.buyer import BuyerListCriteria, BuyerPage
from app.application.ports.buyer_repository import BuyerRepository, BuyerUnitOfWork
from app.domain.entities.buyer import Buyer, BuyerHistoryEntry, User
from app.domain.errors import Conflict, InternalError, NotFound
from app.domain.value_objects.buyer_enums import (
    Bhk,
    BuyerStatus,
    City,
    PropertyType,
    Purpose,
    Source,
    Timeline,
)
from app.infrastructure.db import get_db_session
from app.infrastructure.logging.logger import logger

from .models import BuyerHistoryModel, BuyerModel, UserModel

_SORT_COLUMNS = {
    "updatedAt": BuyerModel.updated_at,
    "fullName": BuyerModel.full_name,
    "city": BuyerModel.city,
    "propertyType": BuyerModel.property_type,
    "status": BuyerModel.status,
    "timeline": BuyerModel.timeline,
}


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite returns naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _model_to_buyer(model: BuyerModel) -> Buyer:
    return Buyer(
        id=model.id,
        full_name=model.full_name,
        email=model.email,
        phone=model.phone,
        city=City(model.city),
        property_type=PropertyType(model.property_type),
        bhk=Bhk(model.bhk) if model.bhk else None,
        purpose=Purpose(model.purpose),
        budget_min=model.budget_min,
        budget_max=model.budget_max,
        timeline=Timeline(model.timeline),
        source=Source(model.source),
        status=BuyerStatus(model.status),
        notes=model.notes,
        tags=tuple(model.tags or ()),
        owner_id=model.owner_id,
        version=model.version,
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
    )


def _write_buyer(buyer: Buyer, model: BuyerModel) -> BuyerModel:
    model.full_name = buyer.full_name
    model.email = buyer.email
    model.phone = buyer.phone
    model.city = buyer.city.value
    model.property_type = buyer.property_type.value
    model.bhk = buyer.bhk.value if buyer.bhk else None
    model.purpose = buyer.purpose.value
    model.budget_min = buyer.budget_min
    model.budget_max = buyer.budget_max
    model.timeline = buyer.timeline.value
    model.source = buyer.source.value
    model.status = buyer.status.value
    model.notes = buyer.notes
    model.tags = list(buyer.tags)
    model.version = buyer.version
    model.updated_at = buyer.updated_at
    return model


def _model_to_entry(model: BuyerHistoryModel) -> BuyerHistoryEntry:
    return BuyerHistoryEntry(
        id=model.id,
        buyer_id=model.buyer_id,
        changed_by_id=model.changed_by_id,
        changed_at=_aware(model.changed_at),
        diff=model.diff,
    )


class _SqlUnitOfWork(BuyerUnitOfWork):
    """Unit of work bound to one SQLAlchemy session; flushes eagerly to surface constraint errors."""

    def __init__(self, db: Session) -> None:
        self._db = db

    async def upsert_user(self, user: User) -> None:
        model = self._db.get(UserModel, user.id)
        if model is None:
            self._db.add(UserModel(id=user.id, email=user.email, name=user.name))
        else:
            model.email = user.email or model.email
            model.name = user.name or model.name
        self._db.flush()

    async def insert(self, buyer: Buyer) -> None:
        model = _write_buyer(buyer, BuyerModel(id=buyer.id, owner_id=buyer.owner_id))
        model.created_at = buyer.created_at
        self._db.add(model)
        self._db.flush()

    async def update(self, buyer: Buyer, expected_version: Optional[int] = None) -> None:
        model = self._db.get(BuyerModel, buyer.id, with_for_update=True)
        if model is None:
            raise NotFound()
        if expected_version is not None and model.version != expected_version:
            raise Conflict()
        _write_buyer(buyer, model)
        self._db.flush()

    async def insert_history(self, entry: BuyerHistoryEntry) -> None:
        self._db.add(
            BuyerHistoryModel(
                id=entry.id,
                buyer_id=entry.buyer_id,
                changed_by_id=entry.changed_by_id,
                changed_at=entry.changed_at,
                diff=entry.diff,
            )
        )
        self._db.flush()


class PostgresBuyerRepository(BuyerRepository):
    """Postgres implementation of buyer repository."""

    def __init__(self) -> None:
        """Initialize Postgres repository."""
        pass

    async def get(self, buyer_id: str) -> Optional[Buyer]:
        """
        Get a buyer by id.

        Args:
            buyer_id: Buyer identifier

        Returns:
            Buyer entity, or None if not found
        """
        db: Session = get_db_session()
        try:
            model = db.get(BuyerModel, buyer_id)
            if model is None:
                return None
            return _model_to_buyer(model)
        except SQLAlchemyError as e:
            logger.error(f"Database error while getting buyer {buyer_id}: {str(e)}")
            raise InternalError("Failed to fetch buyer") from e
        finally:
            db.close()

    async def list(self, criteria: BuyerListCriteria) -> BuyerPage:
        """
        List buyers matching the criteria.

        Args:
            criteria: Search, filter, sort and pagination criteria

        Returns:
            Page of buyers with the total number of matches
        """
        db: Session = get_db_session()
        try:
            query = db.query(BuyerModel)
            if criteria.search:
                pattern = f"%{_escape_like(criteria.search)}%"
                query = query.filter(
                    or_(
                        BuyerModel.full_name.ilike(pattern, escape="\\"),
                        BuyerModel.email.ilike(pattern, escape="\\"),
                        BuyerModel.phone.ilike(pattern, escape="\\"),
                    )
                )
            if criteria.city:
                query = query.filter(BuyerModel.city == criteria.city)
            if criteria.property_type:
                query = query.filter(BuyerModel.property_type == criteria.property_type)
            if criteria.status:
                query = query.filter(BuyerModel.status == criteria.status)
            if criteria.timeline:
                query = query.filter(BuyerModel.timeline == criteria.timeline)

            total = query.with_entities(func.count(BuyerModel.id)).scalar() or 0

            column = _SORT_COLUMNS[criteria.sort]
            if criteria.order == "asc":
                query = query.order_by(column.asc(), BuyerModel.id.asc())
            else:
                query = query.order_by(column.desc(), BuyerModel.id.desc())
            if criteria.limit is not None:
                query = query.offset((criteria.page - 1) * criteria.limit).limit(criteria.limit)

            items = [_model_to_buyer(model) for model in query.all()]
            return BuyerPage(items=items, total=total, page=criteria.page, limit=criteria.limit)
        except SQLAlchemyError as e:
            logger.error(f"Database error while listing buyers: {str(e)}")
            raise InternalError("Failed to fetch buyers") from e
        finally:
            db.close()

    async def list_history(self, buyer_id: str) -> list[BuyerHistoryEntry]:
        """
        List history entries of a buyer, newest first.

        Args:
            buyer_id: Buyer identifier

        Returns:
            History entries (empty if none)
        """
        db: Session = get_db_session()
        try:
            models = (
                db.query(BuyerHistoryModel)
                .filter(BuyerHistoryModel.buyer_id == buyer_id)
                .order_by(BuyerHistoryModel.changed_at.desc())
                .all()
            )
            return [_model_to_entry(model) for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Database error while listing history for buyer {buyer_id}: {str(e)}")
            raise InternalError("Failed to fetch buyer history") from e
        finally:
            db.close()

    async def delete(self, buyer_id: str) -> bool:
        """
        Delete a buyer and its history.

        Args:
            buyer_id: Buyer identifier

        Returns:
            True if a buyer was deleted
        """
        db: Session = get_db_session()
        try:
            # Explicit history delete keeps the cascade on backends without FK enforcement
            db.query(BuyerHistoryModel).filter(BuyerHistoryModel.buyer_id == buyer_id).delete()
            deleted = db.query(BuyerModel).filter(BuyerModel.id == buyer_id).delete()
            db.commit()
            return deleted > 0
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error while deleting buyer {buyer_id}: {str(e)}")
            raise InternalError("Failed to delete buyer") from e
        finally:
            db.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[BuyerUnitOfWork]:
        """
        Open a unit of work committed on success and rolled back on any error.

        Yields:
            Unit of work bound to a fresh session

        Raises:
            InternalError: If the database rejects a write or the commit
        """
        db: Session = get_db_session()
        try:
            yield _SqlUnitOfWork(db)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error while committing buyer transaction: {str(e)}")
            raise InternalError("Failed to save buyer") from e
        except BaseException:
            db.rollback()
            raise
        finally:
            db.close()
