"""Update buyer use case: the validated, concurrency-checked, audited write path."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from app.application.ports.buyer_repository import BuyerRepository
from app.application.validation.buyer_schema import validate_buyer_update
from app.domain.entities.buyer import Buyer, BuyerHistoryEntry, User, utc_now
from app.domain.errors import (
    Conflict,
    FieldIssue,
    InternalError,
    NotFound,
    Unauthorized,
    ValidationError,
)
from app.domain.services.buyer_diff import diff_buyer
from app.domain.services.ownership import ensure_can_modify
from app.infrastructure.logging.logger import log_rejection, log_write


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValidationError(
                (FieldIssue(path="updatedAt", message="Invalid datetime"),)
            ) from e
    else:
        raise ValidationError((FieldIssue(path="updatedAt", message="Invalid datetime"),))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_version(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValidationError((FieldIssue(path="version", message="Invalid version"),))
    try:
        return int(value)
    except ValueError as e:
        raise ValidationError((FieldIssue(path="version", message="Invalid version"),)) from e


def check_concurrency(buyer: Buyer, payload: Mapping[str, Any]) -> None:
    """
    Compare the caller's last-seen tokens with the stored record.

    ``version`` is the primary token; an ``updatedAt`` value, when sent, must also
    match the stored timestamp exactly.

    Raises:
        Conflict: If either supplied token is stale
        ValidationError: If a supplied token cannot be parsed
    """
    if payload.get("version") is not None and _parse_version(payload["version"]) != buyer.version:
        raise Conflict()
    if payload.get("updatedAt") is not None and _parse_timestamp(payload["updatedAt"]) != buyer.updated_at:
        raise Conflict()


class UpdateBuyer:
    """Use case for full (PUT) and partial (PATCH) buyer updates."""

    def __init__(self, repository: BuyerRepository, admin_user_id: str) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository
            admin_user_id: Account allowed to modify any buyer
        """
        self._repository = repository
        self._admin_user_id = admin_user_id

    async def execute(
        self,
        user: Optional[User],
        buyer_id: str,
        payload: Mapping[str, Any],
        partial: bool = True,
    ) -> Buyer:
        """
        Apply an update to one buyer.

        Steps: authorize, load, check ownership, check concurrency, validate,
        diff, then write the record and its history entry in one transaction.
        A payload that changes nothing writes nothing.

        Args:
            user: Acting user, or None if unauthenticated
            buyer_id: Target buyer id (from the path; any id in the payload is ignored)
            payload: Raw camelCase field map, optionally with ``version``/``updatedAt``
            partial: True for PATCH semantics, False for full replacement

        Returns:
            The freshly reloaded buyer

        Raises:
            Unauthorized, NotFound, Forbidden, Conflict, ValidationError, InternalError
        """
        if user is None:
            raise Unauthorized()

        existing = await self._repository.get(buyer_id)
        if existing is None:
            raise NotFound()

        ensure_can_modify(existing, user, self._admin_user_id)

        try:
            check_concurrency(existing, payload)
        except Conflict:
            log_rejection("update_buyer", "conflict", buyer_id=buyer_id, actor_id=user.id)
            raise

        changes = validate_buyer_update(payload, existing, partial=partial).unwrap()

        diff = diff_buyer(existing, changes)
        if not diff:
            return existing

        now = utc_now()
        updated = existing.with_changes(changes).touched(now)
        async with self._repository.transaction() as unit_of_work:
            await unit_of_work.upsert_user(user)
            await unit_of_work.update(updated, expected_version=existing.version)
            await unit_of_work.insert_history(
                BuyerHistoryEntry(
                    buyer_id=buyer_id,
                    changed_by_id=user.id,
                    diff=diff,
                    changed_at=now,
                )
            )

        log_write("update_buyer", buyer_id, user.id, sorted(diff), version=updated.version)

        reloaded = await self._repository.get(buyer_id)
        if reloaded is None:
            raise InternalError("Buyer disappeared after update")
        return reloaded
