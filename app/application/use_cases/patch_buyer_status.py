"""Quick status transition use case."""

from collections.abc import Mapping
from typing import Any, Optional

from app.application.ports.buyer_repository import BuyerRepository
from app.application.validation.buyer_schema import validate_status_patch
from app.domain.entities.buyer import Buyer, BuyerHistoryEntry, User, utc_now
from app.domain.errors import InternalError, NotFound, Unauthorized
from app.domain.services.buyer_diff import diff_buyer
from app.domain.services.ownership import ensure_can_modify
from app.infrastructure.logging.logger import log_write


class PatchBuyerStatus:
    """Use case for changing only the status of a buyer.

    Status changes skip the concurrency token check: the last writer wins.
    """

    def __init__(self, repository: BuyerRepository, admin_user_id: str) -> None:
        self._repository = repository
        self._admin_user_id = admin_user_id

    async def execute(self, user: Optional[User], buyer_id: str, payload: Mapping[str, Any]) -> Buyer:
        """
        Move a buyer to a new status.

        Args:
            user: Acting user, or None if unauthenticated
            buyer_id: Target buyer id
            payload: Raw body holding ``status``

        Returns:
            The reloaded buyer (unchanged if the status was already set)
        """
        if user is None:
            raise Unauthorized()

        existing = await self._repository.get(buyer_id)
        if existing is None:
            raise NotFound()

        ensure_can_modify(existing, user, self._admin_user_id)

        changes = validate_status_patch(payload).unwrap()
        diff = diff_buyer(existing, changes)
        if not diff:
            return existing

        now = utc_now()
        async with self._repository.transaction() as unit_of_work:
            await unit_of_work.upsert_user(user)
            await unit_of_work.update(existing.with_changes(changes).touched(now))
            await unit_of_work.insert_history(
                BuyerHistoryEntry(buyer_id=buyer_id, changed_by_id=user.id, diff=diff, changed_at=now)
            )

        log_write("patch_buyer_status", buyer_id, user.id, sorted(diff))

        reloaded = await self._repository.get(buyer_id)
        if reloaded is None:
            raise InternalError("Buyer disappeared after status change")
        return reloaded
