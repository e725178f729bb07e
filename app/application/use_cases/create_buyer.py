"""Create buyer use case."""

from collections.abc import Mapping
from typing import Any, Optional

from app.application.ports.buyer_repository import BuyerRepository
from app.application.validation.buyer_schema import validate_buyer
from app.domain.entities.buyer import Buyer, BuyerHistoryEntry, User, utc_now
from app.domain.errors import Unauthorized
from app.domain.services.buyer_diff import created_marker
from app.infrastructure.logging.logger import log_write


class CreateBuyer:
    """Use case for creating a single buyer lead."""

    def __init__(self, repository: BuyerRepository, require_tags: bool = False) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository
            require_tags: Reject records without at least one tag
        """
        self._repository = repository
        self._require_tags = require_tags

    async def execute(self, user: Optional[User], payload: Mapping[str, Any]) -> Buyer:
        """
        Validate and store a new buyer owned by the acting user.

        The record and its "created" history entry are written together.

        Args:
            user: Acting user, or None if unauthenticated
            payload: Raw camelCase field map; id, owner and timestamps are ignored

        Returns:
            Created buyer

        Raises:
            Unauthorized: If no user is signed in
            ValidationError: If any rule fails
        """
        if user is None:
            raise Unauthorized()

        values = validate_buyer(payload, require_tags=self._require_tags).unwrap()
        now = utc_now()
        buyer = Buyer(owner_id=user.id, created_at=now, updated_at=now, **values)

        async with self._repository.transaction() as unit_of_work:
            await unit_of_work.upsert_user(user)
            await unit_of_work.insert(buyer)
            await unit_of_work.insert_history(
                BuyerHistoryEntry(
                    buyer_id=buyer.id,
                    changed_by_id=user.id,
                    diff=created_marker(buyer),
                    changed_at=now,
                )
            )

        log_write("create_buyer", buyer.id, user.id, ["created"])
        return buyer
