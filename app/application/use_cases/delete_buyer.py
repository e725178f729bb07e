"""Delete buyer use case."""

from typing import Optional

from app.application.ports.buyer_repository import BuyerRepository
from app.domain.entities.buyer import User
from app.domain.errors import NotFound, Unauthorized
from app.domain.services.ownership import ensure_can_modify
from app.infrastructure.logging.logger import log_event


class DeleteBuyer:
    """Use case for deleting a buyer together with its history."""

    def __init__(self, repository: BuyerRepository, admin_user_id: str) -> None:
        self._repository = repository
        self._admin_user_id = admin_user_id

    async def execute(self, user: Optional[User], buyer_id: str) -> str:
        """
        Delete a buyer owned by the acting user.

        Args:
            user: Acting user, or None if unauthenticated
            buyer_id: Target buyer id

        Returns:
            Id of the deleted buyer

        Raises:
            Unauthorized, NotFound, Forbidden
        """
        if user is None:
            raise Unauthorized()

        existing = await self._repository.get(buyer_id)
        if existing is None:
            raise NotFound()

        ensure_can_modify(existing, user, self._admin_user_id)

        # Deleted concurrently between the read and the delete
        if not await self._repository.delete(buyer_id):
            raise NotFound()

        log_event("delete_buyer", "deleted", buyer_id=buyer_id, actor_id=user.id)
        return buyer_id
