"""Get buyer use case."""

from typing import Optional

from app.application.dtos.buyer import BuyerDetail
from app.application.ports.buyer_repository import BuyerRepository
from app.domain.entities.buyer import User
from app.domain.errors import NotFound, Unauthorized


class GetBuyer:
    """Use case for reading one buyer with its change history."""

    def __init__(self, repository: BuyerRepository) -> None:
        self._repository = repository

    async def execute(self, user: Optional[User], buyer_id: str) -> BuyerDetail:
        """
        Load a buyer and its history, newest entry first.

        Raises:
            Unauthorized: If no user is signed in
            NotFound: If the buyer does not exist
        """
        if user is None:
            raise Unauthorized()

        buyer = await self._repository.get(buyer_id)
        if buyer is None:
            raise NotFound()
        history = await self._repository.list_history(buyer_id)
        return BuyerDetail(buyer=buyer, history=history)
