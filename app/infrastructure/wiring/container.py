"""Dependency injection container."""

from typing import Optional

from app.application.ports.buyer_repository import BuyerRepository
from app.application.ports.buyer_tabular_codec import BuyerTabularCodec
from app.application.ports.rate_limiter import RateLimiter
from app.application.use_cases.create_buyer import CreateBuyer
from app.application.use_cases.delete_buyer import DeleteBuyer
from app.application.use_cases.get_buyer import GetBuyer
from app.application.use_cases.import_buyers import ImportBuyers
from app.application.use_cases.list_buyers import ExportBuyers, ListBuyers
from app.application.use_cases.patch_buyer_status import PatchBuyerStatus
from app.application.use_cases.update_buyer import UpdateBuyer
from app.infrastructure.config.settings import settings
from app.infrastructure.wiring.dependencies import (
    create_buyer_repository,
    create_rate_limiter,
    create_tabular_codec,
)


class Container:
    """Dependency injection container."""

    def __init__(
        self,
        repository: Optional[BuyerRepository] = None,
        rate_limiter: Optional[RateLimiter] = None,
        codec: Optional[BuyerTabularCodec] = None,
    ) -> None:
        """
        Initialize container with dependencies.

        Args:
            repository: Buyer repository (defaults to the configured adapter)
            rate_limiter: Rate limiter (defaults to the configured adapter)
            codec: Tabular codec (defaults to CSV)
        """
        self._repository = repository or create_buyer_repository()
        self._rate_limiter = rate_limiter or create_rate_limiter()
        self._codec = codec or create_tabular_codec()

        # Use cases
        self._create_buyer = CreateBuyer(self._repository, require_tags=settings.require_tags_on_create)
        self._list_buyers = ListBuyers(self._repository)
        self._export_buyers = ExportBuyers(self._repository, self._codec)
        self._get_buyer = GetBuyer(self._repository)
        self._update_buyer = UpdateBuyer(self._repository, settings.admin_user_id)
        self._patch_buyer_status = PatchBuyerStatus(self._repository, settings.admin_user_id)
        self._delete_buyer = DeleteBuyer(self._repository, settings.admin_user_id)
        self._import_buyers = ImportBuyers(self._repository, self._codec, max_rows=settings.import_max_rows)

    @property
    def repository(self) -> BuyerRepository:
        """Get buyer repository."""
        return self._repository

    @property
    def rate_limiter(self) -> RateLimiter:
        """Get rate limiter."""
        return self._rate_limiter

    @property
    def create_buyer(self) -> CreateBuyer:
        return self._create_buyer

    @property
    def list_buyers(self) -> ListBuyers:
        return self._list_buyers

    @property
    def export_buyers(self) -> ExportBuyers:
        return self._export_buyers

    @property
    def get_buyer(self) -> GetBuyer:
        return self._get_buyer

    @property
    def update_buyer(self) -> UpdateBuyer:
        return self._update_buyer

    @property
    def patch_buyer_status(self) -> PatchBuyerStatus:
        return self._patch_buyer_status

    @property
    def delete_buyer(self) -> DeleteBuyer:
        return self._delete_buyer

    @property
    def import_buyers(self) -> ImportBuyers:
        return self._import_buyers
