"""Bulk CSV import use case."""

from typing import Optional

from app.application.dtos.buyer import ImportResult
from app.application.ports.buyer_repository import BuyerRepository
from app.application.ports.buyer_tabular_codec import BuyerTabularCodec
from app.application.validation.buyer_schema import DEFAULT_MAX_IMPORT_ROWS, validate_import_batch
from app.domain.entities.buyer import Buyer, BuyerHistoryEntry, User, utc_now
from app.domain.errors import (
    BatchTooLarge,
    FieldIssue,
    ImportValidationError,
    Unauthorized,
    ValidationError,
)
from app.domain.services.buyer_diff import imported_marker
from app.infrastructure.logging.logger import log_event, log_rejection

NO_DATA_MESSAGE = "No valid data found in CSV"


class ImportBuyers:
    """Use case for all-or-nothing CSV imports."""

    def __init__(
        self,
        repository: BuyerRepository,
        codec: BuyerTabularCodec,
        max_rows: int = DEFAULT_MAX_IMPORT_ROWS,
    ) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository
            codec: Tabular codec used to parse the uploaded file
            max_rows: Largest accepted batch
        """
        self._repository = repository
        self._codec = codec
        self._max_rows = max_rows

    async def execute(self, user: Optional[User], raw: bytes) -> ImportResult:
        """
        Parse, validate and store a batch of buyers.

        Nothing is stored unless every row is valid. All buyers and their
        "imported" history entries are written in one transaction.

        Args:
            user: Acting user, or None if unauthenticated
            raw: Uploaded file content

        Returns:
            Number of imported buyers and their ids, in row order

        Raises:
            Unauthorized: If no user is signed in
            ValidationError: If the file is unreadable or has no data rows
            BatchTooLarge: If the file has more rows than allowed
            ImportValidationError: If any row fails validation
        """
        if user is None:
            raise Unauthorized()

        rows = self._codec.parse(raw)
        if not rows:
            raise ValidationError((FieldIssue(path="file", message=NO_DATA_MESSAGE),), message=NO_DATA_MESSAGE)

        try:
            accepted = validate_import_batch(rows, max_rows=self._max_rows)
        except BatchTooLarge:
            log_rejection("import_buyers", "batch_too_large", actor_id=user.id, row_count=len(rows))
            raise
        except ImportValidationError as e:
            log_rejection("import_buyers", "invalid_rows", actor_id=user.id, invalid_rows=len(e.rows))
            raise

        now = utc_now()
        buyers = [Buyer(owner_id=user.id, created_at=now, updated_at=now, **values) for values in accepted]

        async with self._repository.transaction() as unit_of_work:
            await unit_of_work.upsert_user(user)
            for buyer in buyers:
                await unit_of_work.insert(buyer)
            for buyer in buyers:
                await unit_of_work.insert_history(
                    BuyerHistoryEntry(
                        buyer_id=buyer.id,
                        changed_by_id=user.id,
                        diff=imported_marker(buyer),
                        changed_at=now,
                    )
                )

        log_event("import_buyers", "committed", actor_id=user.id, count=len(buyers))
        return ImportResult(count=len(buyers), buyer_ids=[buyer.id for buyer in buyers])
