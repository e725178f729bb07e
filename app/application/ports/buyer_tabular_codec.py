"""Tabular import/export codec port."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.domain.entities.buyer import Buyer


class BuyerTabularCodec(ABC):
    """Port interface for turning tabular bytes into field maps and back."""

    @abstractmethod
    def parse(self, raw: bytes) -> list[dict[str, str]]:
        """
        Parse raw tabular input into header-keyed field maps.

        Args:
            raw: Uploaded file content

        Returns:
            One field map per non-blank data row

        Raises:
            ValidationError: If the input cannot be decoded or has no header row
        """
        pass

    @abstractmethod
    def format(self, buyers: Sequence[Buyer]) -> bytes:
        """
        Format buyers as tabular output.

        Args:
            buyers: Buyers to export, in order

        Returns:
            Encoded file content including a header row
        """
        pass
