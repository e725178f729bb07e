"""CSV import/export codec adapter."""

import csv
import io
from collections.abc import Sequence

from app.application.ports.buyer_tabular_codec import BuyerTabularCodec
from app.domain.entities.buyer import Buyer
from app.domain.errors import FieldIssue, ValidationError

EXPORT_COLUMNS: tuple[str, ...] = (
    "fullName",
    "email",
    "phone",
    "city",
    "propertyType",
    "bhk",
    "purpose",
    "budgetMin",
    "budgetMax",
    "timeline",
    "source",
    "status",
    "notes",
    "tags",
)


def _invalid_file(message: str) -> ValidationError:
    return ValidationError((FieldIssue(path="file", message=message),), message=message)


class CsvBuyerCodec(BuyerTabularCodec):
    """CSV implementation of the tabular codec."""

    def parse(self, raw: bytes) -> list[dict[str, str]]:
        """
        Parse CSV bytes with a header row.

        Args:
            raw: File content, UTF-8 with an optional BOM

        Returns:
            Field maps keyed by trimmed header name; blank lines are skipped and
            missing trailing cells read as empty strings
        """
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise _invalid_file("File must be UTF-8 encoded CSV") from e

        reader = csv.reader(io.StringIO(text, newline=""))
        headers = None
        rows: list[dict[str, str]] = []
        try:
            for values in reader:
                if not any(value.strip() for value in values):
                    continue
                if headers is None:
                    headers = [header.strip() for header in values]
                    continue
                rows.append(
                    {
                        header: (values[index].strip() if index < len(values) else "")
                        for index, header in enumerate(headers)
                        if header
                    }
                )
        except csv.Error as e:
            raise _invalid_file(f"Malformed CSV: {e}") from e

        if headers is None:
            raise _invalid_file("CSV file is empty")
        return rows

    def format(self, buyers: Sequence[Buyer]) -> bytes:
        """
        Format buyers as CSV with a header row.

        Args:
            buyers: Buyers to export

        Returns:
            UTF-8 encoded CSV
        """
        buffer = io.StringIO(newline="")
        writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
        writer.writeheader()
        for buyer in buyers:
            writer.writerow(
                {
                    "fullName": buyer.full_name,
                    "email": buyer.email or "",
                    "phone": buyer.phone,
                    "city": buyer.city.value,
                    "propertyType": buyer.property_type.value,
                    "bhk": buyer.bhk.value if buyer.bhk else "",
                    "purpose": buyer.purpose.value,
                    "budgetMin": str(buyer.budget_min) if buyer.budget_min is not None else "",
                    "budgetMax": str(buyer.budget_max) if buyer.budget_max is not None else "",
                    "timeline": buyer.timeline.value,
                    "source": buyer.source.value,
                    "status": buyer.status.value,
                    "notes": buyer.notes or "",
                    "tags": ",".join(buyer.tags),
                }
            )
        return buffer.getvalue().encode("utf-8")
