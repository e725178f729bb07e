"""Domain error taxonomy.

Every failure the service reports to a caller is one of these. Each carries a
stable ``code`` and HTTP ``status_code`` so clients can branch on the kind.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class FieldIssue:
    """One rule failure attributed to a field path."""

    path: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


@dataclass(frozen=True)
class RowIssues:
    """All rule failures for one 1-indexed import row."""

    row: int
    errors: tuple[str, ...]

    def as_dict(self) -> dict[str, Any]:
        return {"row": self.row, "errors": list(self.errors)}


class BuyerLeadError(Exception):
    """Base class for errors surfaced to callers."""

    code = "error"
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def details(self) -> dict[str, Any]:
        """Extra payload merged into the error response body."""
        return {}


class Unauthorized(BuyerLeadError):
    code = "unauthorized"
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(BuyerLeadError):
    code = "forbidden"
    status_code = 403
    default_message = "You do not have permission to modify this buyer"


class NotFound(BuyerLeadError):
    code = "not_found"
    status_code = 404
    default_message = "Buyer not found"


class Conflict(BuyerLeadError):
    code = "conflict"
    status_code = 409
    default_message = "Record has been modified by someone else. Please refresh and try again."


class ValidationError(BuyerLeadError):
    """One or more field-attributed rule failures."""

    code = "validation_error"
    status_code = 400
    default_message = "Validation error"

    def __init__(self, issues: tuple[FieldIssue, ...], message: Optional[str] = None) -> None:
        super().__init__(message)
        self.issues = tuple(issues)

    def details(self) -> dict[str, Any]:
        return {"issues": [issue.as_dict() for issue in self.issues]}


class ImportValidationError(BuyerLeadError):
    """Batch import rejected because at least one row failed validation."""

    code = "import_validation_error"
    status_code = 400
    default_message = "Validation errors in CSV"

    def __init__(self, rows: tuple[RowIssues, ...]) -> None:
        super().__init__()
        self.rows = tuple(rows)

    def details(self) -> dict[str, Any]:
        return {"errors": [row.as_dict() for row in self.rows]}


class BatchTooLarge(BuyerLeadError):
    code = "batch_too_large"
    status_code = 400

    def __init__(self, row_count: int, max_rows: int) -> None:
        super().__init__(f"CSV import is limited to {max_rows} rows maximum")
        self.row_count = row_count
        self.max_rows = max_rows

    def details(self) -> dict[str, Any]:
        return {"rowCount": self.row_count, "maxRows": self.max_rows}


class RateLimited(BuyerLeadError):
    code = "rate_limited"
    status_code = 429
    default_message = "Rate limit exceeded. Please try again later."

    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__()
        self.retry_after_seconds = retry_after_seconds


class InternalError(BuyerLeadError):
    code = "internal_error"
    status_code = 500
    default_message = "Internal server error"
