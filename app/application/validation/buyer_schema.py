"""Buyer validation schema.

Field-level rules are declared on pydantic models; cross-field rules (BHK required
for apartments and villas, budget ordering, tag count on the interactive form) are
plain functions evaluated once every field-level rule has passed. All entry points
return a ``ValidationResult`` carrying either normalized snake_case values or an
ordered tuple of field-attributed issues.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.domain.entities.buyer import Buyer
from app.domain.errors import (
    BatchTooLarge,
    FieldIssue,
    ImportValidationError,
    RowIssues,
    ValidationError,
)
from app.domain.value_objects.buyer_enums import (
    Bhk,
    BuyerStatus,
    City,
    PropertyType,
    Purpose,
    Source,
    Timeline,
)

BHK_REQUIRED_MESSAGE = "BHK is required for Apartment and Villa property types"
BUDGET_ORDER_MESSAGE = "Maximum budget should be greater than or equal to minimum budget"
TAGS_REQUIRED_MESSAGE = "At least one tag is required"
FIELD_REQUIRED_MESSAGE = "Field required"

DEFAULT_MAX_IMPORT_ROWS = 200

# Fields that may be omitted from a partial update but never set to null.
_REQUIRED_FIELDS = (
    "full_name",
    "phone",
    "city",
    "property_type",
    "purpose",
    "timeline",
    "source",
    "status",
)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _normalize_tags(value: Any) -> Any:
    """Accept a list or a comma-separated string; trim, drop blanks and duplicates."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return value
    seen: list[str] = []
    for tag in value:
        if not isinstance(tag, str):
            return value
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return tuple(seen)


class _PayloadModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class BuyerPayload(_PayloadModel):
    """Full buyer record as submitted for create or full replacement."""

    full_name: str = Field(min_length=2, max_length=80)
    email: Optional[EmailStr] = None
    phone: str = Field(min_length=10, max_length=15, pattern=r"^[0-9]+$")
    city: City
    property_type: PropertyType
    bhk: Optional[Bhk] = None
    purpose: Purpose
    budget_min: Optional[int] = Field(default=None, gt=0)
    budget_max: Optional[int] = Field(default=None, gt=0)
    timeline: Timeline
    source: Source
    status: BuyerStatus = BuyerStatus.NEW
    notes: Optional[str] = Field(default=None, max_length=1000)
    tags: tuple[str, ...] = ()

    @field_validator("email", "bhk", "notes", mode="before")
    @classmethod
    def _optional_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("budget_min", "budget_max", mode="before")
    @classmethod
    def _zero_budget_is_absent(cls, value: Any) -> Any:
        # bool is an int subclass; lax mode would otherwise read true as 1
        if isinstance(value, bool):
            raise ValueError("Input should be a valid integer")
        value = _blank_to_none(value)
        if value == 0 or value == "0":
            return None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: Any) -> Any:
        return _normalize_tags(value)


class BuyerPatchPayload(BuyerPayload):
    """Partial update: every field optional, present fields still checked."""

    full_name: Optional[str] = Field(default=None, min_length=2, max_length=80)
    phone: Optional[str] = Field(default=None, min_length=10, max_length=15, pattern=r"^[0-9]+$")
    city: Optional[City] = None
    property_type: Optional[PropertyType] = None
    purpose: Optional[Purpose] = None
    timeline: Optional[Timeline] = None
    source: Optional[Source] = None
    status: Optional[BuyerStatus] = None


class StatusPatchPayload(_PayloadModel):
    status: BuyerStatus


class ImportRowPayload(BuyerPayload):
    """One CSV row; tags arrive as a comma-separated string and status may be blank."""

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return BuyerStatus.NEW if value is None else value


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation: normalized values or field-attributed issues."""

    values: Optional[dict[str, Any]] = None
    issues: tuple[FieldIssue, ...] = ()

    @property
    def accepted(self) -> bool:
        return not self.issues

    def unwrap(self) -> dict[str, Any]:
        """Return the normalized values, raising ValidationError if rejected."""
        if self.issues:
            raise ValidationError(self.issues)
        return dict(self.values or {})


def _issues_from_pydantic(exc: PydanticValidationError) -> tuple[FieldIssue, ...]:
    issues = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "__root__"
        issues.append(FieldIssue(path=path, message=error["msg"]))
    return tuple(issues)


def cross_field_issues(values: Mapping[str, Any], require_tags: bool = False) -> tuple[FieldIssue, ...]:
    """
    Evaluate the cross-field rules against a complete (snake_case) record view.

    Args:
        values: Field values keyed by snake_case name
        require_tags: Apply the interactive-form rule that at least one tag is given

    Returns:
        Issues in rule order; empty if all rules pass
    """
    issues = []
    property_type = values.get("property_type")
    if property_type is not None and PropertyType(property_type).requires_bhk and not values.get("bhk"):
        issues.append(FieldIssue(path="bhk", message=BHK_REQUIRED_MESSAGE))

    budget_min = values.get("budget_min")
    budget_max = values.get("budget_max")
    if budget_min and budget_max and budget_max < budget_min:
        issues.append(FieldIssue(path="budgetMax", message=BUDGET_ORDER_MESSAGE))

    if require_tags and not values.get("tags"):
        issues.append(FieldIssue(path="tags", message=TAGS_REQUIRED_MESSAGE))
    return tuple(issues)


def validate_buyer(payload: Mapping[str, Any], require_tags: bool = False) -> ValidationResult:
    """
    Validate a full buyer record.

    Args:
        payload: Raw field map (camelCase keys, as received from a client)
        require_tags: Use the interactive-form variant that requires at least one tag

    Returns:
        ValidationResult with snake_case values on success
    """
    try:
        model = BuyerPayload.model_validate(dict(payload))
    except PydanticValidationError as exc:
        return ValidationResult(issues=_issues_from_pydantic(exc))

    values = model.model_dump()
    issues = cross_field_issues(values, require_tags=require_tags)
    if issues:
        return ValidationResult(issues=issues)
    return ValidationResult(values=values)


def validate_buyer_update(
    payload: Mapping[str, Any],
    existing: Buyer,
    partial: bool = True,
) -> ValidationResult:
    """
    Validate an update against a stored buyer.

    Present fields are checked by their own rules; cross-field rules run on the
    merged view (stored record with the proposed changes applied), so changing
    only ``budgetMax`` below a stored ``budgetMin`` is still rejected.

    Args:
        payload: Raw field map (camelCase keys)
        existing: Stored buyer the update applies to
        partial: True for PATCH semantics, False for full replacement

    Returns:
        ValidationResult whose values hold only the proposed changes (snake_case)
    """
    if not partial:
        try:
            model = BuyerPayload.model_validate(dict(payload))
        except PydanticValidationError as exc:
            return ValidationResult(issues=_issues_from_pydantic(exc))
        changes = model.model_dump()
    else:
        try:
            model = BuyerPatchPayload.model_validate(dict(payload))
        except PydanticValidationError as exc:
            return ValidationResult(issues=_issues_from_pydantic(exc))
        changes = model.model_dump(exclude_unset=True)
        nulled = tuple(
            FieldIssue(path=to_camel(name), message=FIELD_REQUIRED_MESSAGE)
            for name in _REQUIRED_FIELDS
            if name in changes and changes[name] is None
        )
        if nulled:
            return ValidationResult(issues=nulled)

    merged = existing.with_changes(changes)
    issues = cross_field_issues(merged.editable_values())
    if issues:
        return ValidationResult(issues=issues)
    return ValidationResult(values=changes)


def validate_status_patch(payload: Mapping[str, Any]) -> ValidationResult:
    """Validate a status-only transition payload; extra keys are ignored."""
    try:
        model = StatusPatchPayload.model_validate(dict(payload))
    except PydanticValidationError as exc:
        return ValidationResult(issues=_issues_from_pydantic(exc))
    return ValidationResult(values={"status": model.status})


def validate_import_batch(
    rows: Sequence[Mapping[str, Any]],
    max_rows: int = DEFAULT_MAX_IMPORT_ROWS,
) -> list[dict[str, Any]]:
    """
    Validate a whole import batch.

    Args:
        rows: Parsed CSV rows (header-keyed field maps)
        max_rows: Hard ceiling on the number of rows

    Returns:
        Normalized snake_case values for every row, in input order

    Raises:
        BatchTooLarge: If the batch exceeds ``max_rows``
        ImportValidationError: If any row fails any rule; carries every offending row
    """
    if len(rows) > max_rows:
        raise BatchTooLarge(row_count=len(rows), max_rows=max_rows)

    accepted: list[dict[str, Any]] = []
    failures: list[RowIssues] = []
    for index, row in enumerate(rows, start=1):
        try:
            model = ImportRowPayload.model_validate(dict(row))
        except PydanticValidationError as exc:
            issues = _issues_from_pydantic(exc)
        else:
            values = model.model_dump()
            issues = cross_field_issues(values)
            if not issues:
                accepted.append(values)
                continue
        failures.append(
            RowIssues(row=index, errors=tuple(f"{issue.path}: {issue.message}" for issue in issues))
        )

    if failures:
        raise ImportValidationError(tuple(failures))
    return accepted
