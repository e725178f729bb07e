"""HTTP routes."""

from typing import Any, Optional
from uuid import uuid4

from fastapi import APIRouter, Body, Depends, File, Request, Response, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from app.adapters.inbound.http.serializers import buyer_to_dict, detail_to_dict, page_to_dict
from app.adapters.inbound.http.session import current_user
from app.application.dtos.buyer import BuyerListCriteria
from app.domain.entities.buyer import User
from app.domain.errors import FieldIssue, RateLimited, ValidationError
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import log_event, log_rejection
from app.infrastructure.wiring.container import Container

router = APIRouter()

_CRITERIA_PARAMS = (
    "search",
    "city",
    "propertyType",
    "status",
    "timeline",
    "sort",
    "order",
    "page",
    "limit",
)


def get_container(request: Request) -> Container:
    """Container stored on the application by create_app."""
    return request.app.state.container


def client_identifier(request: Request) -> str:
    """
    Identify the calling client for rate limiting.

    Args:
        request: FastAPI request object

    Returns:
        First X-Forwarded-For entry, else the peer host, else "unknown"
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


async def enforce_rate_limit(request: Request, container: Container, operation: str) -> None:
    """
    Count the request against the client's window for an operation.

    Raises:
        RateLimited: If the window is exhausted
    """
    key = f"{client_identifier(request)}-{operation}"
    decision = await container.rate_limiter.hit(key)
    if not decision.allowed:
        log_rejection("http", "rate_limited", key=key, retry_after=decision.retry_after_seconds)
        raise RateLimited(decision.retry_after_seconds)


def parse_list_criteria(request: Request, max_limit: Optional[int] = None) -> BuyerListCriteria:
    """
    Build listing criteria from the query string.

    Args:
        request: FastAPI request object
        max_limit: Largest accepted page size, if any

    Returns:
        Validated criteria; blank parameters are treated as absent

    Raises:
        ValidationError: If any parameter is invalid
    """
    raw = {
        name: request.query_params[name]
        for name in _CRITERIA_PARAMS
        if request.query_params.get(name, "").strip()
    }
    try:
        criteria = BuyerListCriteria.model_validate(raw)
    except PydanticValidationError as e:
        issues = tuple(
            FieldIssue(path=".".join(str(part) for part in error["loc"]), message=error["msg"])
            for error in e.errors()
        )
        raise ValidationError(issues) from e

    if max_limit is not None and criteria.limit is not None and criteria.limit > max_limit:
        raise ValidationError(
            (FieldIssue(path="limit", message=f"Input should be less than or equal to {max_limit}"),)
        )
    return criteria


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


@router.post("/buyers", status_code=status.HTTP_201_CREATED)
async def create_buyer(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user: Optional[User] = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    Create a buyer owned by the signed-in user.

    Returns:
        Created buyer
    """
    request_id = str(uuid4())
    await enforce_rate_limit(request, container, "create")
    log_event("http", "create_buyer", request_id=request_id, actor_id=user.id if user else None)

    buyer = await container.create_buyer.execute(user, payload)
    return buyer_to_dict(buyer)


@router.get("/buyers", status_code=status.HTTP_200_OK)
async def list_buyers(
    request: Request,
    user: Optional[User] = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    List buyers with search, filters, sort and pagination.

    Returns:
        Page of buyers with items, page, limit, total and totalPages
    """
    criteria = parse_list_criteria(request, max_limit=settings.list_max_limit)
    page = await container.list_buyers.execute(user, criteria)
    return page_to_dict(page)


@router.get("/buyers/export")
async def export_buyers(
    request: Request,
    user: Optional[User] = Depends(current_user),
    container: Container = Depends(get_container),
) -> Response:
    """
    Export every buyer matching the list criteria as CSV.

    Returns:
        CSV attachment
    """
    criteria = parse_list_criteria(request)
    export = await container.export_buyers.execute(user, criteria)
    return Response(
        content=export.content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.post("/buyers/import", status_code=status.HTTP_200_OK)
async def import_buyers(
    request: Request,
    file: UploadFile = File(...),
    user: Optional[User] = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    Import buyers from an uploaded CSV file, all or nothing.

    Returns:
        Success flag and number of imported buyers
    """
    request_id = str(uuid4())
    await enforce_rate_limit(request, container, "import")
    raw = await file.read()
    log_event(
        "http",
        "import_buyers",
        request_id=request_id,
        actor_id=user.id if user else None,
        filename=file.filename,
        size=len(raw),
    )

    result = await container.import_buyers.execute(user, raw)
    return {"success": True, "count": result.count}


@router.get("/buyers/{buyer_id}", status_code=status.HTTP_200_OK)
async def get_buyer(
    buyer_id: str,
    user: Optional[User] = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    Get a buyer with its change history.

    Returns:
        Buyer plus history entries, newest first
    """
    detail = await container.get_buyer.execute(user, buyer_id)
    return detail_to_dict(detail)


@router.put("/buyers/{buyer_id}", status_code=status.HTTP_200_OK)
async def replace_buyer(
    request: Request,
    buyer_id: str,
    payload: dict[str, Any] = Body(...),
    user: Optional[User] = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    Replace every editable field of a buyer.

    Returns:
        Updated buyer
    """
    request_id = str(uuid4())
    await enforce_rate_limit(request, container, "update")
    log_event("http", "replace_buyer", request_id=request_id, buyer_id=buyer_id)

    buyer = await container.update_buyer.execute(user, buyer_id, payload, partial=False)
    return buyer_to_dict(buyer)


@router.patch("/buyers/{buyer_id}", status_code=status.HTTP_200_OK)
async def update_buyer(
    request: Request,
    buyer_id: str,
    payload: dict[str, Any] = Body(...),
    user: Optional[User] = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    Update the given fields of a buyer.

    Returns:
        Updated buyer
    """
    request_id = str(uuid4())
    await enforce_rate_limit(request, container, "update")
    log_event("http", "update_buyer", request_id=request_id, buyer_id=buyer_id)

    buyer = await container.update_buyer.execute(user, buyer_id, payload, partial=True)
    return buyer_to_dict(buyer)


@router.patch("/buyers/{buyer_id}/status", status_code=status.HTTP_200_OK)
async def patch_buyer_status(
    request: Request,
    buyer_id: str,
    payload: dict[str, Any] = Body(...),
    user: Optional[User] = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    Move a buyer to another status.

    Returns:
        Updated buyer
    """
    request_id = str(uuid4())
    await enforce_rate_limit(request, container, "status")
    log_event("http", "patch_buyer_status", request_id=request_id, buyer_id=buyer_id)

    buyer = await container.patch_buyer_status.execute(user, buyer_id, payload)
    return buyer_to_dict(buyer)


@router.delete("/buyers/{buyer_id}", status_code=status.HTTP_200_OK)
async def delete_buyer(
    buyer_id: str,
    user: Optional[User] = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    Delete a buyer and its history.

    Returns:
        Confirmation with the deleted id
    """
    deleted_id = await container.delete_buyer.execute(user, buyer_id)
    return {"success": True, "id": deleted_id}
