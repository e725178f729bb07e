"""Response presenters: entities to camelCase JSON bodies."""

from typing import Any

from app.application.dtos.buyer import BuyerDetail, BuyerPage
from app.domain.entities.buyer import Buyer, BuyerHistoryEntry
from app.domain.services.buyer_diff import snapshot


def buyer_to_dict(buyer: Buyer) -> dict[str, Any]:
    return snapshot(buyer)


def history_entry_to_dict(entry: BuyerHistoryEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "buyerId": entry.buyer_id,
        "changedById": entry.changed_by_id,
        "changedAt": entry.changed_at.isoformat(),
        "diff": entry.diff,
    }


def page_to_dict(page: BuyerPage) -> dict[str, Any]:
    return {
        "items": [buyer_to_dict(buyer) for buyer in page.items],
        "page": page.page,
        "limit": page.limit,
        "total": page.total,
        "totalPages": page.total_pages,
    }


def detail_to_dict(detail: BuyerDetail) -> dict[str, Any]:
    body = buyer_to_dict(detail.buyer)
    body["history"] = [history_entry_to_dict(entry) for entry in detail.history]
    return body
