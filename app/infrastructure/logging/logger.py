"""Structured logger for observability."""

import logging
from typing import Any, Optional

_logger = logging.getLogger("buyer_lead_intake")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_event(
    component: str,
    action: str,
    level: int = logging.INFO,
    request_id: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a structured event.

    Args:
        component: Component name (e.g., 'http', 'update_buyer', 'import_buyers')
        action: What happened (e.g., 'committed', 'rejected')
        level: Log level (default: INFO)
        request_id: Optional request correlation id
        **kwargs: Additional structured fields to log
    """
    fields: dict[str, Any] = {"component": component, "action": action}
    if request_id is not None:
        fields["request_id"] = request_id
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    _logger.log(level, " | ".join(log_parts))


def log_write(
    component: str,
    buyer_id: str,
    actor_id: str,
    changed_fields: list[str],
    **kwargs: Any,
) -> None:
    """
    Log an accepted write to a buyer.

    Args:
        component: Use case that performed the write
        buyer_id: Buyer identifier
        actor_id: Acting user identifier
        changed_fields: Names of the fields recorded in the history entry
        **kwargs: Additional fields
    """
    log_event(
        component,
        "committed",
        buyer_id=buyer_id,
        actor_id=actor_id,
        changed_fields=changed_fields,
        **kwargs,
    )


def log_rejection(component: str, reason: str, **kwargs: Any) -> None:
    """Log a request rejected before any write."""
    log_event(component, "rejected", level=logging.WARNING, reason=reason, **kwargs)


logger = _logger
