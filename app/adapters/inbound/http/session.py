"""Session resolution from trusted identity headers."""

import hashlib
import hmac
from typing import Optional

from fastapi import Request

from app.domain.entities.buyer import User
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import log_rejection

USER_ID_HEADER = "X-User-Id"
USER_EMAIL_HEADER = "X-User-Email"
USER_NAME_HEADER = "X-User-Name"
SIGNATURE_HEADER = "X-User-Signature"


def sign_user_id(user_id: str, secret: str) -> str:
    """
    Compute the session signature for a user id.

    Args:
        user_id: User identifier
        secret: Shared session secret

    Returns:
        Hex-encoded HMAC-SHA256 of the user id
    """
    return hmac.new(secret.encode("utf-8"), user_id.encode("utf-8"), hashlib.sha256).hexdigest()


def validate_user_signature(request: Request, user_id: str) -> bool:
    """
    Validate the session signature header when a session secret is configured.

    Args:
        request: FastAPI request object
        user_id: User id claimed by the request

    Returns:
        True if the signature is valid or signing is disabled
    """
    if not settings.session_secret:
        return True

    signature = request.headers.get(SIGNATURE_HEADER)
    if not signature:
        return False

    expected = sign_user_id(user_id, settings.session_secret)
    # Constant-time comparison
    return hmac.compare_digest(expected, signature)


def current_user(request: Request) -> Optional[User]:
    """
    Resolve the acting user for a request.

    Args:
        request: FastAPI request object

    Returns:
        User built from the identity headers, or None if no valid session is present
    """
    user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    if not user_id:
        return None

    if not validate_user_signature(request, user_id):
        log_rejection("session", "invalid_signature", path=request.url.path)
        return None

    return User(
        id=user_id,
        email=request.headers.get(USER_EMAIL_HEADER) or None,
        name=request.headers.get(USER_NAME_HEADER) or None,
    )
