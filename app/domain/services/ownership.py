"""Single-owner-or-admin write policy."""

from app.domain.entities.buyer import Buyer, User
from app.domain.errors import Forbidden


def can_modify(buyer: Buyer, user: User, admin_user_id: str) -> bool:
    """
    Check whether a user may write to a buyer.

    Args:
        buyer: Target buyer
        user: Acting user
        admin_user_id: Id of the administrative account allowed to act on any record

    Returns:
        True if the user owns the buyer or is the admin account
    """
    if buyer.owner_id == user.id:
        return True
    return bool(admin_user_id) and user.id == admin_user_id


def ensure_can_modify(buyer: Buyer, user: User, admin_user_id: str) -> None:
    """Raise Forbidden unless the user may write to the buyer."""
    if not can_modify(buyer, user, admin_user_id):
        raise Forbidden()
