"""
Authorization Policy

Single rule for mutating user-authored content.
"""
from uuid import UUID

from ..errors import AuthorizationError
from ..models.employee import Actor


def can_modify(actor: Actor, owner_id: UUID) -> bool:
    """Authors may change their own content; admins may change anything"""
    return actor.user_id == owner_id or actor.is_admin


def ensure_can_modify(actor: Actor, owner_id: UUID, what: str) -> None:
    """Raise AuthorizationError unless can_modify holds"""
    if not can_modify(actor, owner_id):
        raise AuthorizationError(f"Not authorized to modify this {what}")
