"""
Acting identity resolution.

An admin may act as another user (impersonation). Whoever is "acting" is
passed explicitly to every operation as an Identity value; nothing here
reads cookies or any other request state.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncConnection

from .enums import UserRole
from .queries.users import get_user_by_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The effective user for a request."""

    user_id: int
    role: UserRole
    impersonator_id: int | None = None  # admin acting as user_id

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.admin

    @property
    def is_impersonating(self) -> bool:
        return self.impersonator_id is not None


def _role_for(user: dict) -> UserRole:
    return UserRole.admin if user.get("is_admin") else UserRole.member


async def effective_identity(
    conn: AsyncConnection,
    user_id: int,
    impersonate_user_id: int | None = None,
) -> Identity | None:
    """
    Resolve who is acting for a request.

    Impersonation is honoured only when the authenticated user is currently
    an admin and the target user exists; otherwise the real user acts.

    Args:
        conn: Database connection
        user_id: Authenticated user
        impersonate_user_id: User the admin asked to act as, if any

    Returns:
        Identity, or None if the authenticated user no longer exists
    """
    user = await get_user_by_id(conn, user_id)
    if not user:
        return None

    actual = Identity(user_id=user_id, role=_role_for(user))
    if impersonate_user_id is None or impersonate_user_id == user_id:
        return actual

    if not actual.is_admin:
        logger.warning(f"Ignoring impersonation request from non-admin user {user_id}")
        return actual

    target = await get_user_by_id(conn, impersonate_user_id)
    if not target:
        logger.warning(
            f"Admin {user_id} impersonating missing user {impersonate_user_id}"
        )
        return actual

    return Identity(
        user_id=impersonate_user_id,
        role=_role_for(target),
        impersonator_id=user_id,
    )


def can_edit_document(identity: Identity, owner_id: int) -> bool:
    """Only the owner may edit (an admin does so by impersonating the owner)."""
    return identity.user_id == owner_id


def is_owner_or_admin(identity: Identity, owner_id: int) -> bool:
    """
    Owner or admin. An impersonating admin gets the target user's rights,
    so they see exactly what that user would see.
    """
    return identity.user_id == owner_id or identity.is_admin
