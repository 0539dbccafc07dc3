"""
Authorization decisions over a resolved role.

These functions never touch the database or the request: they take the role
already resolved for the current request (ORM Role, RoleOut, or anything with
slug, is_system_admin and permissions) and decide. Callers compose them after
session resolution.
"""

from collections.abc import Collection
from typing import Protocol

from app.core.errors import Forbidden
from app.models.role import ADMIN_ROLE_SLUG


class RoleLike(Protocol):
    slug: str
    is_system_admin: bool
    permissions: Collection[str]


def is_system_admin(role: RoleLike | None) -> bool:
    """True for the administrator role: slug 'admin', which the stored flag mirrors."""
    if role is None:
        return False
    return role.slug == ADMIN_ROLE_SLUG or bool(role.is_system_admin)


def is_allowed(role: RoleLike | None, permission: str) -> bool:
    """
    Deny-by-default permission decision.

    1. No role -> deny.
    2. System admin role -> allow, whatever its stored permission set holds.
    3. Otherwise allow iff permission is literally in the role's permission set.
    """
    if role is None:
        return False
    if is_system_admin(role):
        return True
    return permission in (role.permissions or ())


def check_permission(role: RoleLike | None, permission: str) -> None:
    """Raise Forbidden unless is_allowed(role, permission)."""
    if role is None:
        raise Forbidden("No role assigned.")
    if not is_allowed(role, permission):
        raise Forbidden(f"Missing permission: {permission}")


def check_admin(role: RoleLike | None) -> None:
    """Raise Forbidden unless the role is the system admin role."""
    if not is_system_admin(role):
        raise Forbidden("Admin access required.")
