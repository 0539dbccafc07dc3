"""Staff account management: list, create, edit, delete and admin password reset."""

import logging
from typing import Any

from sqlalchemy.orm import Session, joinedload

from app.core.errors import NotFound, ProtectedResource
from app.core.security import hash_password
from app.models import User
from app.schemas.auth import CurrentUser
from app.services.accounts import commit_new_user, ensure_email_available, load_user
from app.services.authorization import check_admin, is_system_admin
from app.services.roles import get_role

logger = logging.getLogger(__name__)


def _get_user(db: Session, user_id: int) -> User:
    user = load_user(db, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found.")
    return user


def list_users(db: Session) -> list[User]:
    """All users, newest first, with roles joined."""
    return (
        db.query(User)
        .options(joinedload(User.role))
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )


def create_user(
    db: Session,
    actor: CurrentUser,
    name: str,
    email: str,
    password: str,
    role_id: int,
    avatar: str | None = None,
) -> User:
    """
    Create a staff account with an explicit role.

    Only an admin may create another admin. Raises DuplicateEmail or NotFound.
    """
    ensure_email_available(db, email)
    role = get_role(db, role_id)
    if is_system_admin(role):
        check_admin(actor.role)

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role_id=role.id,
        avatar=avatar,
        is_active=True,
    )
    commit_new_user(db, user)
    logger.info("User created: id=%s role_id=%s by user id=%s", user.id, role.id, actor.id)
    return load_user(db, user.id)


def update_user(db: Session, actor: CurrentUser, user_id: int, fields: dict[str, Any]) -> User:
    """
    Edit name, avatar, role assignment or the active flag.

    Granting, revoking or disabling a system admin account requires an admin.
    """
    user = _get_user(db, user_id)
    touches_admin = is_system_admin(user.role)

    if fields.get("role_id") is not None and fields["role_id"] != user.role_id:
        new_role = get_role(db, fields["role_id"])
        if touches_admin or is_system_admin(new_role):
            check_admin(actor.role)
        user.role_id = new_role.id
    if fields.get("is_active") is not None and fields["is_active"] != user.is_active:
        if touches_admin:
            check_admin(actor.role)
        user.is_active = fields["is_active"]
    if fields.get("name"):
        user.name = fields["name"]
    if "avatar" in fields:
        user.avatar = fields["avatar"]

    db.commit()
    logger.info("User updated: id=%s fields=%s by user id=%s", user_id, sorted(fields), actor.id)
    return load_user(db, user_id)


def delete_user(db: Session, actor: CurrentUser, user_id: int) -> None:
    """Hard-delete a user. System admin accounts and the caller's own account are refused."""
    user = _get_user(db, user_id)
    if is_system_admin(user.role):
        raise ProtectedResource("System administrator accounts cannot be deleted.")
    if user.id == actor.id:
        raise ProtectedResource("You cannot delete your own account.")
    db.delete(user)
    db.commit()
    logger.info("User deleted: id=%s by user id=%s", user_id, actor.id)


def reset_password(db: Session, actor: CurrentUser, user_id: int, new_password: str) -> None:
    """Set a new password for another user (admin-only route)."""
    user = _get_user(db, user_id)
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Password reset: user id=%s by user id=%s", user_id, actor.id)
