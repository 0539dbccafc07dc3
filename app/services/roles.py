"""Role catalog: CRUD over roles and the system admin role seed."""

import logging
import re
import unicodedata
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    DuplicateRole,
    InvalidRole,
    NotFound,
    ProtectedResource,
    UnknownPermission,
)
from app.core.permissions import PermissionRegistry
from app.models import ADMIN_ROLE_SLUG, Role, User
from app.services.authorization import is_system_admin

logger = logging.getLogger(__name__)

ADMIN_ROLE_NAME = "Super Admin"
ADMIN_ROLE_DESCRIPTION = "System administrator; passes every permission check."

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
# Letters that NFKD does not decompose into an ASCII base.
_SLUG_TRANSLATE = str.maketrans({"đ": "d", "Đ": "D", "ø": "o", "Ø": "O", "ß": "ss"})


def slugify(value: str) -> str:
    """Lowercase, hyphenated ASCII slug: 'Nhân viên kho' -> 'nhan-vien-kho'."""
    decomposed = unicodedata.normalize("NFKD", value.translate(_SLUG_TRANSLATE))
    ascii_only = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _SLUG_PATTERN.sub("-", ascii_only.lower()).strip("-")


def _validate_permissions(registry: PermissionRegistry, permissions: list[str]) -> list[str]:
    unknown = registry.unknown(permissions)
    if unknown:
        raise UnknownPermission(f"Unknown permissions: {', '.join(unknown)}")
    return sorted(set(permissions))


def _reserve_check(slug: str) -> None:
    if slug == ADMIN_ROLE_SLUG:
        raise ProtectedResource(
            f"Slug '{ADMIN_ROLE_SLUG}' is reserved for the system administrator role."
        )


def _ensure_unique(db: Session, name: str, slug: str, exclude_id: int | None = None) -> None:
    query = db.query(Role).filter(or_(Role.name == name, Role.slug == slug))
    if exclude_id is not None:
        query = query.filter(Role.id != exclude_id)
    if query.first() is not None:
        raise DuplicateRole(f"A role named '{name}' or with slug '{slug}' already exists.")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateRole() from e


def list_roles(db: Session) -> list[Role]:
    return db.query(Role).order_by(Role.id).all()


def get_role(db: Session, role_id: int) -> Role:
    role = db.query(Role).filter(Role.id == role_id).first()
    if role is None:
        raise NotFound(f"Role {role_id} not found.")
    return role


def create_role(
    db: Session,
    registry: PermissionRegistry,
    name: str,
    description: str | None = None,
    permissions: list[str] | None = None,
) -> Role:
    """
    Create a role; the slug is derived from name and stays fixed afterwards.

    Raises InvalidRole (no usable slug), ProtectedResource (reserved slug),
    UnknownPermission, or DuplicateRole.
    """
    name = name.strip()
    slug = slugify(name)
    if not slug:
        raise InvalidRole("Role name must contain at least one letter or digit.")
    _reserve_check(slug)
    granted = _validate_permissions(registry, permissions or [])
    _ensure_unique(db, name, slug)

    role = Role(
        name=name,
        slug=slug,
        description=description,
        permissions=granted,
    )
    db.add(role)
    _commit(db)
    db.refresh(role)
    logger.info("Role created: id=%s slug=%s permissions=%s", role.id, role.slug, len(granted))
    return role


def update_role(
    db: Session,
    registry: PermissionRegistry,
    role_id: int,
    fields: dict[str, Any],
) -> Role:
    """
    Apply a partial update (name, slug, description, permissions).

    The slug changes only when given explicitly; the admin role keeps its slug.
    Concurrent edits are last-write-wins.
    """
    role = get_role(db, role_id)

    granted = None
    if fields.get("permissions") is not None:
        granted = _validate_permissions(registry, fields["permissions"])
    name = fields.get("name") or role.name
    slug = role.slug
    if fields.get("slug") is not None:
        slug = slugify(fields["slug"])
        if not slug:
            raise InvalidRole("Slug must contain at least one letter or digit.")
        if is_system_admin(role) and slug != role.slug:
            raise ProtectedResource("The system administrator role's slug cannot be changed.")
        if not is_system_admin(role):
            _reserve_check(slug)
    if name != role.name or slug != role.slug:
        _ensure_unique(db, name, slug, exclude_id=role.id)

    role.name = name
    role.slug = slug
    if "description" in fields:
        role.description = fields["description"]
    if granted is not None:
        role.permissions = granted

    _commit(db)
    db.refresh(role)
    logger.info("Role updated: id=%s slug=%s fields=%s", role.id, role.slug, sorted(fields))
    return role


def delete_role(db: Session, role_id: int) -> None:
    """
    Delete a role. Users holding it are left without a role.

    Raises ProtectedResource for the system admin role, whoever the caller is.
    """
    role = get_role(db, role_id)
    if is_system_admin(role):
        raise ProtectedResource("The system administrator role cannot be deleted.")

    slug = role.slug
    detached = (
        db.query(User)
        .filter(User.role_id == role.id)
        .update({User.role_id: None}, synchronize_session=False)
    )
    db.delete(role)
    db.commit()
    logger.info("Role deleted: id=%s slug=%s users_detached=%s", role_id, slug, detached)


def get_permission_catalog(registry: PermissionRegistry) -> dict[str, dict[str, str]]:
    """Grouped map module -> action -> permission string."""
    return registry.catalog()


def ensure_admin_role(db: Session) -> Role:
    """Create the system admin role if missing; idempotent."""
    role = db.query(Role).filter(Role.slug == ADMIN_ROLE_SLUG).first()
    if role is None:
        role = Role(
            name=ADMIN_ROLE_NAME,
            slug=ADMIN_ROLE_SLUG,
            description=ADMIN_ROLE_DESCRIPTION,
            permissions=[],
        )
        db.add(role)
        db.commit()
        db.refresh(role)
        logger.info("Seeded system admin role: id=%s", role.id)
    return role


def ensure_role(
    db: Session,
    registry: PermissionRegistry,
    name: str,
    description: str | None,
    permissions: list[str],
) -> Role:
    """Return the role whose slug matches name, creating it if missing."""
    role = db.query(Role).filter(Role.slug == slugify(name)).first()
    if role is not None:
        return role
    return create_role(db, registry, name, description, permissions)
