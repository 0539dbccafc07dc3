"""Role catalog endpoints; everything here requires roles.manage."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_permission
from app.core.database import get_db
from app.core.permissions import ROLES_MANAGE, PermissionRegistry, get_permission_registry
from app.schemas.auth import CurrentUser
from app.schemas.role import MessageResponse, RoleCreate, RoleOut, RoleUpdate
from app.services import roles as role_service

router = APIRouter()

CanManageRoles = Annotated[CurrentUser, Depends(require_permission(ROLES_MANAGE))]
Registry = Annotated[PermissionRegistry, Depends(get_permission_registry)]


@router.get("/permissions-list", response_model=dict[str, dict[str, str]])
def get_permission_catalog(
    _user: CanManageRoles,
    registry: Registry,
) -> dict[str, dict[str, str]]:
    """All grantable permissions grouped by module, for the role editor's checkbox matrix."""
    return role_service.get_permission_catalog(registry)


@router.get("", response_model=list[RoleOut])
def list_roles(
    _user: CanManageRoles,
    db: Annotated[Session, Depends(get_db)],
) -> list[RoleOut]:
    return [RoleOut.model_validate(r) for r in role_service.list_roles(db)]


@router.get("/{role_id}", response_model=RoleOut)
def get_role(
    role_id: int,
    _user: CanManageRoles,
    db: Annotated[Session, Depends(get_db)],
) -> RoleOut:
    return RoleOut.model_validate(role_service.get_role(db, role_id))


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role(
    body: RoleCreate,
    _user: CanManageRoles,
    db: Annotated[Session, Depends(get_db)],
    registry: Registry,
) -> RoleOut:
    """Create a role. Its slug is derived from the name; permissions must be registered."""
    role = role_service.create_role(
        db, registry, body.name, body.description, body.permissions
    )
    return RoleOut.model_validate(role)


@router.put("/{role_id}", response_model=RoleOut)
def update_role(
    role_id: int,
    body: RoleUpdate,
    _user: CanManageRoles,
    db: Annotated[Session, Depends(get_db)],
    registry: Registry,
) -> RoleOut:
    """
    Update name, description, permissions, or rename the slug explicitly.
    Changes apply to every holder on their next request.
    """
    role = role_service.update_role(
        db, registry, role_id, body.model_dump(exclude_unset=True)
    )
    return RoleOut.model_validate(role)


@router.delete("/{role_id}", response_model=MessageResponse)
def delete_role(
    role_id: int,
    _user: CanManageRoles,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a role. The system admin role can never be deleted."""
    role_service.delete_role(db, role_id)
    return MessageResponse(message="Role deleted.")
