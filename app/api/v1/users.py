"""Staff account management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin, require_permission
from app.core.database import get_db
from app.core.permissions import USERS_MANAGE, USERS_VIEW
from app.schemas.auth import (
    CurrentUser,
    PasswordResetRequest,
    UserCreate,
    UsersListResponse,
    UserUpdate,
)
from app.schemas.role import MessageResponse
from app.services import users as user_service

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_users(
    _user: Annotated[CurrentUser, Depends(require_permission(USERS_VIEW))],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users, newest first, each with its role."""
    users = user_service.list_users(db)
    return UsersListResponse(users=[CurrentUser.model_validate(u) for u in users])


@router.post("", response_model=CurrentUser, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    actor: Annotated[CurrentUser, Depends(require_permission(USERS_MANAGE))],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    user = user_service.create_user(
        db,
        actor,
        name=body.name,
        email=body.email,
        password=body.password,
        role_id=body.role_id,
        avatar=body.avatar,
    )
    return CurrentUser.model_validate(user)


@router.put("/{user_id}", response_model=CurrentUser)
def update_user(
    user_id: int,
    body: UserUpdate,
    actor: Annotated[CurrentUser, Depends(require_permission(USERS_MANAGE))],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Edit profile fields, reassign the role, or enable/disable the account."""
    user = user_service.update_user(db, actor, user_id, body.model_dump(exclude_unset=True))
    return CurrentUser.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    actor: Annotated[CurrentUser, Depends(require_permission(USERS_MANAGE))],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    user_service.delete_user(db, actor, user_id)
    return MessageResponse(message="User deleted.")


@router.put("/{user_id}/password", response_model=MessageResponse)
def reset_password(
    user_id: int,
    body: PasswordResetRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Set a new password for any user (admin only)."""
    user_service.reset_password(db, admin, user_id, body.new_password)
    return MessageResponse(message="Password reset.")
