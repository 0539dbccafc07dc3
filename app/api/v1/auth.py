"""JWT auth routes and auth dependencies (get_current_user, require_permission, require_admin)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import InvalidToken
from app.core.permissions import get_permission_registry
from app.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from app.schemas.role import MessageResponse
from app.services import accounts
from app.services.authorization import check_admin, check_permission
from app.services.sessions import resolve_session

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT and return the user with its current role."""
    if credentials is None:
        raise InvalidToken("Not authenticated.")
    user = resolve_session(db, credentials.credentials)
    request.state.user_id = user.id
    return CurrentUser.model_validate(user)


def require_permission(permission: str) -> Callable[..., CurrentUser]:
    """
    Build a dependency that allows the request only if the current role grants
    permission (the system admin role always passes). Raises 403 otherwise.
    """
    if permission not in get_permission_registry():
        raise ValueError(f"Route requires unregistered permission {permission!r}")

    def _require(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        check_permission(current_user.role, permission)
        return current_user

    return _require


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require the system admin role, regardless of granted permissions."""
    check_admin(current_user.role)
    return current_user


def _auth_response(token: str, user: object) -> AuthResponse:
    return AuthResponse(
        access_token=token,
        token_type="bearer",
        user=CurrentUser.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """
    Self-register with the default role. Returns a token so the caller is
    logged in immediately.
    """
    token, user = accounts.register(db, settings, body.name, body.email, body.password)
    return _auth_response(token, user)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token and the
    user with its full role. Send the token as: Authorization: Bearer <access_token>
    """
    token, user = accounts.login(db, body.email, body.password)
    return _auth_response(token, user)


@router.get("/me", response_model=CurrentUser)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    return current_user


@router.put("/profile", response_model=CurrentUser)
def update_profile(
    body: ProfileUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Update own name and avatar."""
    user = accounts.update_profile(db, current_user.id, body.name, body.avatar)
    return CurrentUser.model_validate(user)


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    accounts.change_password(db, current_user.id, body.current_password, body.new_password)
    return MessageResponse(message="Password changed.")
