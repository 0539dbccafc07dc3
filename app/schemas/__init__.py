"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    PasswordResetRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserCreate,
    UsersListResponse,
    UserUpdate,
)
from app.schemas.health import HealthResponse
from app.schemas.role import MessageResponse, RoleCreate, RoleOut, RoleUpdate

__all__ = [
    "AuthResponse",
    "ChangePasswordRequest",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PasswordResetRequest",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "RoleCreate",
    "RoleOut",
    "RoleUpdate",
    "UserCreate",
    "UserUpdate",
    "UsersListResponse",
]
