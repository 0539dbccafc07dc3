"""Request/response schemas for auth and user endpoints."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    check_password_length,
)
from app.schemas.role import RoleOut

# Upper bound for submitted (not stored) passwords; over-long ones simply fail to verify.
SUBMITTED_PASSWORD_MAX_LEN = 1024


def _validate_email(value: str) -> str:
    """Trim and require a local part and a domain. Case is preserved."""
    value = value.strip()
    local, sep, domain = value.rpartition("@")
    if not sep or not local or not domain or " " in value:
        raise ValueError("email must look like name@domain")
    return value


def _strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class RegisterRequest(BaseModel):
    """Public self-registration. name defaults to the email's local part."""

    name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_optional(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_length(v)


class LoginRequest(BaseModel):
    """Credentials for login. Lengths are not checked to avoid leaking policy."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN, description="Email")
    password: str = Field(
        ..., min_length=1, max_length=SUBMITTED_PASSWORD_MAX_LEN, description="Password"
    )

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=SUBMITTED_PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return check_password_length(v)


class ProfileUpdateRequest(BaseModel):
    """Own profile edit; omitted fields are left unchanged."""

    name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    avatar: str | None = Field(default=None, max_length=2048)

    @field_validator("name", "avatar")
    @classmethod
    def strip_fields(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class CurrentUser(BaseModel):
    """Authenticated user with the role resolved for this request."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: str | None = None
    is_active: bool = True
    role: RoleOut | None = None


class AuthResponse(BaseModel):
    """JWT access token plus the user (with full role) after login or register."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: CurrentUser


class UserCreate(BaseModel):
    """Body for POST /users (staff account with an explicit role)."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role_id: int
    avatar: str | None = Field(default=None, max_length=2048)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must be non-empty")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_length(v)


class UserUpdate(BaseModel):
    """Body for PUT /users/{id}; omitted fields are left unchanged."""

    name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    avatar: str | None = Field(default=None, max_length=2048)
    role_id: int | None = None
    is_active: bool | None = None

    @field_validator("name", "avatar")
    @classmethod
    def strip_fields(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class PasswordResetRequest(BaseModel):
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return check_password_length(v)


class UsersListResponse(BaseModel):
    """Response for GET /users."""

    users: list[CurrentUser]
