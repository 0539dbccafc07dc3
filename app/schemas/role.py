"""Request/response schemas for role and permission catalog endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_permissions(value: list[str] | None) -> list[str] | None:
    """Strip, drop blanks and de-duplicate; permissions have set semantics."""
    if value is None:
        return None
    return sorted({p.strip() for p in value if p and p.strip()})


class RoleOut(BaseModel):
    """Full role projection; embedded in every user response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None = None
    permissions: list[str] = Field(default_factory=list)
    is_system_admin: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleCreate(BaseModel):
    """Body for POST /roles. The slug is derived from name."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    description: str | None = Field(default=None, max_length=2000)
    permissions: list[str] = Field(
        default_factory=list,
        description="Permission strings from GET /roles/permissions-list",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must be non-empty")
        return v

    @field_validator("permissions")
    @classmethod
    def normalize_permissions(cls, v: list[str]) -> list[str]:
        return _normalize_permissions(v) or []


class RoleUpdate(BaseModel):
    """Body for PUT /roles/{id}; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Explicit rename of the machine slug",
    )
    description: str | None = Field(default=None, max_length=2000)
    permissions: list[str] | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("name must be non-empty")
        return v

    @field_validator("permissions")
    @classmethod
    def normalize_permissions(cls, v: list[str] | None) -> list[str] | None:
        return _normalize_permissions(v)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
