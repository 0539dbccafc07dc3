"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.role import ADMIN_ROLE_SLUG, Role
from app.models.user import User

__all__ = ["ADMIN_ROLE_SLUG", "Base", "Role", "User"]
