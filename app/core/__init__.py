"""Core app configuration, database, security and the permission registry."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.permissions import PermissionRegistry, get_permission_registry

__all__ = [
    "PermissionRegistry",
    "get_db",
    "get_permission_registry",
    "get_settings",
    "settings",
]
