"""
Permission registry: every grantable permission string, grouped by module.

Route declarations import the constants below; the admin UI reads the same data
through GET /roles/permissions-list. A permission is "<module>.<action>".
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType

PRODUCTS_VIEW = "products.view"
PRODUCTS_CREATE = "products.create"
PRODUCTS_EDIT = "products.edit"
PRODUCTS_DELETE = "products.delete"

CATEGORIES_VIEW = "categories.view"
# add/edit/delete share one permission
CATEGORIES_MANAGE = "categories.manage"

ORDERS_VIEW = "orders.view"
ORDERS_UPDATE_STATUS = "orders.update_status"

USERS_VIEW = "users.view"
USERS_MANAGE = "users.manage"

ROLES_MANAGE = "roles.manage"

PERMISSION_GROUPS: dict[str, dict[str, str]] = {
    "products": {
        "view": PRODUCTS_VIEW,
        "create": PRODUCTS_CREATE,
        "edit": PRODUCTS_EDIT,
        "delete": PRODUCTS_DELETE,
    },
    "categories": {
        "view": CATEGORIES_VIEW,
        "manage": CATEGORIES_MANAGE,
    },
    "orders": {
        "view": ORDERS_VIEW,
        "update_status": ORDERS_UPDATE_STATUS,
    },
    "users": {
        "view": USERS_VIEW,
        "manage": USERS_MANAGE,
    },
    "roles": {
        "manage": ROLES_MANAGE,
    },
}


def _freeze(groups: Mapping[str, Mapping[str, str]]) -> Mapping[str, Mapping[str, str]]:
    return MappingProxyType(
        {module: MappingProxyType(dict(actions)) for module, actions in groups.items()}
    )


@dataclass(frozen=True)
class PermissionRegistry:
    """Immutable catalog of permission strings (module -> action -> permission)."""

    groups: Mapping[str, Mapping[str, str]]
    _all: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for module, actions in self.groups.items():
            for action, permission in actions.items():
                if permission != f"{module}.{action}":
                    raise ValueError(
                        f"Permission {permission!r} does not match {module}.{action}"
                    )
        object.__setattr__(self, "groups", _freeze(self.groups))
        object.__setattr__(
            self,
            "_all",
            frozenset(p for actions in self.groups.values() for p in actions.values()),
        )

    def __contains__(self, permission: object) -> bool:
        return permission in self._all

    def all(self) -> frozenset[str]:
        return self._all

    def catalog(self) -> dict[str, dict[str, str]]:
        """Plain nested copy for serialization; callers may mutate it freely."""
        return {module: dict(actions) for module, actions in self.groups.items()}

    def unknown(self, permissions: Iterable[str]) -> list[str]:
        """Return the given permissions that are not in the registry, sorted."""
        return sorted({p for p in permissions if p not in self._all})


@lru_cache
def get_permission_registry() -> PermissionRegistry:
    """Process-wide registry (safe to call from dependencies)."""
    return PermissionRegistry(PERMISSION_GROUPS)
