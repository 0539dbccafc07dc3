"""Unit tests for app.services.authorization: admin bypass, deny-by-default, admin-only guard."""

import unittest
from types import SimpleNamespace

from app.core.errors import Forbidden
from app.core.permissions import get_permission_registry
from app.schemas.role import RoleOut
from app.services.authorization import (
    check_admin,
    check_permission,
    is_allowed,
    is_system_admin,
)


def _role(
    slug: str = "staff",
    permissions: list[str] | None = None,
    is_system_admin: bool = False,
) -> RoleOut:
    """Build a RoleOut as resolved for a request."""
    return RoleOut(
        id=1,
        name=slug.title(),
        slug=slug,
        permissions=permissions or [],
        is_system_admin=is_system_admin,
    )


def _admin(permissions: list[str] | None = None) -> RoleOut:
    return _role(slug="admin", permissions=permissions, is_system_admin=True)


class TestAdminBypass(unittest.TestCase):
    """The system admin role passes every check, whatever its stored permissions."""

    def test_arbitrary_permission_with_empty_set(self) -> None:
        self.assertTrue(is_allowed(_admin(), "anything.random"))

    def test_every_registered_permission(self) -> None:
        role = _admin()
        for permission in get_permission_registry().all():
            self.assertTrue(is_allowed(role, permission), permission)

    def test_stale_permission_list_is_ignored(self) -> None:
        role = _admin(permissions=["removed.permission"])
        self.assertTrue(is_allowed(role, "roles.manage"))
        check_permission(role, "roles.manage")

    def test_plain_object_with_flag(self) -> None:
        role = SimpleNamespace(slug="admin", is_system_admin=True, permissions=None)
        self.assertTrue(is_allowed(role, "orders.view"))

    def test_admin_slug_passes_without_stored_flag(self) -> None:
        role = SimpleNamespace(slug="admin", is_system_admin=False, permissions=[])
        self.assertTrue(is_system_admin(role))
        for permission in get_permission_registry().all():
            self.assertTrue(is_allowed(role, permission), permission)
        check_admin(role)


class TestDenyByDefault(unittest.TestCase):
    """A non-admin role passes only for permissions literally in its set."""

    def test_granted_permission_allowed(self) -> None:
        self.assertTrue(is_allowed(_role(permissions=["products.view"]), "products.view"))

    def test_missing_permission_denied(self) -> None:
        self.assertFalse(is_allowed(_role(permissions=["products.view"]), "products.delete"))

    def test_unrelated_permission_does_not_grant(self) -> None:
        role = _role(permissions=["products.view", "orders.view", "users.manage"])
        self.assertFalse(is_allowed(role, "products.delete"))

    def test_no_prefix_or_wildcard_matching(self) -> None:
        role = _role(permissions=["products", "products.*", "products.view "])
        self.assertFalse(is_allowed(role, "products.view"))

    def test_empty_permission_set(self) -> None:
        self.assertFalse(is_allowed(_role(permissions=[]), "products.view"))

    def test_no_role_denied(self) -> None:
        self.assertFalse(is_allowed(None, "products.view"))


class TestCheckPermission(unittest.TestCase):
    """check_permission raises Forbidden naming the missing permission."""

    def test_message_names_missing_permission(self) -> None:
        with self.assertRaises(Forbidden) as ctx:
            check_permission(_role(permissions=["products.view"]), "products.delete")
        self.assertIn("products.delete", ctx.exception.message)
        self.assertNotIn("products.view", ctx.exception.message)
        self.assertEqual(ctx.exception.status_code, 403)

    def test_no_role_message(self) -> None:
        with self.assertRaises(Forbidden) as ctx:
            check_permission(None, "products.view")
        self.assertIn("No role", ctx.exception.message)

    def test_allowed_returns_none(self) -> None:
        self.assertIsNone(check_permission(_role(permissions=["orders.view"]), "orders.view"))


class TestCheckAdmin(unittest.TestCase):
    """check_admin is a coarse flag check, independent of granted permissions."""

    def test_admin_passes(self) -> None:
        check_admin(_admin())
        self.assertTrue(is_system_admin(_admin()))

    def test_role_with_every_permission_is_not_admin(self) -> None:
        role = _role(permissions=sorted(get_permission_registry().all()))
        with self.assertRaises(Forbidden):
            check_admin(role)

    def test_no_role(self) -> None:
        self.assertFalse(is_system_admin(None))
        with self.assertRaises(Forbidden):
            check_admin(None)


if __name__ == "__main__":
    unittest.main()
