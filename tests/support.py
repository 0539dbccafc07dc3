"""Shared test helpers: a fresh schema per test and shortcuts for roles, users and tokens."""

import unittest

from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.database import SessionLocal, engine
from app.core.security import create_access_token, hash_password
from app.models import ADMIN_ROLE_SLUG, Base, Role, User

API = settings.API_V1_PREFIX
DEFAULT_PASSWORD = "correct-horse-battery"


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables before each test and drops them after."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)

    def make_role(
        self,
        name: str,
        slug: str | None = None,
        permissions: list[str] | None = None,
    ) -> Role:
        role = Role(
            name=name,
            slug=slug or name.lower().replace(" ", "-"),
            description=None,
            permissions=sorted(permissions or []),
        )
        self.db.add(role)
        self.db.commit()
        self.db.refresh(role)
        return role

    def make_admin_role(self) -> Role:
        return self.make_role("Super Admin", slug=ADMIN_ROLE_SLUG)

    def make_user(
        self,
        email: str,
        role: Role | None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
        name: str | None = None,
    ) -> User:
        user = User(
            name=name or email.split("@")[0],
            email=email,
            password_hash=hash_password(password),
            role_id=role.id if role is not None else None,
            is_active=is_active,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def reload(self, model: type, pk: int):
        """Read a row fresh from the database (bypasses this session's cache)."""
        self.db.expire_all()
        return self.db.get(model, pk)


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient bound to the application."""

    def setUp(self) -> None:
        super().setUp()
        from app.main import app

        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        super().tearDown()

    def headers_for(self, user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(sub=user.id)}"}
