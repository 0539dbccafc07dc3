"""HTTP tests for /auth: register, login, me, profile and change-password."""

import unittest

from app.core.security import decode_access_token
from app.models import User
from tests.support import API, DEFAULT_PASSWORD, ApiTestCase


class TestRegisterEndpoint(ApiTestCase):
    """POST /auth/register creates a user with the default role and logs them in."""

    def setUp(self) -> None:
        super().setUp()
        self.staff = self.make_role("Staff", permissions=["products.view"])

    def _register(self, email: str, password: str = "password-123", **extra: str):
        return self.client.post(
            f"{API}/auth/register", json={"email": email, "password": password, **extra}
        )

    def test_created_with_token_and_full_role(self) -> None:
        resp = self._register("new@shop.test", name="New Person")
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["token_type"], "bearer")
        self.assertEqual(body["user"]["name"], "New Person")
        self.assertEqual(body["user"]["role"]["slug"], "staff")
        self.assertEqual(body["user"]["role"]["permissions"], ["products.view"])
        self.assertNotIn("password_hash", body["user"])

        me = self.client.get(
            f"{API}/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}
        )
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["email"], "new@shop.test")

    def test_register_twice_keeps_first_account(self) -> None:
        self.assertEqual(self._register("x@y.com", "first-password").status_code, 201)
        resp = self._register("x@y.com", "second-password")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "DuplicateEmail")

        login = self.client.post(
            f"{API}/auth/login", json={"email": "x@y.com", "password": "first-password"}
        )
        self.assertEqual(login.status_code, 200)

    def test_password_not_stored_in_plaintext(self) -> None:
        self._register("p@shop.test", "plain-text-pw")
        user = self.db.query(User).filter(User.email == "p@shop.test").one()
        self.assertNotEqual(user.password_hash, "plain-text-pw")

    def test_invalid_email_rejected(self) -> None:
        self.assertEqual(self._register("not-an-email").status_code, 422)

    def test_short_password_rejected(self) -> None:
        self.assertEqual(self._register("short@shop.test", "short").status_code, 422)

    def test_password_over_72_bytes_rejected(self) -> None:
        self.assertEqual(self._register("long@shop.test", "a" * 73).status_code, 422)
        self.assertEqual(self._register("wide@shop.test", "\u00e9" * 40).status_code, 422)
        self.assertEqual(self.db.query(User).count(), 0)

    def test_padded_email_logs_in_as_submitted(self) -> None:
        self.assertEqual(self._register(" a@b.com ", "padded-password").status_code, 201)
        login = self.client.post(
            f"{API}/auth/login", json={"email": " a@b.com ", "password": "padded-password"}
        )
        self.assertEqual(login.status_code, 200)
        self.assertEqual(login.json()["user"]["email"], "a@b.com")

    def test_no_roles_is_server_configuration_error(self) -> None:
        self.db.delete(self.staff)
        self.db.commit()
        resp = self._register("early@shop.test")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["code"], "ConfigurationError")


class TestLoginEndpoint(ApiTestCase):
    """POST /auth/login returns a token and the user with its full role."""

    def setUp(self) -> None:
        super().setUp()
        self.role = self.make_role("Staff", permissions=["orders.view"])
        self.user = self.make_user("staff@shop.test", self.role)

    def _login(self, email: str, password: str):
        return self.client.post(f"{API}/auth/login", json={"email": email, "password": password})

    def test_success(self) -> None:
        resp = self._login("staff@shop.test", DEFAULT_PASSWORD)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["user"]["id"], self.user.id)
        self.assertIsInstance(body["user"]["role"], dict)
        self.assertEqual(body["user"]["role"]["permissions"], ["orders.view"])

    def test_token_carries_no_authorization_data(self) -> None:
        token = self._login("staff@shop.test", DEFAULT_PASSWORD).json()["access_token"]
        payload = decode_access_token(token)
        self.assertEqual(set(payload), {"sub", "iat", "exp"})
        self.assertNotIn("orders.view", token)

    def test_wrong_password_and_unknown_email(self) -> None:
        wrong = self._login("staff@shop.test", "wrong-password")
        unknown = self._login("ghost@shop.test", DEFAULT_PASSWORD)
        self.assertEqual(wrong.status_code, 400)
        self.assertEqual(unknown.status_code, 400)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json()["code"], "InvalidCredentials")

    def test_disabled_account(self) -> None:
        self.user.is_active = False
        self.db.commit()
        resp = self._login("staff@shop.test", DEFAULT_PASSWORD)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["code"], "AccountDisabled")

    def test_email_match_is_case_sensitive(self) -> None:
        self.assertEqual(self._login("STAFF@shop.test", DEFAULT_PASSWORD).status_code, 400)

    def test_password_sharing_first_72_bytes_rejected(self) -> None:
        user = self.make_user("long@shop.test", self.role, password="p" * 72)
        self.assertEqual(self._login(user.email, "p" * 72).status_code, 200)
        resp = self._login(user.email, "p" * 72 + "extra")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "InvalidCredentials")


class TestMeEndpoint(ApiTestCase):
    """GET /auth/me resolves the session on every call."""

    def setUp(self) -> None:
        super().setUp()
        self.role = self.make_role("Staff", permissions=["products.view"])
        self.user = self.make_user("a@shop.test", self.role)

    def test_returns_user_with_role(self) -> None:
        resp = self.client.get(f"{API}/auth/me", headers=self.headers_for(self.user))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["role"]["slug"], "staff")

    def test_missing_token(self) -> None:
        resp = self.client.get(f"{API}/auth/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "InvalidToken")
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_malformed_token(self) -> None:
        resp = self.client.get(f"{API}/auth/me", headers={"Authorization": "Bearer abc.def.ghi"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "InvalidToken")

    def test_non_bearer_scheme(self) -> None:
        resp = self.client.get(f"{API}/auth/me", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        self.assertEqual(resp.status_code, 401)

    def test_disabled_user_with_unexpired_token(self) -> None:
        headers = self.headers_for(self.user)
        self.user.is_active = False
        self.db.commit()
        resp = self.client.get(f"{API}/auth/me", headers=headers)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["code"], "AccountDisabled")

    def test_deleted_user(self) -> None:
        headers = self.headers_for(self.user)
        self.db.delete(self.user)
        self.db.commit()
        resp = self.client.get(f"{API}/auth/me", headers=headers)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "UserNotFound")

    def test_user_without_role(self) -> None:
        user = self.make_user("norole@shop.test", None)
        resp = self.client.get(f"{API}/auth/me", headers=self.headers_for(user))
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["role"])


class TestProfileAndPassword(ApiTestCase):
    """PUT /auth/profile and PUT /auth/change-password."""

    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user("a@shop.test", self.make_role("Staff"))
        self.headers = self.headers_for(self.user)

    def test_update_profile_returns_role(self) -> None:
        resp = self.client.put(
            f"{API}/auth/profile",
            json={"name": "Renamed", "avatar": "https://cdn.test/me.png"},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["name"], "Renamed")
        self.assertEqual(body["avatar"], "https://cdn.test/me.png")
        self.assertEqual(body["role"]["slug"], "staff")

    def test_change_password(self) -> None:
        resp = self.client.put(
            f"{API}/auth/change-password",
            json={"current_password": DEFAULT_PASSWORD, "new_password": "another-password"},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200)
        login = self.client.post(
            f"{API}/auth/login", json={"email": "a@shop.test", "password": "another-password"}
        )
        self.assertEqual(login.status_code, 200)

    def test_change_password_wrong_current(self) -> None:
        resp = self.client.put(
            f"{API}/auth/change-password",
            json={"current_password": "not-my-password", "new_password": "another-password"},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "InvalidCredentials")

    def test_change_password_requires_token(self) -> None:
        resp = self.client.put(
            f"{API}/auth/change-password",
            json={"current_password": DEFAULT_PASSWORD, "new_password": "another-password"},
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "InvalidToken")


if __name__ == "__main__":
    unittest.main()
