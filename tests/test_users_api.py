"""HTTP tests for auth, users, navigation and dashboard routes against an in-memory database."""

import unittest

from fastapi.testclient import TestClient

from app.core.database import get_db
from app.core.permissions import PERMISSION_CATALOG, VIEW_USERS
from app.main import app
from app.models import User
from tests.helpers import PASSWORD, make_role, make_session_factory, make_user

PREFIX = "/api/v1"


class ApiTestCase(unittest.TestCase):
    """App with get_db bound to a fresh SQLite database holding an admin, a viewer and a plain user."""

    def setUp(self) -> None:
        factory = make_session_factory()
        self.session = factory()
        make_role(self.session, "admin", PERMISSION_CATALOG)
        make_role(self.session, "user")
        make_role(self.session, "viewer", [VIEW_USERS])
        self.admin = make_user(self.session, "admin@admin.com", name="Admin", roles=["admin"])
        self.viewer = make_user(self.session, "viewer@admin.com", name="Viewer", roles=["viewer"])
        self.plain = make_user(self.session, "plain@user.com", name="Plain", roles=["user"])

        def override_get_db():
            db = factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.session.close()

    def login(self, email: str, password: str = PASSWORD) -> dict[str, str]:
        response = self.client.post(f"{PREFIX}/auth", json={"email": email, "password": password})
        self.assertEqual(response.status_code, 200, response.text)
        return {"Authorization": f"Bearer {response.json()['access_token']}"}


class TestAuth(ApiTestCase):
    def test_login_and_me(self) -> None:
        headers = self.login("admin@admin.com")
        me = self.client.get(f"{PREFIX}/auth/me", headers=headers).json()
        self.assertEqual(me["email"], "admin@admin.com")
        self.assertTrue(me["is_admin"])
        self.assertEqual(sorted(me["permissions"]), sorted(PERMISSION_CATALOG))
        self.assertNotIn("password_hash", me)

    def test_wrong_password(self) -> None:
        response = self.client.post(
            f"{PREFIX}/auth", json={"email": "admin@admin.com", "password": "wrong-password"}
        )
        self.assertEqual(response.status_code, 401)

    def test_missing_token(self) -> None:
        self.assertEqual(self.client.get(f"{PREFIX}/users").status_code, 401)

    def test_inactive_user_cannot_enter_panel(self) -> None:
        make_user(self.session, "off@user.com", is_active=False)
        response = self.client.post(f"{PREFIX}/auth", json={"email": "off@user.com", "password": PASSWORD})
        self.assertEqual(response.status_code, 403)

    def test_deactivated_after_login_is_rejected(self) -> None:
        headers = self.login("plain@user.com")
        self.plain.is_active = False
        self.session.commit()
        self.assertEqual(self.client.get(f"{PREFIX}/auth/me", headers=headers).status_code, 403)


class TestNavigationAndDashboard(ApiTestCase):
    def test_navigation_requires_view_users(self) -> None:
        admin_items = self.client.get(f"{PREFIX}/navigation", headers=self.login("admin@admin.com")).json()
        plain_items = self.client.get(f"{PREFIX}/navigation", headers=self.login("plain@user.com")).json()
        self.assertEqual([i["label"] for i in admin_items["items"]], ["Users"])
        self.assertEqual(plain_items["items"], [])

    def test_dashboard_stats(self) -> None:
        response = self.client.get(f"{PREFIX}/dashboard/stats", headers=self.login("plain@user.com"))
        self.assertEqual(response.status_code, 200)
        stats = response.json()["stats"]
        self.assertEqual(stats[0]["value"], 3)
        self.assertEqual([s["placeholder"] for s in stats], [False, True, True, True])


class TestUsersList(ApiTestCase):
    def test_admin_list(self) -> None:
        response = self.client.get(
            f"{PREFIX}/users", params={"sort": "email"}, headers=self.login("admin@admin.com")
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["total"], 3)
        self.assertTrue(body["can_create"])
        self.assertEqual(body["bulk_actions"], ["delete"])
        rows = {r["email"]: r for r in body["rows"]}
        self.assertNotIn("delete", rows["admin@admin.com"]["actions"])
        self.assertIn("delete", rows["plain@user.com"]["actions"])
        self.assertNotIn("password_hash", rows["plain@user.com"])
        self.assertNotIn("password", rows["plain@user.com"])

    def test_filters_in_query_string(self) -> None:
        response = self.client.get(
            f"{PREFIX}/users",
            params=[("roles", "viewer"), ("roles", "user"), ("is_active", "true")],
            headers=self.login("admin@admin.com"),
        )
        emails = sorted(r["email"] for r in response.json()["rows"])
        self.assertEqual(emails, ["plain@user.com", "viewer@admin.com"])

    def test_viewer_list_is_read_only(self) -> None:
        body = self.client.get(f"{PREFIX}/users", headers=self.login("viewer@admin.com")).json()
        self.assertFalse(body["can_create"])
        self.assertEqual(body["bulk_actions"], [])
        self.assertTrue(all(r["actions"] == ["view"] for r in body["rows"]))

    def test_plain_user_forbidden(self) -> None:
        response = self.client.get(f"{PREFIX}/users", headers=self.login("plain@user.com"))
        self.assertEqual(response.status_code, 403)

    def test_bad_sort_column(self) -> None:
        response = self.client.get(
            f"{PREFIX}/users", params={"sort": "password_hash"}, headers=self.login("admin@admin.com")
        )
        self.assertEqual(response.status_code, 422)

    def test_view_page_is_not_mounted(self) -> None:
        response = self.client.get(f"{PREFIX}/users/{self.plain.id}", headers=self.login("admin@admin.com"))
        self.assertIn(response.status_code, (404, 405))


class TestUsersCreateEdit(ApiTestCase):
    def test_create_form_and_create(self) -> None:
        headers = self.login("admin@admin.com")
        form = self.client.get(f"{PREFIX}/users/create", headers=headers).json()
        self.assertEqual([f["name"] for f in form["fields"]], ["name", "email", "password", "is_active", "roles"])

        response = self.client.post(
            f"{PREFIX}/users/create",
            json={"name": "New", "email": "new@user.com", "password": "s3cret-pass", "roles": ["user"]},
            headers=headers,
        )
        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(response.json()["roles"], ["user"])
        self.assertNotIn("password_hash", response.json())

    def test_create_duplicate_email(self) -> None:
        response = self.client.post(
            f"{PREFIX}/users/create",
            json={"name": "Dup", "email": "plain@user.com", "password": "s3cret-pass"},
            headers=self.login("admin@admin.com"),
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"][0]["field"], "email")
        self.assertEqual(self.session.query(User).count(), 3)

    def test_create_forbidden_for_viewer(self) -> None:
        headers = self.login("viewer@admin.com")
        self.assertEqual(self.client.get(f"{PREFIX}/users/create", headers=headers).status_code, 403)
        response = self.client.post(
            f"{PREFIX}/users/create",
            json={"name": "X", "email": "x@user.com", "password": "s3cret-pass"},
            headers=headers,
        )
        self.assertEqual(response.status_code, 403)

    def test_edit_form_and_update(self) -> None:
        headers = self.login("admin@admin.com")
        form = self.client.get(f"{PREFIX}/users/{self.plain.id}/edit", headers=headers).json()
        self.assertEqual(form["values"]["email"], "plain@user.com")
        password_field = next(f for f in form["fields"] if f["name"] == "password")
        self.assertFalse(password_field["required"])

        response = self.client.put(
            f"{PREFIX}/users/{self.plain.id}/edit",
            json={"name": "Plain Renamed", "email": "plain@user.com", "password": ""},
            headers=headers,
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["name"], "Plain Renamed")
        self.login("plain@user.com")

    def test_edit_unknown_user(self) -> None:
        response = self.client.get(f"{PREFIX}/users/9999/edit", headers=self.login("admin@admin.com"))
        self.assertEqual(response.status_code, 404)


class TestUsersDelete(ApiTestCase):
    def test_delete_other_user(self) -> None:
        response = self.client.delete(f"{PREFIX}/users/{self.plain.id}", headers=self.login("admin@admin.com"))
        self.assertEqual(response.status_code, 204)

    def test_self_delete_forbidden(self) -> None:
        response = self.client.delete(f"{PREFIX}/users/{self.admin.id}", headers=self.login("admin@admin.com"))
        self.assertEqual(response.status_code, 403)

    def test_bulk_delete(self) -> None:
        response = self.client.post(
            f"{PREFIX}/users/bulk-delete",
            json={"ids": [self.admin.id, self.plain.id, self.viewer.id]},
            headers=self.login("admin@admin.com"),
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(sorted(body["deleted"]), sorted([self.plain.id, self.viewer.id]))
        self.assertEqual(body["skipped"], [self.admin.id])

    def test_bulk_delete_forbidden_for_viewer(self) -> None:
        response = self.client.post(
            f"{PREFIX}/users/bulk-delete",
            json={"ids": [self.plain.id]},
            headers=self.login("viewer@admin.com"),
        )
        self.assertEqual(response.status_code, 403)


if __name__ == "__main__":
    unittest.main()
