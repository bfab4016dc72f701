"""Tests for app.models.user: role predicates, panel access and active/inactive scopes."""

import unittest

from sqlalchemy import select

from app.core.permissions import EDIT_USERS, VIEW_USERS
from app.models import Permission, Role, User
from tests.helpers import make_role, make_session_factory, make_user


class TestCanAccessPanel(unittest.TestCase):
    """Only an explicit is_active=False blocks the panel."""

    def test_unset_flag_is_allowed(self) -> None:
        user = User(name="New", email="new@admin.com", password_hash="x")
        self.assertIsNone(user.is_active)
        self.assertTrue(user.can_access_panel())

    def test_active_is_allowed(self) -> None:
        self.assertTrue(User(is_active=True).can_access_panel())

    def test_inactive_is_blocked(self) -> None:
        self.assertFalse(User(is_active=False).can_access_panel())


class TestRolePredicates(unittest.TestCase):
    """is_admin / is_user / can_manage_users on transient users."""

    def test_admin_role(self) -> None:
        user = User(roles=[Role(name="admin")])
        self.assertTrue(user.is_admin())
        self.assertFalse(user.is_user())

    def test_user_role(self) -> None:
        user = User(roles=[Role(name="user")])
        self.assertTrue(user.is_user())
        self.assertFalse(user.is_admin())

    def test_no_roles(self) -> None:
        user = User()
        self.assertFalse(user.is_admin())
        self.assertFalse(user.is_user())
        self.assertEqual(user.role_names(), [])
        self.assertEqual(user.permission_names(), set())

    def test_can_manage_users_requires_view_users(self) -> None:
        editor = User(roles=[Role(name="editor", permissions=[Permission(name=EDIT_USERS)])])
        viewer = User(roles=[Role(name="viewer", permissions=[Permission(name=VIEW_USERS)])])
        self.assertFalse(editor.can_manage_users())
        self.assertTrue(viewer.can_manage_users())

    def test_role_names_sorted(self) -> None:
        user = User(roles=[Role(name="user"), Role(name="admin")])
        self.assertEqual(user.role_names(), ["admin", "user"])


class TestActiveScopes(unittest.TestCase):
    """User.active / User.inactive filter by the stored flag."""

    def setUp(self) -> None:
        self.session = make_session_factory()()
        make_user(self.session, "on@admin.com", is_active=True)
        make_user(self.session, "off@admin.com", is_active=False)
        make_user(self.session, "also-on@admin.com", is_active=True)

    def tearDown(self) -> None:
        self.session.close()

    def test_active_scope(self) -> None:
        emails = set(self.session.scalars(User.active(select(User.email))))
        self.assertEqual(emails, {"on@admin.com", "also-on@admin.com"})

    def test_inactive_scope(self) -> None:
        emails = set(self.session.scalars(User.inactive(select(User.email))))
        self.assertEqual(emails, {"off@admin.com"})

    def test_scope_works_with_legacy_query(self) -> None:
        self.assertEqual(User.inactive(self.session.query(User)).count(), 1)


class TestPersistedPermissions(unittest.TestCase):
    """Effective permissions are read through roles stored in the database."""

    def test_permissions_follow_role_grants(self) -> None:
        session = make_session_factory()()
        try:
            make_role(session, "viewer", [VIEW_USERS])
            user = make_user(session, "v@admin.com", roles=["viewer"])
            self.assertTrue(user.has_permission(VIEW_USERS))
            self.assertFalse(user.has_permission(EDIT_USERS))

            role = session.scalar(select(Role).where(Role.name == "viewer"))
            role.permissions.append(Permission(name=EDIT_USERS))
            session.commit()
            self.assertTrue(user.has_permission(EDIT_USERS))
        finally:
            session.close()


if __name__ == "__main__":
    unittest.main()
