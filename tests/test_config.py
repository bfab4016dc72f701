"""Tests for app.core.config: settings validation."""

import unittest

from pydantic import SecretStr, ValidationError

from app.core.config import Settings


class TestSettingsValidation(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        settings = Settings(DATABASE_URL="postgresql://u:p@localhost:5432/db")
        self.assertEqual(settings.BOOTSTRAP_ADMIN_EMAIL, "admin@admin.com")
        self.assertFalse(settings.SEED_DEMO_USER)

    def test_rejects_non_postgres_url(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(DATABASE_URL="mysql://u:p@localhost/db")

    def test_rejects_short_seed_password(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(BOOTSTRAP_ADMIN_PASSWORD=SecretStr("short"))

    def test_rejects_bad_seed_email(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(BOOTSTRAP_ADMIN_EMAIL="   ")

    def test_strips_seed_values(self) -> None:
        settings = Settings(BOOTSTRAP_ADMIN_EMAIL=" root@admin.com ", BOOTSTRAP_ADMIN_NAME=" Root ")
        self.assertEqual(settings.BOOTSTRAP_ADMIN_EMAIL, "root@admin.com")
        self.assertEqual(settings.BOOTSTRAP_ADMIN_NAME, "Root")


if __name__ == "__main__":
    unittest.main()
