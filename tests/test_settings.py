from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from firebase_crud.settings import SettingsError, load_settings


class LoadSettingsTest(unittest.TestCase):
    def test_defaults_without_env(self) -> None:
        settings = load_settings(env={}, dotenv_path="does-not-exist.env")

        self.assertEqual(settings.app_env, "development")
        self.assertEqual(settings.app_display_name, "Firebase CRUD")
        self.assertEqual(settings.firebase_project_id, "")
        self.assertEqual(settings.firebase_credentials, "")
        self.assertEqual(settings.firebase_database_url, "")
        self.assertEqual(settings.firebase_storage_bucket, "")
        self.assertEqual(settings.firebase_web_api_key, "")
        self.assertEqual(settings.users_collection, "users")
        self.assertEqual(settings.session_cookie_ttl_seconds, 3600)
        self.assertEqual(settings.signed_url_ttl_seconds, 3600)
        self.assertEqual(settings.api_allowed_uids, ())

    def test_env_override(self) -> None:
        settings = load_settings(
            env={
                "APP_ENV": "production",
                "APP_DISPLAY_NAME": "CivicCircle",
                "FIREBASE_PROJECT_ID": "demo-project",
                "FIREBASE_CREDENTIALS": "/secrets/sa.json",
                "FIREBASE_DATABASE_URL": "https://demo.firebaseio.com",
                "FIREBASE_STORAGE_BUCKET": "demo.appspot.com",
                "FIREBASE_WEB_API_KEY": "web-key",
                "USERS_COLLECTION": "profiles",
                "SESSION_COOKIE_TTL_SECONDS": "86400",
                "SIGNED_URL_TTL_SECONDS": "120",
            },
            dotenv_path="does-not-exist.env",
        )

        self.assertEqual(settings.app_env, "production")
        self.assertEqual(settings.app_display_name, "CivicCircle")
        self.assertEqual(settings.firebase_project_id, "demo-project")
        self.assertEqual(settings.firebase_credentials, "/secrets/sa.json")
        self.assertEqual(settings.firebase_database_url, "https://demo.firebaseio.com")
        self.assertEqual(settings.firebase_storage_bucket, "demo.appspot.com")
        self.assertEqual(settings.firebase_web_api_key, "web-key")
        self.assertEqual(settings.users_collection, "profiles")
        self.assertEqual(settings.session_cookie_ttl_seconds, 86400)
        self.assertEqual(settings.signed_url_ttl_seconds, 120)

    def test_dotenv_loaded_when_env_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            dotenv = Path(tmpdir) / ".env"
            dotenv.write_text(
                "# firebase\nFIREBASE_PROJECT_ID='demo-project'\nSIGNED_URL_TTL_SECONDS=60\nAPI_ALLOWED_UIDS=uid-a, uid-b,\n",
                encoding="utf-8",
            )

            settings = load_settings(env={}, dotenv_path=dotenv)

        self.assertEqual(settings.firebase_project_id, "demo-project")
        self.assertEqual(settings.signed_url_ttl_seconds, 60)
        self.assertEqual(settings.api_allowed_uids, ("uid-a", "uid-b"))
        self.assertEqual(settings.session_cookie_ttl_seconds, 3600)

    def test_env_has_priority_over_dotenv(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            dotenv = Path(tmpdir) / ".env"
            dotenv.write_text("USERS_COLLECTION=from_dotenv\n", encoding="utf-8")

            settings = load_settings(
                env={"USERS_COLLECTION": "from_env"},
                dotenv_path=dotenv,
            )

        self.assertEqual(settings.users_collection, "from_env")

    def test_invalid_integer_raises(self) -> None:
        with self.assertRaises(SettingsError):
            load_settings(
                env={"SIGNED_URL_TTL_SECONDS": "abc"},
                dotenv_path="does-not-exist.env",
            )

    def test_session_cookie_ttl_out_of_range_raises(self) -> None:
        for value in ("60", "1209601"):
            with self.assertRaises(SettingsError):
                load_settings(
                    env={"SESSION_COOKIE_TTL_SECONDS": value},
                    dotenv_path="does-not-exist.env",
                )

    def test_empty_required_value_raises(self) -> None:
        with self.assertRaises(SettingsError):
            load_settings(env={"USERS_COLLECTION": "  "}, dotenv_path="does-not-exist.env")


if __name__ == "__main__":
    unittest.main()
