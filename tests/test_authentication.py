from __future__ import annotations

import json
import unittest

import httpx

from firebase_crud.auth.authentication import MISSING_PROFILE, Authentication
from firebase_crud.auth.identity_toolkit import IdentityToolkitClient
from firebase_crud.firebase_app import FirebaseServices
from firebase_crud.settings import load_settings
from tests.fakes import FakeAuth, FakeFirestoreClient


def _services(**env: str) -> FirebaseServices:
    settings = load_settings(env={"APP_DISPLAY_NAME": "CivicCircle", **env}, dotenv_path="does-not-exist.env")
    return FirebaseServices(app="test-app", settings=settings)


def _toolkit() -> IdentityToolkitClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("accounts:signInWithPassword"):
            if json.loads(request.content).get("password") == "secret":
                return httpx.Response(200, json={"localId": "user-1", "idToken": "t", "refreshToken": "r"})
            return httpx.Response(400, json={"error": {"message": "INVALID_LOGIN_CREDENTIALS"}})
        return httpx.Response(200, json={"email": "ada@example.com"})

    return IdentityToolkitClient("web-key", http_client=httpx.Client(transport=httpx.MockTransport(handler)))


class AuthenticationTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.auth = FakeAuth()
        self.firestore = FakeFirestoreClient()
        self.authentication = Authentication(
            _services(),
            auth_module=self.auth,
            identity_toolkit=_toolkit(),
            firestore_client=self.firestore,
        )

    async def test_user_crud(self) -> None:
        created = await self.authentication.create_user({"email": "ada@example.com", "display_name": "Ada"})
        uid = created.payload

        fetched = await self.authentication.get_user(uid)
        updated = await self.authentication.update_user(uid, {"display_name": "Ada L."})
        deleted = await self.authentication.delete_user(uid)
        missing = await self.authentication.get_user(uid)

        self.assertEqual(created, (True, "user-1"))
        self.assertEqual(fetched.payload["email"], "ada@example.com")
        self.assertEqual(updated.payload["display_name"], "Ada L.")
        self.assertEqual(deleted, (True, uid))
        self.assertFalse(missing.ok)
        self.assertIn("No user record found", missing.payload)
        self.assertEqual(self.auth.apps_seen, ["test-app"])

    async def test_duplicate_email_fails(self) -> None:
        await self.authentication.create_user({"email": "ada@example.com"})

        outcome = await self.authentication.create_user({"email": "ada@example.com"})

        self.assertFalse(outcome.ok)
        self.assertIn("already exists", outcome.payload)

    async def test_links(self) -> None:
        verification = await self.authentication.verification_email("ada@example.com")
        reset_link = await self.authentication.password_reset_link("ada@example.com")

        self.assertEqual(verification, (True, "https://auth.test/verify?email=ada@example.com"))
        self.assertEqual(reset_link, (True, "https://auth.test/reset?email=ada@example.com"))

    async def test_login_user(self) -> None:
        ok = await self.authentication.login_user("ada@example.com", "secret")
        rejected = await self.authentication.login_user("ada@example.com", "wrong")

        self.assertEqual(ok, (True, "user-1"))
        self.assertFalse(rejected.ok)
        self.assertIn("INVALID_LOGIN_CREDENTIALS", rejected.payload)

    async def test_reset_password_sends_email(self) -> None:
        self.assertEqual(await self.authentication.reset_password("ada@example.com"), (True, "ada@example.com"))

    async def test_login_without_web_api_key_fails(self) -> None:
        authentication = Authentication(_services(), auth_module=self.auth, firestore_client=self.firestore)

        outcome = await authentication.login_user("ada@example.com", "secret")

        self.assertFalse(outcome.ok)
        self.assertIn("FIREBASE_WEB_API_KEY", outcome.payload)

    async def test_session_cookie_round_trip(self) -> None:
        created = await self.authentication.create_session("id-token-1")
        custom = await self.authentication.create_session("id-token-1", expires_in_seconds=600)
        verified = await self.authentication.verify_session(created.payload, check_revoked=True)
        invalid = await self.authentication.verify_session("garbage")

        self.assertEqual(created, (True, "cookie:id-token-1:3600"))
        self.assertEqual(custom, (True, "cookie:id-token-1:600"))
        self.assertEqual(verified, (True, {"uid": "id-token-1", "check_revoked": True}))
        self.assertEqual(invalid, (False, "Invalid session cookie."))

    async def test_get_users_merges_profiles(self) -> None:
        await self.authentication.create_user({"email": "ada@example.com"})
        await self.authentication.create_user({"email": "bob@example.com"})
        self.firestore.collection("users").document("user-1").set({"plan": "pro"})

        ok, users = await self.authentication.get_users()

        self.assertTrue(ok)
        by_uid = {user["uid"]: user for user in users}
        self.assertEqual(by_uid["user-1"]["plan"], "pro")
        self.assertEqual(by_uid["user-1"]["email"], "ada@example.com")
        self.assertEqual(by_uid["user-2"]["error"], MISSING_PROFILE["error"])

    async def test_get_users_uses_configured_collection(self) -> None:
        authentication = Authentication(
            _services(USERS_COLLECTION="profiles"),
            auth_module=self.auth,
            firestore_client=self.firestore,
        )
        await authentication.create_user({"uid": "u1"})
        self.firestore.collection("profiles").document("u1").set({"nickname": "Ada"})

        _, users = await authentication.get_users()

        self.assertEqual(users[0]["nickname"], "Ada")

    def test_email_verification_html(self) -> None:
        body = self.authentication.email_verification('https://auth.test/verify?a=1&b="2"')

        self.assertIn("Email Verification - CivicCircle", body)
        self.assertIn('href="https://auth.test/verify?a=1&amp;b=&quot;2&quot;"', body)


if __name__ == "__main__":
    unittest.main()
