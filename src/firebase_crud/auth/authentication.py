from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from typing import Any
import asyncio
import logging

from firebase_crud.auth.identity_toolkit import IdentityToolkitClient
from firebase_crud.auth.templates import render_email_verification
from firebase_crud.firebase_app import FirebaseServices, get_services
from firebase_crud.outcome import Outcome, ServiceCallFailure, service_call, success
from firebase_crud.storage.firestore_model import FirestoreModel


LOGGER = logging.getLogger(__name__)

MISSING_PROFILE = {"error": "No user data found"}


def user_record_to_dict(record: Any) -> dict[str, Any]:
    """Flatten a firebase_admin UserRecord into plain JSON-friendly values."""

    metadata = getattr(record, "user_metadata", None)
    return {
        "uid": record.uid,
        "email": getattr(record, "email", None),
        "email_verified": bool(getattr(record, "email_verified", False)),
        "display_name": getattr(record, "display_name", None),
        "phone_number": getattr(record, "phone_number", None),
        "photo_url": getattr(record, "photo_url", None),
        "disabled": bool(getattr(record, "disabled", False)),
        "custom_claims": dict(getattr(record, "custom_claims", None) or {}),
        "creation_timestamp": getattr(metadata, "creation_timestamp", None),
        "last_sign_in_timestamp": getattr(metadata, "last_sign_in_timestamp", None),
    }


class Authentication:
    """Firebase Authentication helpers returning ``(ok, payload)`` outcomes."""

    def __init__(
        self,
        services: FirebaseServices | None = None,
        *,
        auth_module: Any | None = None,
        identity_toolkit: IdentityToolkitClient | None = None,
        firestore_client: Any | None = None,
    ) -> None:
        self._services = services or get_services()
        self._app = self._services.app
        self._auth = auth_module if auth_module is not None else self._services.auth
        self._identity_toolkit = identity_toolkit
        self._firestore_client = firestore_client

    @property
    def settings(self) -> Any:
        return self._services.settings

    def _toolkit(self) -> IdentityToolkitClient:
        if self._identity_toolkit is None:
            api_key = self.settings.firebase_web_api_key
            if not api_key:
                raise ServiceCallFailure("FIREBASE_WEB_API_KEY is required for password sign-in and reset emails")
            self._identity_toolkit = IdentityToolkitClient(api_key)
        return self._identity_toolkit

    def _users_client(self) -> Any:
        if self._firestore_client is None:
            self._firestore_client = self._services.firestore
        return self._firestore_client

    def _call(self, method_name: str, *args: Any, **kwargs: Any) -> Any:
        return getattr(self._auth, method_name)(*args, app=self._app, **kwargs)

    @service_call
    async def create_user(self, user_data: Mapping[str, Any]) -> Outcome:
        record = await asyncio.to_thread(self._call, "create_user", **dict(user_data))
        LOGGER.info("Created user uid=%s", record.uid)
        return success(record.uid)

    @service_call
    async def verification_email(self, email: str) -> Outcome:
        link = await asyncio.to_thread(self._call, "generate_email_verification_link", email)
        return success(link)

    @service_call
    async def login_user(self, email: str, password: str) -> Outcome:
        result = await asyncio.to_thread(self._toolkit().sign_in_with_password, email, password)
        return success(result.uid)

    @service_call
    async def update_user(self, uid: str, update_data: Mapping[str, Any]) -> Outcome:
        record = await asyncio.to_thread(self._call, "update_user", uid, **dict(update_data))
        return success(user_record_to_dict(record))

    @service_call
    async def get_user(self, uid: str) -> Outcome:
        record = await asyncio.to_thread(self._call, "get_user", uid)
        return success(user_record_to_dict(record))

    @service_call
    async def delete_user(self, uid: str) -> Outcome:
        await asyncio.to_thread(self._call, "delete_user", uid)
        LOGGER.info("Deleted user uid=%s", uid)
        return success(uid)

    @service_call
    async def create_session(self, id_token: str, *, expires_in_seconds: int | None = None) -> Outcome:
        expires_in = timedelta(seconds=expires_in_seconds or self.settings.session_cookie_ttl_seconds)
        cookie = await asyncio.to_thread(self._call, "create_session_cookie", id_token, expires_in)
        return success(cookie)

    @service_call
    async def verify_session(self, session_cookie: str, *, check_revoked: bool = False) -> Outcome:
        claims = await asyncio.to_thread(
            self._call,
            "verify_session_cookie",
            session_cookie,
            check_revoked=check_revoked,
        )
        return success(dict(claims))

    @service_call
    async def reset_password(self, email: str) -> Outcome:
        sent_to = await asyncio.to_thread(self._toolkit().send_password_reset_email, email)
        return success(sent_to)

    @service_call
    async def password_reset_link(self, email: str) -> Outcome:
        link = await asyncio.to_thread(self._call, "generate_password_reset_link", email)
        return success(link)

    @service_call
    async def get_users(self) -> Outcome:
        """List every Auth user merged with its stored profile document."""

        records = await asyncio.to_thread(lambda: list(self._call("list_users").iterate_all()))
        client = self._users_client()
        collection = self.settings.users_collection

        async def _merge(record: Any) -> dict[str, Any]:
            ok, profile = await FirestoreModel(collection, record.uid, client=client).read()
            return {**user_record_to_dict(record), **(profile if ok else MISSING_PROFILE)}

        users = await asyncio.gather(*(_merge(record) for record in records))
        return success(list(users))

    def email_verification(self, url: str) -> str:
        return render_email_verification(url, app_name=self.settings.app_display_name)
