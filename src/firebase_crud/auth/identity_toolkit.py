from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import logging

import httpx


LOGGER = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"


class IdentityToolkitError(RuntimeError):
    def __init__(self, *, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason.strip() or "unknown error"
        super().__init__(f"{operation} failed: {self.reason}")


@dataclass(frozen=True)
class SignInResult:
    uid: str
    id_token: str
    refresh_token: str
    expires_in: int


class IdentityToolkitClient:
    """Client-side Firebase Auth calls that the Admin SDK does not offer."""

    def __init__(
        self,
        api_key: str,
        *,
        http_client: httpx.Client | None = None,
        timeout_sec: float = 10.0,
        base_url: str = IDENTITY_TOOLKIT_URL,
    ) -> None:
        if not api_key.strip():
            raise ValueError("api_key must not be empty.")
        self._api_key = api_key.strip()
        self._timeout_sec = timeout_sec
        self._base_url = base_url.rstrip("/")
        self._http_client = http_client or httpx.Client()

    def _post(self, *, operation: str, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}/{endpoint}"
        try:
            response = self._http_client.post(
                url,
                params={"key": self._api_key},
                json=payload,
                timeout=self._timeout_sec,
            )
        except httpx.HTTPError as exc:
            raise IdentityToolkitError(operation=operation, reason=f"HTTP request error: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 400:
            error = body.get("error") if isinstance(body, dict) else None
            message = str(error.get("message", "")) if isinstance(error, dict) else ""
            raise IdentityToolkitError(
                operation=operation,
                reason=message or f"HTTP status {response.status_code}",
            )
        return body if isinstance(body, dict) else {}

    def sign_in_with_password(self, email: str, password: str) -> SignInResult:
        body = self._post(
            operation="signInWithPassword",
            endpoint="accounts:signInWithPassword",
            payload={"email": email, "password": password, "returnSecureToken": True},
        )
        uid = str(body.get("localId", "")).strip()
        if not uid:
            raise IdentityToolkitError(operation="signInWithPassword", reason="response has no localId")
        return SignInResult(
            uid=uid,
            id_token=str(body.get("idToken", "")),
            refresh_token=str(body.get("refreshToken", "")),
            expires_in=int(body.get("expiresIn", 0) or 0),
        )

    def send_password_reset_email(self, email: str) -> str:
        body = self._post(
            operation="sendOobCode",
            endpoint="accounts:sendOobCode",
            payload={"requestType": "PASSWORD_RESET", "email": email},
        )
        LOGGER.info("Password reset email requested")
        return str(body.get("email", email))

    def close(self) -> None:
        self._http_client.close()
