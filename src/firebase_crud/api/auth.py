from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from fastapi import Request

from firebase_crud.api.dependencies import get_app_settings, resolve_state
from firebase_crud.api.errors import ForbiddenError, InternalServerError, UnauthorizedError
from firebase_crud.firebase_app import FirebaseServices, configure_firebase

API_V1_PREFIX = "/api/v1/"
PUBLIC_API_PATHS = frozenset({"/api/v1/healthz"})

# firebase_admin.auth errors that mean the caller is known but barred.
_FORBIDDEN_TOKEN_ERRORS = frozenset({"RevokedIdTokenError", "UserDisabledError"})


class TokenVerifier(Protocol):
    def verify(self, token: str) -> Mapping[str, Any]:
        """Verify token and return decoded claims."""


class FirebaseAdminTokenVerifier:
    def __init__(self, services: FirebaseServices | None = None) -> None:
        self._services = services

    def verify(self, token: str) -> Mapping[str, Any]:
        if self._services is None:
            try:
                self._services = configure_firebase()
            except Exception as exc:
                raise InternalServerError("Firebase could not be initialized.") from exc
        services = self._services
        try:
            return dict(services.auth.verify_id_token(token, app=services.app, check_revoked=True))
        except Exception as exc:
            if exc.__class__.__name__ in _FORBIDDEN_TOKEN_ERRORS:
                raise ForbiddenError("This user is not allowed to use the API.") from exc
            raise UnauthorizedError("ID token verification failed.") from exc


@dataclass(frozen=True)
class AuthContext:
    uid: str
    claims: Mapping[str, Any]


def parse_bearer_token(authorization: str | None) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Authorization header must be a Bearer token.")
    return token.strip()


def is_protected_path(path: str) -> bool:
    return path.startswith(API_V1_PREFIX) and path not in PUBLIC_API_PATHS


def authenticate_request(request: Request) -> AuthContext:
    token = parse_bearer_token(request.headers.get("Authorization"))
    verifier: TokenVerifier = resolve_state(request, "token_verifier")
    claims = verifier.verify(token)
    uid = str(claims.get("uid", "")).strip()
    if not uid:
        raise UnauthorizedError("ID token has no uid.")

    allowed_uids = get_app_settings(request).api_allowed_uids
    if allowed_uids and uid not in allowed_uids:
        raise ForbiddenError("This user is not allowed.")
    return AuthContext(uid=uid, claims=claims)
