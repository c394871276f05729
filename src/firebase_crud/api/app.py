from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from firebase_crud.api.auth import FirebaseAdminTokenVerifier, TokenVerifier
from firebase_crud.api.dependencies import create_firestore_client
from firebase_crud.api.errors import install_exception_handlers
from firebase_crud.api.middleware import install_auth_middleware
from firebase_crud.api.routes import api_router
from firebase_crud.settings import AppSettings, load_settings


def create_app(
    *,
    firestore_client: Any | None = None,
    token_verifier: TokenVerifier | None = None,
    settings: AppSettings | None = None,
) -> FastAPI:
    app = FastAPI(
        title="firebase_crud Web API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    install_exception_handlers(app)

    app.state.firestore_client = firestore_client
    app.state.firestore_client_factory = create_firestore_client

    app.state.token_verifier = token_verifier
    app.state.token_verifier_factory = _default_token_verifier_factory

    app.state.settings = settings
    app.state.settings_factory = load_settings

    install_auth_middleware(app)
    app.include_router(api_router, prefix="/api/v1")
    return app


def _default_token_verifier_factory() -> TokenVerifier:
    return FirebaseAdminTokenVerifier()


app = create_app()
