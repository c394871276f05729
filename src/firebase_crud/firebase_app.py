"""Process-wide Firebase initialization.

``configure_firebase`` builds the ``firebase_admin.App`` once and keeps the
derived service handles in a module-level holder. Wrappers ask
``get_services()`` for their defaults instead of initializing the SDK
themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import logging
import threading

from firebase_crud.settings import AppSettings, load_settings


LOGGER = logging.getLogger(__name__)

_LOCK = threading.Lock()
_SERVICES: FirebaseServices | None = None


class FirebaseNotConfiguredError(RuntimeError):
    """Raised when a wrapper needs Firebase before configure_firebase() ran."""


@dataclass(frozen=True)
class FirebaseServices:
    app: Any
    settings: AppSettings

    @property
    def firestore(self) -> Any:
        from firebase_admin import firestore

        return firestore.client(app=self.app)

    @property
    def auth(self) -> Any:
        from firebase_admin import auth

        return auth

    def database_reference(self, path: str) -> Any:
        from firebase_admin import db

        if not self.settings.firebase_database_url:
            raise FirebaseNotConfiguredError("FIREBASE_DATABASE_URL is required for the Realtime Database.")
        return db.reference(path, app=self.app)

    def bucket(self, name: str | None = None) -> Any:
        from firebase_admin import storage

        if name is None and not self.settings.firebase_storage_bucket:
            raise FirebaseNotConfiguredError("FIREBASE_STORAGE_BUCKET is required for Cloud Storage.")
        return storage.bucket(name, app=self.app)


def _build_options(settings: AppSettings) -> dict[str, str]:
    options: dict[str, str] = {}
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id
    if settings.firebase_database_url:
        options["databaseURL"] = settings.firebase_database_url
    if settings.firebase_storage_bucket:
        options["storageBucket"] = settings.firebase_storage_bucket
    return options


def _build_credential(settings: AppSettings) -> Any:
    from firebase_admin import credentials

    if not settings.firebase_credentials:
        return credentials.ApplicationDefault()
    key_path = Path(settings.firebase_credentials).expanduser()
    if not key_path.is_file():
        raise FileNotFoundError(f"Service account key not found: {key_path}")
    return credentials.Certificate(str(key_path))


def configure_firebase(settings: AppSettings | None = None, *, app: Any | None = None) -> FirebaseServices:
    """Initialize Firebase once per process and return the shared services.

    Passing ``app`` registers an already-initialized (or fake) app instead of
    creating one. Later calls return the first configuration.
    """

    global _SERVICES
    with _LOCK:
        if _SERVICES is not None:
            return _SERVICES

        resolved_settings = settings or load_settings()
        if app is None:
            import firebase_admin

            try:
                app = firebase_admin.get_app()
            except ValueError:
                app = firebase_admin.initialize_app(
                    _build_credential(resolved_settings),
                    _build_options(resolved_settings) or None,
                )
                LOGGER.info(
                    "Firebase initialized: project_id=%s",
                    resolved_settings.firebase_project_id or "(default)",
                )

        _SERVICES = FirebaseServices(app=app, settings=resolved_settings)
        return _SERVICES


def get_services() -> FirebaseServices:
    if _SERVICES is None:
        raise FirebaseNotConfiguredError("configure_firebase() must be called before using the wrappers.")
    return _SERVICES


def reset_services() -> None:
    """Forget the configured services. The firebase_admin app itself is kept."""

    global _SERVICES
    with _LOCK:
        _SERVICES = None
