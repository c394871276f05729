from __future__ import annotations

from typing import Any, Callable, TypeVar

from fastapi import Request

from firebase_crud.firebase_app import configure_firebase
from firebase_crud.settings import AppSettings

DependencyT = TypeVar("DependencyT")


def create_firestore_client() -> Any:
    return configure_firebase().firestore


def resolve_state(request: Request, name: str) -> DependencyT:
    """Return ``app.state.<name>``, building it once from ``<name>_factory``."""

    dependency = getattr(request.app.state, name, None)
    if dependency is not None:
        return dependency

    factory: Callable[[], DependencyT] | None = getattr(request.app.state, f"{name}_factory", None)
    if factory is None:
        raise RuntimeError(f"{name} is not initialized.")
    dependency = factory()
    setattr(request.app.state, name, dependency)
    return dependency


def get_firestore_client(request: Request) -> Any:
    return resolve_state(request, "firestore_client")


def get_app_settings(request: Request) -> AppSettings:
    return resolve_state(request, "settings")
