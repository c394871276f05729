from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping
import os


DEFAULT_APP_DISPLAY_NAME = "Firebase CRUD"
DEFAULT_USERS_COLLECTION = "users"
DEFAULT_SESSION_COOKIE_TTL_SECONDS = 3600
DEFAULT_SIGNED_URL_TTL_SECONDS = 3600

# Firebase accepts session cookie lifetimes between 5 minutes and 2 weeks.
MIN_SESSION_COOKIE_TTL_SECONDS = 5 * 60
MAX_SESSION_COOKIE_TTL_SECONDS = 14 * 24 * 60 * 60


class SettingsError(ValueError):
    """Raised when settings values are invalid."""


@dataclass(frozen=True)
class AppSettings:
    app_env: str
    app_display_name: str
    firebase_project_id: str
    firebase_credentials: str
    firebase_database_url: str
    firebase_storage_bucket: str
    firebase_web_api_key: str
    users_collection: str
    session_cookie_ttl_seconds: int
    signed_url_ttl_seconds: int
    api_allowed_uids: tuple[str, ...] = ()


def _read_dotenv(dotenv_path: Path) -> dict[str, str]:
    values: dict[str, str] = {}
    if not dotenv_path.exists():
        return values

    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'").strip('"')
        if key:
            values[key] = value
    return values


def _get_str(values: Mapping[str, str], key: str, default: str) -> str:
    value = values.get(key, default).strip()
    if not value:
        raise SettingsError(f"{key} must not be empty.")
    return value


def _get_optional_str(values: Mapping[str, str], key: str) -> str:
    return values.get(key, "").strip()


def _get_csv(values: Mapping[str, str], key: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in values.get(key, "").split(",") if item.strip())


def _get_int(values: Mapping[str, str], key: str, default: int) -> int:
    raw_value = values.get(key)
    if raw_value is None or raw_value.strip() == "":
        return default
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise SettingsError(f"{key} must be integer: {raw_value}") from exc
    if value <= 0:
        raise SettingsError(f"{key} must be > 0: {value}")
    return value


def load_settings(
    *,
    env: Mapping[str, str] | None = None,
    dotenv_path: str | Path = ".env",
) -> AppSettings:
    """Load settings from .env and environment variables.

    Priority: OS environment > .env > default.
    """

    env_values = dict(env) if env is not None else dict(os.environ)
    dotenv_values = _read_dotenv(Path(dotenv_path))
    merged: dict[str, str] = {**dotenv_values, **env_values}

    session_ttl = _get_int(merged, "SESSION_COOKIE_TTL_SECONDS", DEFAULT_SESSION_COOKIE_TTL_SECONDS)
    if not MIN_SESSION_COOKIE_TTL_SECONDS <= session_ttl <= MAX_SESSION_COOKIE_TTL_SECONDS:
        raise SettingsError(
            "SESSION_COOKIE_TTL_SECONDS must be between "
            f"{MIN_SESSION_COOKIE_TTL_SECONDS} and {MAX_SESSION_COOKIE_TTL_SECONDS}: {session_ttl}"
        )

    return AppSettings(
        app_env=_get_str(merged, "APP_ENV", "development"),
        app_display_name=_get_str(merged, "APP_DISPLAY_NAME", DEFAULT_APP_DISPLAY_NAME),
        firebase_project_id=_get_optional_str(merged, "FIREBASE_PROJECT_ID"),
        firebase_credentials=_get_optional_str(merged, "FIREBASE_CREDENTIALS"),
        firebase_database_url=_get_optional_str(merged, "FIREBASE_DATABASE_URL"),
        firebase_storage_bucket=_get_optional_str(merged, "FIREBASE_STORAGE_BUCKET"),
        firebase_web_api_key=_get_optional_str(merged, "FIREBASE_WEB_API_KEY"),
        users_collection=_get_str(merged, "USERS_COLLECTION", DEFAULT_USERS_COLLECTION),
        session_cookie_ttl_seconds=session_ttl,
        signed_url_ttl_seconds=_get_int(merged, "SIGNED_URL_TTL_SECONDS", DEFAULT_SIGNED_URL_TTL_SECONDS),
        api_allowed_uids=_get_csv(merged, "API_ALLOWED_UIDS"),
    )
