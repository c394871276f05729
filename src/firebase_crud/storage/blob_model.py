from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any
import asyncio
import mimetypes

from firebase_crud.firebase_app import get_services
from firebase_crud.outcome import Outcome, service_call, success
from firebase_crud.settings import DEFAULT_SIGNED_URL_TTL_SECONDS


DEFAULT_CONTENT_TYPE = "application/octet-stream"


class StorageModel:
    """Upload, link and delete helpers for one Cloud Storage bucket."""

    def __init__(
        self,
        *,
        bucket: Any | None = None,
        signed_url_ttl_seconds: int | None = None,
    ) -> None:
        if bucket is None:
            services = get_services()
            bucket = services.bucket()
            if signed_url_ttl_seconds is None:
                signed_url_ttl_seconds = services.settings.signed_url_ttl_seconds
        self._bucket = bucket
        self._signed_url_ttl_seconds = signed_url_ttl_seconds or DEFAULT_SIGNED_URL_TTL_SECONDS

    @service_call
    async def upload(
        self,
        name: str,
        data: bytes | str,
        *,
        content_type: str | None = None,
    ) -> Outcome:
        blob = self._bucket.blob(name)
        await asyncio.to_thread(
            blob.upload_from_string,
            data,
            content_type=content_type or _guess_content_type(name),
        )
        return success(blob.name)

    @service_call
    async def upload_file(
        self,
        name: str,
        source_path: str | Path,
        *,
        content_type: str | None = None,
    ) -> Outcome:
        source = Path(source_path)
        if not source.is_file():
            raise FileNotFoundError(f"File not found: {source}")
        blob = self._bucket.blob(name)
        await asyncio.to_thread(
            blob.upload_from_filename,
            str(source),
            content_type=content_type or _guess_content_type(source.name),
        )
        return success(blob.name)

    @service_call
    async def get_download_url(self, name: str, *, expires_in_seconds: int | None = None) -> Outcome:
        blob = self._bucket.blob(name)
        expiration = timedelta(seconds=expires_in_seconds or self._signed_url_ttl_seconds)
        url = await asyncio.to_thread(blob.generate_signed_url, expiration=expiration, version="v4")
        return success(url)

    @service_call
    async def delete(self, name: str) -> Outcome:
        await asyncio.to_thread(self._bucket.blob(name).delete)
        return success(True)

    @service_call
    async def exists(self, name: str) -> Outcome:
        found = await asyncio.to_thread(self._bucket.blob(name).exists)
        return success(bool(found))


def _guess_content_type(name: str) -> str:
    guessed, _ = mimetypes.guess_type(name)
    return guessed or DEFAULT_CONTENT_TYPE
