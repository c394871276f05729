from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
import time

from fastapi import FastAPI, Request
from starlette.responses import Response

from firebase_crud.api.auth import authenticate_request, is_protected_path
from firebase_crud.api.errors import APIError

LOGGER = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


def install_auth_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def _firebase_auth_middleware(request: Request, call_next: CallNext) -> Response:
        started = time.perf_counter()
        if request.method != "OPTIONS" and is_protected_path(request.url.path):
            try:
                request.state.auth = authenticate_request(request)
            except APIError as exc:
                LOGGER.info("Rejected %s %s: %s", request.method, request.url.path, exc.code)
                return exc.to_response()
        response = await call_next(request)
        LOGGER.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response
