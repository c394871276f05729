from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from firebase_crud.outcome import ServiceCallFailure

logger = logging.getLogger(__name__)

ERROR_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    422: "validation_error",
    500: "internal_error",
    502: "upstream_error",
}


class ErrorDetail(BaseModel):
    code: str = Field(description="Error code")
    message: str = Field(description="Error message")
    details: list[dict[str, Any]] = Field(default_factory=list, description="Additional details")


class ErrorResponse(BaseModel):
    error: ErrorDetail


@dataclass(frozen=True)
class APIError(Exception):
    status_code: int
    message: str
    details: list[dict[str, Any]] | None = None

    @property
    def code(self) -> str:
        return ERROR_CODES.get(self.status_code, "http_error")

    def to_response(self) -> JSONResponse:
        return build_error_response(
            status_code=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details,
        )


class BadRequestError(APIError):
    def __init__(self, message: str) -> None:
        super().__init__(400, message)


class UnauthorizedError(APIError):
    def __init__(self, message: str = "Authentication failed.") -> None:
        super().__init__(401, message)


class ForbiddenError(APIError):
    def __init__(self, message: str = "Permission denied.") -> None:
        super().__init__(403, message)


class NotFoundError(APIError):
    def __init__(self, message: str) -> None:
        super().__init__(404, message)


class InternalServerError(APIError):
    def __init__(self, message: str = "Internal server error.") -> None:
        super().__init__(500, message)


class UpstreamError(APIError):
    def __init__(self, message: str) -> None:
        super().__init__(502, message)


def build_error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details or []))
    return JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def _handle_api_error(_: Request, exc: APIError) -> JSONResponse:
        return exc.to_response()

    @app.exception_handler(ServiceCallFailure)
    async def _handle_service_call_failure(_: Request, exc: ServiceCallFailure) -> JSONResponse:
        logger.warning("Firebase call failed: %s", exc)
        return UpstreamError(str(exc)).to_response()

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {
                "loc": list(error.get("loc", ())),
                "msg": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        return APIError(422, "Invalid request.", details).to_response()

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return APIError(exc.status_code, str(exc.detail) if exc.detail else "HTTP error.").to_response()

    @app.exception_handler(Exception)
    async def _handle_unexpected_error(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception", exc_info=exc)
        return InternalServerError().to_response()
