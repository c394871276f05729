from __future__ import annotations

from typing import Any

from firebase_crud.api.errors import ErrorResponse

ERROR_RESPONSES: dict[int, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Bad request"},
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Not allowed"},
    404: {"model": ErrorResponse, "description": "Document not found"},
    422: {"model": ErrorResponse, "description": "Validation error"},
    500: {"model": ErrorResponse, "description": "Unexpected error"},
    502: {"model": ErrorResponse, "description": "Firebase call failed"},
}


def error_responses(*codes: int) -> dict[int, dict[str, Any]]:
    responses: dict[int, dict[str, Any]] = {}
    for code in codes:
        if code in ERROR_RESPONSES:
            responses[code] = ERROR_RESPONSES[code]
    return responses
