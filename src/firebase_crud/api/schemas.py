from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthzResponse(BaseModel):
    status: str = Field(default="ok")


class DocumentResponse(BaseModel):
    id: str
    data: dict[str, Any]


class DocumentCreatedResponse(BaseModel):
    id: str


class DocumentListResponse(BaseModel):
    documents: dict[str, dict[str, Any]]
    total: int = Field(ge=0)


class DocumentIdsResponse(BaseModel):
    ids: list[str]
    total: int = Field(ge=0)
