from __future__ import annotations

from collections.abc import Mapping
from typing import Any
import asyncio

from firebase_crud.firebase_app import get_services
from firebase_crud.outcome import Outcome, ServiceCallFailure, service_call, success


UNDEFINED_VALUES = "Data contains undefined values"
ITEM_NOT_FOUND = "Item does not exist"


def _children(value: Any) -> list[tuple[str, Any]]:
    # Sequential integer keys come back from the database as a list with None gaps.
    if isinstance(value, list):
        return [(str(index), child) for index, child in enumerate(value) if child is not None]
    return list((value or {}).items())


class RealTimeModel:
    """CRUD helpers for the children of one Realtime Database path."""

    def __init__(self, path: str, *, reference: Any | None = None) -> None:
        self.path = path
        self._reference = reference if reference is not None else get_services().database_reference(path)

    @service_call
    async def create(self, data: Mapping[str, Any]) -> Outcome:
        if any(value is None for value in data.values()):
            raise ServiceCallFailure(UNDEFINED_VALUES)
        new_reference = await asyncio.to_thread(self._reference.push, dict(data))
        return success(new_reference.key)

    @service_call
    async def read(self) -> Outcome:
        value = await asyncio.to_thread(self._reference.get)
        items: list[dict[str, Any]] = []
        for key, child in _children(value):
            if isinstance(child, Mapping):
                items.append({"id": key, **child})
            else:
                items.append({"id": key, "value": child})
        return success(items)

    @service_call
    async def read_item(self, item_id: str) -> Outcome:
        value = await asyncio.to_thread(self._reference.child(item_id).get)
        if value is None:
            raise ServiceCallFailure(ITEM_NOT_FOUND)
        return success(value)

    @service_call
    async def update(self, item_id: str, data: Mapping[str, Any]) -> Outcome:
        # Replaces the whole child value.
        await asyncio.to_thread(self._reference.child(item_id).set, dict(data))
        return success(True)

    @service_call
    async def delete(self, item_id: str) -> Outcome:
        await asyncio.to_thread(self._reference.child(item_id).delete)
        return success(True)
