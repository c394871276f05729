from __future__ import annotations

from collections import deque
from collections.abc import Mapping, Sequence
from typing import Any
import asyncio
import logging

from firebase_crud.firebase_app import get_services
from firebase_crud.outcome import NO_PAYLOAD, Outcome, ServiceCallFailure, failure, service_call, success
from firebase_crud.storage.firestore_paths import CollectionPath, NestedPathResolver


LOGGER = logging.getLogger(__name__)

DOCUMENT_NOT_FOUND = "Document does not exist"


class FirestoreModel:
    """CRUD helpers for one Firestore collection, optionally nested.

    ``nested_paths`` alternates document ids and sub-collection names below
    ``collection_name``; ``uid`` addresses the document used by
    read/update/delete.
    """

    def __init__(
        self,
        collection_name: str,
        uid: str | None = None,
        nested_paths: Sequence[str] = (),
        *,
        client: Any | None = None,
    ) -> None:
        self._client = client if client is not None else get_services().firestore
        self._path = CollectionPath(collection_name, tuple(nested_paths))
        self._resolver = NestedPathResolver(self._client, self._path)
        self.uid = uid

    @property
    def path(self) -> CollectionPath:
        return self._path

    def _document_reference(self) -> Any:
        if not self.uid and self._path.terminal_document_id is None:
            raise ServiceCallFailure("A document id is required for this operation")
        return self._resolver.resolve(self.uid)

    @service_call
    async def create(self, data: Mapping[str, Any], *, document_id: str | None = None) -> Outcome:
        reference = self._resolver.resolve(document_id)
        await asyncio.to_thread(reference.set, dict(data))
        return success(reference.id)

    @service_call
    async def read(self) -> Outcome:
        reference = self._document_reference()
        snapshot = await asyncio.to_thread(reference.get)
        if not snapshot.exists:
            raise ServiceCallFailure(DOCUMENT_NOT_FOUND)
        return success(snapshot.to_dict() or {})

    @service_call
    async def update(self, data: Mapping[str, Any]) -> Outcome:
        reference = self._document_reference()
        await asyncio.to_thread(reference.update, dict(data))
        return success(NO_PAYLOAD)

    @service_call
    async def delete(self) -> Outcome:
        reference = self._document_reference()
        await asyncio.to_thread(reference.delete)
        return success(NO_PAYLOAD)

    @service_call
    async def read_paths(self) -> Outcome:
        child_ids = await asyncio.to_thread(lambda: list(self._resolver.enumerate_child_paths()))
        return success(child_ids)

    @service_call
    async def find_id_by_content(self, data: Mapping[str, Any]) -> Outcome:
        result = await asyncio.to_thread(
            self._resolver.find_id_by_content,
            self._resolver.collection_reference(),
            data,
        )
        if not result.found:
            return failure(result.reason or DOCUMENT_NOT_FOUND)
        return success(result.record_id)

    @service_call
    async def read_all(self, *, recursive: bool = False) -> Outcome:
        """Read every child document, keyed by id (or relative path when recursive).

        Documents that only exist as parents of sub-collections are skipped.
        Any other failed child read fails the whole call.
        """

        if self._path.terminal_document_id is not None:
            raise ServiceCallFailure(f"Not a collection path: {self._path.document_path()}")

        documents: dict[str, Any] = {}
        pending: deque[tuple[CollectionPath, str, str]] = deque()
        for child_id in await asyncio.to_thread(lambda: list(self._resolver.enumerate_child_paths())):
            pending.append((self._path, child_id, child_id))

        while pending:
            path, child_id, key = pending.popleft()
            child = FirestoreModel(path.base, child_id, path.segments, client=self._client)
            ok, payload = await child.read()
            if ok:
                documents[key] = payload
            elif payload != DOCUMENT_NOT_FOUND:
                raise ServiceCallFailure(f"{path.document_path(child_id)}: {payload}")

            if not recursive:
                continue
            resolver = NestedPathResolver(self._client, path)
            sub_collections = await asyncio.to_thread(lambda: list(resolver.enumerate_sub_collections(child_id)))
            for sub_collection in sub_collections:
                sub_path = path.child(child_id, sub_collection)
                sub_resolver = NestedPathResolver(self._client, sub_path)
                grandchildren = await asyncio.to_thread(lambda: list(sub_resolver.enumerate_child_paths()))
                for grandchild_id in grandchildren:
                    pending.append((sub_path, grandchild_id, f"{key}/{sub_collection}/{grandchild_id}"))

        LOGGER.debug("read_all %s: %d documents", self._path.document_path(), len(documents))
        return success(documents)
