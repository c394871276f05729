from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response, status

from firebase_crud.api.dependencies import get_firestore_client
from firebase_crud.api.errors import BadRequestError, NotFoundError
from firebase_crud.api.openapi import error_responses
from firebase_crud.api.schemas import (
    DocumentCreatedResponse,
    DocumentIdsResponse,
    DocumentListResponse,
    DocumentResponse,
)
from firebase_crud.outcome import Outcome
from firebase_crud.storage.firestore_model import DOCUMENT_NOT_FOUND, FirestoreModel

router = APIRouter(
    prefix="/collections",
    tags=["documents"],
)

NESTED_QUERY = Query(default=[], description="Alternating document id / sub-collection name segments")


def _is_not_found(message: str) -> bool:
    # google.api_core NotFound renders as "404 <message>".
    return message == DOCUMENT_NOT_FOUND or message.startswith("404 ")


def _payload_or_raise(outcome: Outcome) -> Any:
    if not outcome.ok and _is_not_found(str(outcome.payload)):
        raise NotFoundError(str(outcome.payload))
    return outcome.unwrap()


def _collection_model(collection: str, nested: list[str], client: Any) -> FirestoreModel:
    model = FirestoreModel(collection, None, nested, client=client)
    if model.path.terminal_document_id is not None:
        raise BadRequestError("nested must end with a sub-collection name (even number of segments).")
    return model


@router.get(
    "/{collection}",
    response_model=DocumentListResponse,
    responses=error_responses(400, 401, 403, 422, 500, 502),
)
async def list_documents(
    collection: str,
    nested: list[str] = NESTED_QUERY,
    recursive: bool = Query(default=False),
    client: Any = Depends(get_firestore_client),
) -> DocumentListResponse:
    model = _collection_model(collection, nested, client)
    documents = _payload_or_raise(await model.read_all(recursive=recursive))
    return DocumentListResponse(documents=documents, total=len(documents))


@router.get(
    "/{collection}/ids",
    response_model=DocumentIdsResponse,
    responses=error_responses(400, 401, 403, 422, 500, 502),
)
async def list_document_ids(
    collection: str,
    nested: list[str] = NESTED_QUERY,
    client: Any = Depends(get_firestore_client),
) -> DocumentIdsResponse:
    model = _collection_model(collection, nested, client)
    ids = _payload_or_raise(await model.read_paths())
    return DocumentIdsResponse(ids=ids, total=len(ids))


@router.post(
    "/{collection}",
    response_model=DocumentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 422, 500, 502),
)
async def create_document(
    collection: str,
    payload: dict[str, Any] = Body(...),
    nested: list[str] = NESTED_QUERY,
    client: Any = Depends(get_firestore_client),
) -> DocumentCreatedResponse:
    if not payload:
        raise BadRequestError("Document body must contain at least one field.")
    model = FirestoreModel(collection, None, nested, client=client)
    document_id = _payload_or_raise(await model.create(payload))
    return DocumentCreatedResponse(id=document_id)


@router.get(
    "/{collection}/{document_id}",
    response_model=DocumentResponse,
    responses=error_responses(401, 403, 404, 422, 500, 502),
)
async def get_document(
    collection: str,
    document_id: str,
    nested: list[str] = NESTED_QUERY,
    client: Any = Depends(get_firestore_client),
) -> DocumentResponse:
    model = FirestoreModel(collection, document_id, nested, client=client)
    data = _payload_or_raise(await model.read())
    return DocumentResponse(id=document_id, data=data)


@router.patch(
    "/{collection}/{document_id}",
    response_model=DocumentResponse,
    responses=error_responses(400, 401, 403, 404, 422, 500, 502),
)
async def update_document(
    collection: str,
    document_id: str,
    payload: dict[str, Any] = Body(...),
    nested: list[str] = NESTED_QUERY,
    client: Any = Depends(get_firestore_client),
) -> DocumentResponse:
    if not payload:
        raise BadRequestError("Specify at least one field to update.")
    model = FirestoreModel(collection, document_id, nested, client=client)
    _payload_or_raise(await model.update(payload))
    data = _payload_or_raise(await model.read())
    return DocumentResponse(id=document_id, data=data)


@router.delete(
    "/{collection}/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(401, 403, 422, 500, 502),
)
async def delete_document(
    collection: str,
    document_id: str,
    nested: list[str] = NESTED_QUERY,
    client: Any = Depends(get_firestore_client),
) -> Response:
    model = FirestoreModel(collection, document_id, nested, client=client)
    _payload_or_raise(await model.delete())
    return Response(status_code=status.HTTP_204_NO_CONTENT)
