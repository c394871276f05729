from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CollectionPath:
    """Base collection plus alternating (document id, sub-collection) segments.

    An odd number of segments means the last one is a terminal document id.
    """

    base: str
    segments: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        base = self.base.strip().strip("/")
        if not base:
            raise ValueError("base collection must not be empty.")
        object.__setattr__(self, "base", base)
        object.__setattr__(self, "segments", tuple(str(segment) for segment in self.segments))

    @property
    def pairs(self) -> list[tuple[str, str]]:
        usable = len(self.segments) - len(self.segments) % 2
        return [(self.segments[index], self.segments[index + 1]) for index in range(0, usable, 2)]

    @property
    def terminal_document_id(self) -> str | None:
        if len(self.segments) % 2 == 0:
            return None
        return self.segments[-1]

    def child(self, document_id: str, sub_collection: str) -> CollectionPath:
        if self.terminal_document_id is not None:
            raise ValueError(f"cannot descend below terminal document: {self.document_path()}")
        return CollectionPath(self.base, (*self.segments, document_id, sub_collection))

    def document_path(self, target_id: str | None = None) -> str:
        parts = [self.base, *self.segments]
        if target_id and self.terminal_document_id is None:
            parts.append(target_id)
        return "/".join(parts)


@dataclass(frozen=True)
class LookupResult:
    found: bool
    record_id: str | None = None
    record: dict[str, Any] = field(default_factory=dict)
    reason: str | None = None

    @classmethod
    def hit(cls, record_id: str, record: Mapping[str, Any]) -> LookupResult:
        return cls(found=True, record_id=record_id, record=dict(record))

    @classmethod
    def miss(cls, reason: str) -> LookupResult:
        return cls(found=False, reason=reason)


class NestedPathResolver:
    def __init__(self, client: Any, path: CollectionPath) -> None:
        self._client = client
        self._path = path

    @property
    def path(self) -> CollectionPath:
        return self._path

    def collection_reference(self) -> Any:
        reference = self._client.collection(self._path.base)
        for document_id, sub_collection in self._path.pairs:
            reference = reference.document(document_id).collection(sub_collection)
        return reference

    def resolve(self, target_id: str | None = None) -> Any:
        """Return a document reference for ``target_id`` (or a new auto id).

        A terminal document id in the path wins over ``target_id``.
        """

        reference = self.collection_reference()
        terminal = self._path.terminal_document_id
        if terminal is not None:
            return reference.document(terminal)
        if target_id:
            return reference.document(target_id)
        return reference.document()

    def find_id_by_content(self, reference: Any, record: Mapping[str, Any]) -> LookupResult:
        # Ties resolve to the first match in the store's enumeration order.
        collection = reference if hasattr(reference, "stream") else reference.parent
        expected = dict(record)
        for snapshot in collection.stream():
            data = snapshot.to_dict() or {}
            if data == expected:
                return LookupResult.hit(snapshot.id, data)
        return LookupResult.miss("No document matches the given content")

    def enumerate_child_paths(self, reference: Any | None = None) -> Iterator[str]:
        collection = reference if reference is not None else self.collection_reference()
        for document in collection.list_documents():
            yield document.id

    def enumerate_sub_collections(self, document_id: str) -> Iterator[str]:
        for collection in self.collection_reference().document(document_id).collections():
            yield collection.id
