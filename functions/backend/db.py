"""
Document database abstraction for Firestore and an in-memory test implementation.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from firebase_admin import firestore


class DocumentNotFoundError(KeyError):
    pass


@dataclass
class StoredDocument:
    id: str
    data: dict


class DocumentStore(Protocol):
    """Interface for document database access."""

    def add(self, collection: str, fields: dict) -> str:
        ...

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        ...

    def list_all(self, collection: str) -> List[StoredDocument]:
        ...


@dataclass
class InMemoryDocumentStore:
    """In-memory document store for tests and local runs."""

    collections: Dict[str, Dict[str, dict]] = field(default_factory=dict)

    def reset(self) -> None:
        self.collections.clear()

    def _collection(self, collection: str) -> Dict[str, dict]:
        return self.collections.setdefault(collection, {})

    def set(self, collection: str, doc_id: str, fields: dict) -> None:
        self._collection(collection)[doc_id] = dict(fields)

    def add(self, collection: str, fields: dict) -> str:
        doc_id = uuid.uuid4().hex
        self.set(collection, doc_id, fields)
        return doc_id

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        doc = self._collection(collection).get(doc_id)
        return copy.copy(doc) if doc is not None else None

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        docs = self._collection(collection)
        if doc_id not in docs:
            raise DocumentNotFoundError(f"{collection}/{doc_id}")
        docs[doc_id].update(fields)

    def delete(self, collection: str, doc_id: str) -> None:
        # Firestore deletes of missing documents succeed silently.
        self._collection(collection).pop(doc_id, None)

    def list_all(self, collection: str) -> List[StoredDocument]:
        return [
            StoredDocument(id=doc_id, data=copy.copy(data))
            for doc_id, data in self._collection(collection).items()
        ]


class FirestoreDocumentStore:
    """Firestore-backed document store using the Admin SDK client."""

    def __init__(self, client=None):
        self._db = client or firestore.client()

    def add(self, collection: str, fields: dict) -> str:
        _, doc_ref = self._db.collection(collection).add(fields)
        return doc_ref.id

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        doc = self._db.collection(collection).document(doc_id).get()
        if not doc.exists:
            return None
        return doc.to_dict()

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        self._db.collection(collection).document(doc_id).update(fields)

    def delete(self, collection: str, doc_id: str) -> None:
        self._db.collection(collection).document(doc_id).delete()

    def list_all(self, collection: str) -> List[StoredDocument]:
        # Reads the whole collection; there is no pagination.
        return [
            StoredDocument(id=doc.id, data=doc.to_dict() or {})
            for doc in self._db.collection(collection).stream()
        ]
