"""
Blob storage abstraction for Firebase Storage and in-memory testing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from firebase_admin import storage

from shared.types import ObjectRef


class BlobStore(Protocol):
    """Defines the operations the functions need from object storage."""

    def download_to_file(self, ref: ObjectRef, destination: str) -> str:
        ...

    def upload_file(self, src_path: str, ref: ObjectRef) -> None:
        ...


@dataclass
class InMemoryBlobStore:
    """Test double for storage interactions."""

    blobs: dict = None

    def __post_init__(self):
        if self.blobs is None:
            self.blobs = {}

    def put(self, ref: ObjectRef, data: bytes) -> None:
        self.blobs[(ref.bucket, ref.path)] = data

    def get(self, ref: ObjectRef) -> Optional[bytes]:
        return self.blobs.get((ref.bucket, ref.path))

    def download_to_file(self, ref: ObjectRef, destination: str) -> str:
        data = self.get(ref)
        if data is None:
            raise FileNotFoundError(ref.uri)
        with open(destination, "wb") as f:
            f.write(data)
        return destination

    def upload_file(self, src_path: str, ref: ObjectRef) -> None:
        with open(src_path, "rb") as f:
            self.put(ref, f.read())


@dataclass
class FirebaseBlobStore:
    """Cloud Storage for Firebase, through the Admin SDK."""

    app: object = None

    def _blob(self, ref: ObjectRef):
        return storage.bucket(ref.bucket, app=self.app).blob(ref.path)

    def download_to_file(self, ref: ObjectRef, destination: str) -> str:
        self._blob(ref).download_to_filename(destination)
        return destination

    def upload_file(self, src_path: str, ref: ObjectRef) -> None:
        self._blob(ref).upload_from_filename(src_path)
