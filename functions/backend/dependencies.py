"""
Service wiring for the cloud functions.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend.config import Settings
from backend.db import DocumentStore, FirestoreDocumentStore, InMemoryDocumentStore
from backend.messaging import FcmPushDispatcher, InMemoryPushDispatcher, PushDispatcher
from backend.storage import BlobStore, FirebaseBlobStore, InMemoryBlobStore
from backend.vision import CloudVisionClassifier, ImageClassifier, StaticClassifier


@dataclass
class Services:
    """The clients one function invocation talks to."""

    settings: Settings
    blob_store: BlobStore
    classifier: ImageClassifier
    document_store: DocumentStore
    push_dispatcher: PushDispatcher


def build_in_memory_services(settings: Settings) -> Services:
    return Services(
        settings=settings,
        blob_store=InMemoryBlobStore(),
        classifier=StaticClassifier(),
        document_store=InMemoryDocumentStore(),
        push_dispatcher=InMemoryPushDispatcher(),
    )


def build_services(settings: Settings) -> Services:
    """
    Build the service bundle for this process.

    Expects `firebase_admin.initialize_app()` to have been called already
    unless in-memory backends are requested.
    """
    if settings.use_in_memory_backends:
        return build_in_memory_services(settings)

    return Services(
        settings=settings,
        blob_store=FirebaseBlobStore(),
        classifier=CloudVisionClassifier(),
        document_store=FirestoreDocumentStore(),
        push_dispatcher=FcmPushDispatcher(),
    )
