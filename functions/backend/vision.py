"""
Image safety classification backed by the Cloud Vision SafeSearch API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from google.cloud import vision

from shared.types import Likelihood, ObjectRef, SafeSearchVerdict


class ClassifierError(Exception):
    """Raised when the classifier responds with an error instead of a verdict."""


class ImageClassifier(Protocol):
    def classify(self, ref: ObjectRef) -> SafeSearchVerdict:
        ...


@dataclass
class StaticClassifier:
    """Returns the same verdict for every image and remembers what it saw."""

    verdict: SafeSearchVerdict = field(
        default_factory=lambda: SafeSearchVerdict(
            adult=Likelihood.VERY_UNLIKELY, violence=Likelihood.VERY_UNLIKELY
        )
    )
    calls: list = field(default_factory=list)

    def classify(self, ref: ObjectRef) -> SafeSearchVerdict:
        self.calls.append(ref)
        return self.verdict


class CloudVisionClassifier:
    """Runs SafeSearch detection on an image already stored in Cloud Storage."""

    def __init__(self, client: vision.ImageAnnotatorClient | None = None):
        self._client = client or vision.ImageAnnotatorClient()

    def classify(self, ref: ObjectRef) -> SafeSearchVerdict:
        image = vision.Image(source=vision.ImageSource(image_uri=ref.uri))
        response = self._client.safe_search_detection(image=image)
        if response.error.message:
            raise ClassifierError(
                f"SafeSearch detection failed for {ref.uri}: {response.error.message}"
            )

        annotation = response.safe_search_annotation
        return SafeSearchVerdict(
            adult=Likelihood(int(annotation.adult)),
            violence=Likelihood(int(annotation.violence)),
        )
