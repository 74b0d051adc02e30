# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator, Optional

from backend.dependencies import Services
from moderation import image_blur
from shared.storage_paths import parse_message_image_path
from shared.types import ObjectRef, SafeSearchVerdict

logger = logging.getLogger(__name__)


class ModerationAction(StrEnum):
    SKIPPED = "SKIPPED"
    ALLOWED = "ALLOWED"
    BLURRED = "BLURRED"


class ModerationCommitError(Exception):
    """
    The blurred image replaced the original in storage, but the message
    document could not be marked as moderated.

    Nothing rolls the upload back, so the object and the message disagree
    until something reconciles them.
    """

    def __init__(self, ref: ObjectRef, message_id: str):
        super().__init__(
            f"Blurred image {ref.uri} was uploaded but message {message_id} "
            "was not marked as moderated."
        )
        self.ref = ref
        self.message_id = message_id


@dataclass
class ModerationResult:
    object_path: str
    action: ModerationAction
    message_id: Optional[str] = None
    verdict: Optional[SafeSearchVerdict] = None


def _is_already_moderated(message_id: str, services: Services) -> bool:
    # Only this pipeline writes the moderated flag, so unlike the object's
    # content type or custom metadata it cannot be set by the uploader.
    doc = services.document_store.get(
        services.settings.messages_collection, message_id
    )
    return bool(doc) and doc.get("moderated") is True


def handle_upload(ref: ObjectRef, services: Services) -> ModerationResult:
    """
    Checks a newly uploaded image with SafeSearch and blurs it if it is
    flagged as adult or violent content.

    Every finalized object is classified unless its message has already been
    moderated, which stops the blurred re-upload from being processed again.

    Args:
        ref (ObjectRef): The finalized object.
        services (Services): Clients for storage, vision and Firestore.

    Returns:
        ModerationResult: What was decided for the object.

    Raises:
        MalformedObjectPathError: If the path does not name a message.
        ModerationCommitError: If the image was replaced but the message
            could not be updated.
    """
    message_id = parse_message_image_path(ref.path).message_id

    if _is_already_moderated(message_id, services):
        logger.info("Message %s has already been moderated.", message_id)
        return ModerationResult(
            object_path=ref.path,
            action=ModerationAction.SKIPPED,
            message_id=message_id,
        )

    verdict = services.classifier.classify(ref)
    if verdict.is_inappropriate():
        logger.info("The image %s has been detected as inappropriate.", ref.path)
        blur_image(ref, message_id, services)
        return ModerationResult(
            object_path=ref.path,
            action=ModerationAction.BLURRED,
            message_id=message_id,
            verdict=verdict,
        )

    # The moderated flag records that an image was blurred, so images that
    # pass the check are left unmarked.
    logger.info("The image %s has been detected as OK.", ref.path)
    return ModerationResult(
        object_path=ref.path,
        action=ModerationAction.ALLOWED,
        message_id=message_id,
        verdict=verdict,
    )


@contextmanager
def _scratch_file(scratch_dir: str, object_path: str) -> Iterator[str]:
    # Named after the object so concurrent invocations on one instance can
    # collide on identical file names.
    local_path = os.path.join(scratch_dir, os.path.basename(object_path))
    try:
        yield local_path
    finally:
        if os.path.exists(local_path):
            os.remove(local_path)
            logger.info("Deleted local file %s.", local_path)


def blur_image(ref: ObjectRef, message_id: str, services: Services) -> None:
    """
    Blurs the image at `ref` in place and marks its message as moderated.

    The local copy is removed before the message is updated, whether or not
    the storage steps succeed.
    """
    settings = services.settings

    with _scratch_file(settings.scratch_dir, ref.path) as local_path:
        services.blob_store.download_to_file(ref, local_path)
        logger.info("Image has been downloaded to %s.", local_path)

        image_blur.blur_file(local_path, radius=settings.blur_radius)
        logger.info("Image has been blurred.")

        services.blob_store.upload_file(local_path, ref)
        logger.info("Blurred image has been uploaded to %s.", ref.path)

    try:
        services.document_store.update(
            settings.messages_collection, message_id, {"moderated": True}
        )
    except Exception as e:
        logger.error(
            "Blurred image %s is in storage but message %s is not marked: %s",
            ref.path,
            message_id,
            e,
        )
        raise ModerationCommitError(ref, message_id) from e
    logger.info("Marked message %s as moderated.", message_id)
