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

# Cloud functions for FriendlyChat - welcome messages, image moderation and
# new message notifications.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.

# Standard library imports
import os
from functools import lru_cache
from typing import Optional

# Third-party library imports
from firebase_admin import initialize_app
from firebase_functions import firestore_fn, identity_fn, logger, options, storage_fn
from google.api_core import exceptions

# Local application imports
from backend.config import get_settings
from backend.dependencies import Services, build_services
from moderation import moderation
from notifications import notifications
from shared.constants import MESSAGES_COLLECTION
from shared.storage_paths import MalformedObjectPathError
from shared.types import Message, ObjectRef
from welcome import welcome

initialize_app()


def _is_locally_emulated() -> bool:
    """Returns True if the function is running in the local emulator."""
    return os.environ.get("FUNCTIONS_EMULATOR") == "true"


@lru_cache(maxsize=1)
def _services() -> Services:
    """The service bundle shared by every invocation in this process."""
    settings = get_settings()
    if _is_locally_emulated():
        logger.info("Running in the emulator with project", settings.project_id)
    return build_services(settings)


@identity_fn.before_user_created()
def add_welcome_messages(
    event: identity_fn.AuthBlockingEvent,
) -> identity_fn.BeforeCreateResponse | None:
    """Adds a message that welcomes new users into the chat."""
    _welcome_user(event.data.display_name, _services())
    return None


def _welcome_user(display_name: Optional[str], services: Services) -> Optional[str]:
    """
    Writes the welcome message for a new user.

    Unlike the other triggers, a Firestore failure here does not fail the
    invocation. This runs inside a blocking auth trigger, where raising would
    reject the sign-up, so a failed write is logged and the account is still
    created without its welcome message.
    """
    logger.info("A new user signed in for the first time.")
    try:
        return welcome.add_welcome_message(display_name, services)
    except Exception as e:
        logger.error(f"Failed to write welcome message: {e}")
        return None


@storage_fn.on_object_finalized(memory=options.MemoryOption.GB_2)
def blur_offensive_images(
    event: storage_fn.CloudEvent[storage_fn.StorageObjectData],
) -> None:
    """Checks if uploaded images are flagged as Adult or Violence and if so blurs them."""
    _moderate_object(event.data, _services())


def _moderate_object(
    data: storage_fn.StorageObjectData, services: Services
) -> moderation.ModerationResult:
    ref = ObjectRef(bucket=data.bucket, path=data.name)
    try:
        return moderation.handle_upload(ref, services)
    except MalformedObjectPathError as e:
        logger.error(f"Cannot moderate {ref.uri}: {e}")
        raise
    except moderation.ModerationCommitError as e:
        logger.error(f"Partial moderation of {ref.uri}: {e}")
        raise
    except exceptions.GoogleAPICallError as e:
        logger.error(f"Google API call failed while moderating {ref.uri}: {e}")
        raise
    except Exception as e:
        logger.error(f"Error moderating {ref.uri}: {e}")
        raise


@firestore_fn.on_document_created(document=MESSAGES_COLLECTION + "/{messageId}")
def send_notifications(
    event: firestore_fn.Event[firestore_fn.DocumentSnapshot | None],
) -> None:
    """Sends a notification to all registered devices when a message is posted."""
    if event.data is None:
        return
    _notify_devices(event.params["messageId"], event.data.to_dict(), _services())


def _notify_devices(
    message_id: str, message_data: Optional[dict], services: Services
) -> notifications.FanoutResult:
    message = Message.from_document(message_id, message_data or {})
    try:
        result = notifications.notify_on_new_message(message, services)
    except Exception as e:
        logger.error(f"Error sending notifications for message {message_id}: {e}")
        raise

    logger.info(
        f"Message {message_id}: notified {result.success_count} of "
        f"{result.token_count} devices, removed {len(result.removed_tokens)} "
        "stale tokens."
    )
    return result
