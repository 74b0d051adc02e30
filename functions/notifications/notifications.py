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
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import List, Optional

from backend.config import Settings
from backend.dependencies import Services
from shared.constants import MAX_NOTIFICATION_BODY_LENGTH, NOTIFICATION_BODY_ELLIPSIS
from shared.types import DeliveryErrorKind, Message, NotificationPayload, SendResult

logger = logging.getLogger(__name__)

STALE_TOKEN_ERRORS = (DeliveryErrorKind.INVALID_TOKEN, DeliveryErrorKind.NOT_REGISTERED)


@dataclass
class FanoutResult:
    token_count: int = 0
    success_count: int = 0
    removed_tokens: List[str] = field(default_factory=list)
    failed_tokens: List[str] = field(default_factory=list)


def truncate_body(text: Optional[str]) -> str:
    if not text:
        return ""
    if len(text) <= MAX_NOTIFICATION_BODY_LENGTH:
        return text
    keep = MAX_NOTIFICATION_BODY_LENGTH - len(NOTIFICATION_BODY_ELLIPSIS)
    return text[:keep] + NOTIFICATION_BODY_ELLIPSIS


def build_notification_payload(
    message: Message, settings: Settings
) -> NotificationPayload:
    """Builds the notification shown to every device for a new message."""
    kind = "a message" if message.text else "an image"
    return NotificationPayload(
        title=f"{message.name} posted {kind}",
        body=truncate_body(message.text),
        icon=message.profile_pic_url or settings.notification_placeholder_icon,
        click_action=settings.click_action_url,
    )


def load_device_tokens(services: Services) -> List[str]:
    documents = services.document_store.list_all(
        services.settings.fcm_tokens_collection
    )
    return [doc.id for doc in documents]


def notify_on_new_message(message: Message, services: Services) -> FanoutResult:
    """
    Sends a notification about `message` to every registered device.

    Tokens that FCM reports as invalid or unregistered are deleted
    afterwards; other delivery errors are only logged.

    Args:
        message (Message): The newly created message.
        services (Services): Clients for Firestore and FCM.

    Returns:
        FanoutResult: Delivery and cleanup counts.
    """
    payload = build_notification_payload(message, services.settings)

    tokens = load_device_tokens(services)
    if not tokens:
        logger.info("No device tokens registered; no notification sent.")
        return FanoutResult()

    results = services.push_dispatcher.send_to_many(tokens, payload)
    success_count = sum(1 for result in results if result.success)
    logger.info(
        "Notifications have been sent to %d of %d devices.",
        success_count,
        len(tokens),
    )

    removed, failed = cleanup_tokens(results, services)
    return FanoutResult(
        token_count=len(tokens),
        success_count=success_count,
        removed_tokens=removed,
        failed_tokens=failed,
    )


def cleanup_tokens(
    results: List[SendResult], services: Services
) -> tuple[List[str], List[str]]:
    """
    Deletes the tokens that are no longer valid and waits for every deletion.

    Returns:
        The tokens that were deleted and the tokens that failed with an error
        that does not warrant deletion.
    """
    stale: List[str] = []
    failed: List[str] = []
    for result in results:
        if result.success:
            continue
        if result.error_kind in STALE_TOKEN_ERRORS:
            stale.append(result.token)
        else:
            logger.error(
                "Failure sending notification to %s: %s",
                result.token,
                result.error_message,
            )
            failed.append(result.token)

    if not stale:
        return [], failed

    collection = services.settings.fcm_tokens_collection
    removed: List[str] = []
    max_workers = min(services.settings.token_cleanup_max_workers, len(stale))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(services.document_store.delete, collection, token): token
            for token in stale
        }
        for future in as_completed(futures):
            token = futures[future]
            try:
                future.result()
            except Exception as e:
                logger.error("Could not delete stale token %s: %s", token, e)
                continue
            logger.info("Deleted stale token %s.", token)
            removed.append(token)

    # Keep the dispatch order for callers.
    removed.sort(key=stale.index)
    return removed, failed
