"""
Push notification dispatch through Firebase Cloud Messaging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Protocol

from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from shared.types import DeliveryErrorKind, NotificationPayload, SendResult

# FCM rejects multicast messages with more tokens than this.
FCM_MULTICAST_LIMIT = 500

# FCM reports a malformed token as INVALID_ARGUMENT with this wording. The same
# code is used for a malformed payload, which must not prune any token.
INVALID_TOKEN_MARKER = "registration token"


class PushDispatcher(Protocol):
    def send_to_many(
        self, tokens: List[str], payload: NotificationPayload
    ) -> List[SendResult]:
        ...


def classify_delivery_error(exc: Exception) -> DeliveryErrorKind:
    """Maps an FCM send exception onto the error kinds the functions act on."""
    if isinstance(exc, messaging.UnregisteredError):
        return DeliveryErrorKind.NOT_REGISTERED
    if isinstance(exc, firebase_exceptions.InvalidArgumentError):
        if INVALID_TOKEN_MARKER in str(exc).lower():
            return DeliveryErrorKind.INVALID_TOKEN
    return DeliveryErrorKind.OTHER


def _is_payload_rejection(chunk: List[str], responses) -> bool:
    """True when every token in a multi-token batch failed with INVALID_ARGUMENT."""
    return len(chunk) > 1 and all(
        isinstance(response.exception, firebase_exceptions.InvalidArgumentError)
        for response in responses
    )


def build_multicast_message(
    tokens: List[str], payload: NotificationPayload
) -> messaging.MulticastMessage:
    fcm_options = None
    if payload.click_action:
        fcm_options = messaging.WebpushFCMOptions(link=payload.click_action)

    return messaging.MulticastMessage(
        tokens=tokens,
        notification=messaging.Notification(title=payload.title, body=payload.body),
        webpush=messaging.WebpushConfig(
            notification=messaging.WebpushNotification(
                title=payload.title, body=payload.body, icon=payload.icon
            ),
            fcm_options=fcm_options,
        ),
    )


class FcmPushDispatcher:
    """Sends one notification to many devices and reports per-token results."""

    def __init__(self, app=None):
        self._app = app

    def send_to_many(
        self, tokens: List[str], payload: NotificationPayload
    ) -> List[SendResult]:
        results: List[SendResult] = []
        for start in range(0, len(tokens), FCM_MULTICAST_LIMIT):
            chunk = tokens[start : start + FCM_MULTICAST_LIMIT]
            batch = messaging.send_each_for_multicast(
                build_multicast_message(chunk, payload), app=self._app
            )
            payload_rejected = _is_payload_rejection(chunk, batch.responses)
            for token, response in zip(chunk, batch.responses):
                if response.success:
                    results.append(SendResult(token=token))
                else:
                    kind = (
                        DeliveryErrorKind.OTHER
                        if payload_rejected
                        else classify_delivery_error(response.exception)
                    )
                    results.append(
                        SendResult(
                            token=token,
                            error_kind=kind,
                            error_message=str(response.exception),
                        )
                    )
        return results


@dataclass
class InMemoryPushDispatcher:
    """Records dispatches and fails the tokens listed in `errors`."""

    errors: Dict[str, DeliveryErrorKind] = field(default_factory=dict)
    sent: list = field(default_factory=list)

    def send_to_many(
        self, tokens: List[str], payload: NotificationPayload
    ) -> List[SendResult]:
        self.sent.append((list(tokens), payload))
        results = []
        for token in tokens:
            kind = self.errors.get(token)
            if kind is None:
                results.append(SendResult(token=token))
            else:
                results.append(
                    SendResult(token=token, error_kind=kind, error_message=str(kind))
                )
        return results
