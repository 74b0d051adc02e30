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

from dataclasses import dataclass, fields
from enum import IntEnum, StrEnum
from typing import Any, Optional

from dacite import Config, from_dict

from shared.json_utils import convert_keys


class Likelihood(IntEnum):
    """Cloud Vision SafeSearch likelihood, ordered from least to most likely."""

    UNKNOWN = 0
    VERY_UNLIKELY = 1
    UNLIKELY = 2
    POSSIBLE = 3
    LIKELY = 4
    VERY_LIKELY = 5


@dataclass(frozen=True)
class SafeSearchVerdict:
    adult: Likelihood
    violence: Likelihood

    def is_inappropriate(self, threshold: Likelihood = Likelihood.LIKELY) -> bool:
        return self.adult >= threshold or self.violence >= threshold


@dataclass(frozen=True)
class ObjectRef:
    """A blob in a storage bucket."""

    bucket: str
    path: str

    @property
    def uri(self) -> str:
        return f"gs://{self.bucket}/{self.path}"


@dataclass
class Message:
    """A chat message, stored as one Firestore document per message."""

    name: str = ""
    text: Optional[str] = None
    image_url: Optional[str] = None
    storage_uri: Optional[str] = None
    profile_pic_url: Optional[str] = None
    moderated: bool = False
    timestamp: Any = None
    id: Optional[str] = None

    @classmethod
    def from_document(cls, doc_id: Optional[str], data: dict) -> "Message":
        message = from_dict(
            data_class=cls,
            data=convert_keys(data, "camel_to_snake"),
            config=Config(check_types=False),
        )
        message.id = doc_id
        return message

    def to_document(self) -> dict:
        """
        Returns the Firestore fields for this message in camelCase.

        The id is the document key and is not stored as a field. Unset
        optional fields are omitted. Values are not copied so that Firestore
        sentinels such as SERVER_TIMESTAMP survive.
        """
        data = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "id" and getattr(self, f.name) is not None
        }
        return convert_keys(data, "snake_to_camel")


@dataclass
class NotificationPayload:
    title: str
    body: str
    icon: str
    click_action: Optional[str] = None


class DeliveryErrorKind(StrEnum):
    INVALID_TOKEN = "INVALID_TOKEN"
    NOT_REGISTERED = "NOT_REGISTERED"
    OTHER = "OTHER"


@dataclass
class SendResult:
    """Delivery outcome for one device token."""

    token: str
    error_kind: Optional[DeliveryErrorKind] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_kind is None
