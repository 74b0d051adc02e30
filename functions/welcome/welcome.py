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
from typing import Optional

from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from backend.dependencies import Services
from shared.constants import ANONYMOUS_DISPLAY_NAME
from shared.types import Message

logger = logging.getLogger(__name__)


def welcome_text(display_name: Optional[str]) -> str:
    full_name = display_name or ANONYMOUS_DISPLAY_NAME
    return f"{full_name} signed in for the first time! Welcome!"


def add_welcome_message(display_name: Optional[str], services: Services) -> str:
    """
    Posts a message from the bot welcoming a new user into the chat.

    Returns:
        str: The id of the new message document.
    """
    settings = services.settings
    message = Message(
        name=settings.welcome_bot_name,
        profile_pic_url=settings.welcome_bot_profile_pic_url,
        text=welcome_text(display_name),
        timestamp=SERVER_TIMESTAMP,
    )
    message_id = services.document_store.add(
        settings.messages_collection, message.to_document()
    )
    logger.info("Welcome message %s written to database.", message_id)
    return message_id
