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

# Firestore collections
MESSAGES_COLLECTION = "messages"
FCM_TOKENS_COLLECTION = "fcmTokens"

# Welcome messages
WELCOME_BOT_NAME = "Firebase Bot"
WELCOME_BOT_PROFILE_PIC_URL = "/images/firebase-logo.png"
ANONYMOUS_DISPLAY_NAME = "Anonymous"

# Notifications
NOTIFICATION_PLACEHOLDER_ICON = "/images/profile_placeholder.png"
MAX_NOTIFICATION_BODY_LENGTH = 100
NOTIFICATION_BODY_ELLIPSIS = "..."

# Image moderation
DEFAULT_BLUR_RADIUS = 24
