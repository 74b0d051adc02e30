"""
Configuration and settings for the chat functions.
"""

from __future__ import annotations

import tempfile
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared import constants


class Settings(BaseSettings):
    """Environment-backed settings, read with the FRIENDLYCHAT_ prefix."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FRIENDLYCHAT_",
        extra="ignore",
        populate_by_name=True,
    )

    # Set by the Cloud Functions runtime.
    project_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "project_id", "FRIENDLYCHAT_PROJECT_ID", "GCLOUD_PROJECT"
        ),
    )

    # Firestore
    messages_collection: str = Field(default=constants.MESSAGES_COLLECTION)
    fcm_tokens_collection: str = Field(default=constants.FCM_TOKENS_COLLECTION)

    # Welcome messages
    welcome_bot_name: str = Field(default=constants.WELCOME_BOT_NAME)
    welcome_bot_profile_pic_url: str = Field(
        default=constants.WELCOME_BOT_PROFILE_PIC_URL
    )

    # Notifications
    notification_placeholder_icon: str = Field(
        default=constants.NOTIFICATION_PLACEHOLDER_ICON
    )
    token_cleanup_max_workers: int = Field(default=8, ge=1)

    # Image moderation
    scratch_dir: str = Field(default_factory=tempfile.gettempdir)
    blur_radius: float = Field(default=constants.DEFAULT_BLUR_RADIUS, gt=0)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    @property
    def click_action_url(self) -> Optional[str]:
        if not self.project_id:
            return None
        return f"https://{self.project_id}.firebaseapp.com"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
