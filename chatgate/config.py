"""
Runtime configuration helpers for the chat access service.

Loads DATABASE_URL and the messaging limits from the environment, falling back
to the .env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required field, must come from .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="Chat Gate", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")

    # Tokens are minted by the identity service; we only verify them.
    jwt_secret_key: str | None = Field(default=None, alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expires_minutes: int = Field(default=1440, alias="JWT_EXPIRES_MINUTES")

    # Messaging limits
    message_max_length: int = Field(default=10000, alias="MESSAGE_MAX_LENGTH")
    message_page_size: int = Field(default=50, alias="MESSAGE_PAGE_SIZE")
    message_page_max: int = Field(default=100, alias="MESSAGE_PAGE_MAX")

    # When false, blocking hides the conversation history from both participants.
    blocker_can_read_history: bool = Field(default=True, alias="BLOCKER_CAN_READ_HISTORY")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
