"""
Runtime configuration helpers for the document store.

Loads STORAGE_BACKEND, DATABASE_URL and friends from the environment and the
.env file located in the project root.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding variables already set in the environment
load_dotenv(dotenv_path=ENV_PATH, override=False)


class CascadePolicy(StrEnum):
    """What happens to records that reference a deleted post."""

    NONE = "none"
    DEPENDENTS = "dependents"
    ALL = "all"


class Settings(BaseSettings):
    app_name: str = Field(default="feedstore", alias="APP_NAME")

    storage_backend: Literal["sql", "file", "memory"] = Field(default="sql", alias="STORAGE_BACKEND")
    database_url: str = Field(default="sqlite+pysqlite:///./feedstore.db", alias="DATABASE_URL")
    storage_dir: Path = Field(default=BASE_DIR / "data", alias="STORAGE_DIR")

    post_delete_cascade: CascadePolicy = Field(default=CascadePolicy.NONE, alias="POST_DELETE_CASCADE")
    message_notifications: bool = Field(default=True, alias="MESSAGE_NOTIFICATIONS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["BASE_DIR", "CascadePolicy", "Settings", "get_settings"]
