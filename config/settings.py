"""Application settings and configuration management."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interview.db")
    APP_CONFIG_PATH: str = Field(default="app_config.json")

    UPLOAD_DIR: str = Field(default="data/uploads")
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    ALLOWED_UPLOAD_EXTENSIONS: List[str] = Field(
        default_factory=lambda: [".pdf", ".doc", ".docx", ".txt", ".rtf"]
    )

    PROMPT_CACHE_TTL_S: float = 300.0
    CONTEXT_WINDOW_TURNS: int = 10

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True)


settings = Settings()
