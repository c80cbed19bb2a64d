"""Application configuration using environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root once so that `.env` is discovered regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Load configuration from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_base_url: AnyHttpUrl = Field(
        default_factory=lambda: AnyHttpUrl("https://task-backend-tfp7.onrender.com"),
        validation_alias=AliasChoices("TASKDESK_API_URL", "api_base_url"),
    )
    resource_path: str = Field(
        default="products",
        validation_alias=AliasChoices("TASKDESK_RESOURCE", "resource_path"),
    )
    request_timeout: float = Field(
        default=30.0,
        validation_alias=AliasChoices("TASKDESK_TIMEOUT", "request_timeout"),
        ge=1,
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )
    log_file: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("LOG_FILE", "log_file"),
    )

    @property
    def resource_url(self) -> str:
        """Return the collection URL without a trailing slash."""

        base = str(self.api_base_url).rstrip("/")
        return f"{base}/{self.resource_path.strip('/')}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()  # pyright: ignore[reportCallIssue]


__all__ = ["Settings", "get_settings"]
