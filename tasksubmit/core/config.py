from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment."""

    app_name: str = Field(default="TaskSubmit", validation_alias="APP_NAME")
    environment: str = Field(default="local", validation_alias="APP_ENV")
    version: str = Field(default="0.1.0")
    api_base_url: str = Field(
        default="http://localhost:5000/api",
        validation_alias="API_BASE_URL",
    )
    upload_base_url: str = Field(
        default="http://localhost:5000",
        validation_alias="UPLOAD_BASE_URL",
    )
    # None disables the timeout entirely; a hung request then stays in flight.
    http_timeout_seconds: float | None = Field(
        default=None,
        validation_alias="HTTP_TIMEOUT_SECONDS",
    )
    storage_url: str = Field(
        default="sqlite:///tasksubmit_client.db",
        validation_alias="CLIENT_STORAGE_URL",
    )
    discard_stale_responses: bool = Field(
        default=True,
        validation_alias="DISCARD_STALE_RESPONSES",
    )

    @property
    def normalized_api_base_url(self) -> str:
        """API base URL without a trailing slash."""
        return self.api_base_url.rstrip("/")

    @property
    def normalized_upload_base_url(self) -> str:
        return self.upload_base_url.rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="allow")


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()
