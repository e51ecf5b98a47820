"""Environment-based configuration for the WasteAI client."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from WASTEAI_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WASTEAI_",
        case_sensitive=False,
    )

    # Classification service
    endpoint_url: str = "https://backend-0pwz.onrender.com/api/classify"

    # None = wait forever
    request_timeout: float | None = Field(default=60.0, gt=0)

    # Input limits
    max_file_size: int = Field(default=10 * 1024 * 1024, ge=1)

    # Notifications
    notification_ttl: float = Field(default=5.0, gt=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


def get_settings() -> Settings:
    """Create and return client settings."""
    return Settings()
