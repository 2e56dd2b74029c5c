"""Application configuration via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from clickup_context.constants import CLICKUP_API_V2


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ClickUp API
    clickup_api_base_url: str = CLICKUP_API_V2
    # Personal token (pk_...), registered for default_user_id at startup if set
    clickup_api_token: str = ""
    request_timeout: float = 30.0

    # Context defaults
    default_user_id: str = "default"
    default_workspace_id: str = ""
    default_limit: int = 10

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()
