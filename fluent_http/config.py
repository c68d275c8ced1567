"""Fluent HTTP client configuration via environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client defaults applied to every new builder."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FLUENT_HTTP_",
        case_sensitive=False,
        extra="ignore",
    )

    # Request defaults
    default_timeout_seconds: float = Field(default=300.0, gt=0)
    default_locale: str = "pt-BR"  # Used when the process locale is unknown
    follow_redirects: bool = True
    user_agent: str = "fluent-http/0.1.0"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Metrics
    metrics_enabled: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
