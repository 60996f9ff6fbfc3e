"""Client configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = "development"
    debug: bool = True

    # Feedback API
    api_base_url: str = "http://localhost:8000/api"
    asset_base_url: str = "http://localhost:8000"

    # Timing (seconds)
    request_timeout_seconds: float = 10.0
    poll_interval_seconds: float = 10.0  # an older client revision polled every 60s
    acknowledgement_seconds: float = 2.0

    # Logging
    log_level: str = "INFO"

    @field_validator("api_base_url", "asset_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
