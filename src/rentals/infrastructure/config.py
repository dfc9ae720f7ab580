"""Configuration management for the reservation ledger."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from ``RENTALS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RENTALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///rentals.db", description="SQLAlchemy database URL"
    )
    database_echo: bool = Field(default=False, description="Echo emitted SQL")

    # Concurrency
    lock_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to wait for a product's lock before reporting a conflict",
    )

    # API
    api_host: str = Field(default="127.0.0.1", description="API server host")
    api_port: int = Field(default=8000, description="API server port")
    inventory_refresh_interval: float = Field(
        default=0.0,
        ge=0,
        description="Seconds between cached-availability refreshes while serving (0 disables)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="text", description="Log format")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
