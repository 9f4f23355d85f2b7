"""Configuration management for the Redis service adapter."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Adapter configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="REDIS_ADAPTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Observability
    log_level: str = Field("INFO", description="Log level for operator diagnostics")
    log_format: str = Field("console", description="Log renderer: console or json")

    # Binding
    expected_platform: str = Field(
        "cloudfoundry",
        description="Platform expected in the request context of bind calls",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.strip().lower()
        if fmt not in {"console", "json"}:
            raise ValueError(f"Invalid log format: {v}")
        return fmt
