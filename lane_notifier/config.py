"""Configuration settings for lane_notifier.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.

Storage credentials keep the variable names the object store documents
(AWS_* first, TIGRIS_* as fallback) and are validated lazily, when the
upload stage actually needs them.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ACCESS_KEY_ENV_VARS = ("AWS_ACCESS_KEY_ID", "TIGRIS_ACCESS_KEY_ID")
SECRET_KEY_ENV_VARS = ("AWS_SECRET_ACCESS_KEY", "TIGRIS_SECRET_ACCESS_KEY")


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the LANE_NOTIFIER_
    prefix, except for storage credentials which use their own names.
    """

    model_config = SettingsConfigDict(
        env_prefix="LANE_NOTIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Object storage
    storage_access_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("storage_access_key", *ACCESS_KEY_ENV_VARS),
        description="Object storage access key ID",
    )
    storage_secret_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("storage_secret_key", *SECRET_KEY_ENV_VARS),
        description="Object storage secret access key",
    )
    storage_bucket: str = Field(
        default="lane-exports",
        description="Bucket receiving exported artifacts",
    )
    storage_region: str = Field(
        default="ap-northeast-2",
        description="Object storage region",
    )
    storage_endpoint: str = Field(
        default="https://t3.storage.dev",
        description="S3-compatible endpoint URL",
    )

    # Lane CLI
    lane_binary: str = Field(
        default="lane",
        description="Lane executable name or path",
    )
    lane_environment: str = Field(
        default="prod",
        description="Lane environment passed to build and export",
    )
    export_dir: Path = Field(
        default=Path("lane-export-temp"),
        description="Local directory Lane exports into",
    )
    stage_timeout: int | None = Field(
        default=None,
        ge=1,
        description="Timeout for a single build/export process (None = no limit)",
    )

    # Docker readiness
    docker_binary: str = Field(
        default="docker",
        description="Docker executable used for readiness checks",
    )
    docker_ready_timeout: float = Field(
        default=90.0,
        gt=0,
        description="Seconds to wait for the Docker daemon before giving up",
    )
    docker_poll_interval: float = Field(
        default=1.0,
        gt=0,
        description="Seconds between Docker readiness checks",
    )

    # Concurrency
    upload_workers: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Maximum concurrent file uploads",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Address the HTTP server binds to",
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port the HTTP server listens on",
    )
    shutdown_grace_period: int = Field(
        default=60,
        ge=0,
        description="Seconds in-flight requests get to finish on shutdown",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    The secret key is masked by pydantic's SecretStr serialization.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = [
    "ACCESS_KEY_ENV_VARS",
    "SECRET_KEY_ENV_VARS",
    "Settings",
    "get_settings",
    "print_settings_json",
]
