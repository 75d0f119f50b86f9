"""Grid data API settings loaded from environment variables."""

from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    """Deployment environment."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class LogLevel(StrEnum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ObjectStoreBackend(StrEnum):
    """Where grid and config blobs are read from."""

    LOCAL = "local"
    GCS = "gcs"


class Settings(BaseSettings):
    """Application-wide settings loaded from environment variables / .env file.

    Deployment-specific locations live here. Never hardcode them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Locations ---
    DEFAULT_CONFIG_PATH: str = Field(
        default="gs://testgrid-data/config",
        description="Config location used when a request carries no scope.",
    )
    GRID_PATH_PREFIX: str = Field(
        default="grid",
        description="Prefix of per-test-group grid blobs, relative to the config.",
    )
    TAB_PATH_PREFIX: str = Field(
        default="",
        description="Prefix of per-tab grid blobs. Empty selects test-group paths.",
    )

    # --- Config cache ---
    CONFIG_TTL_SECONDS: float = Field(
        default=300.0,
        gt=0,
        description="Age after which a cached config snapshot is refreshed.",
    )
    SERVE_STALE_CONFIG: bool = Field(
        default=True,
        description="Serve the previous snapshot while a refresh is in flight.",
    )

    # --- Requests ---
    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        description="Deadline applied to every grid API operation.",
    )

    # --- Object Storage ---
    OBJECT_STORE_BACKEND: ObjectStoreBackend = Field(
        default=ObjectStoreBackend.LOCAL,
        description="Blob backend: local directory tree or GCS over HTTP.",
    )
    OBJECT_STORAGE_PATH: str = Field(
        default="./data",
        description="Root directory of the local backend (one subdir per bucket).",
    )
    GCS_BASE_URL: str = Field(
        default="https://storage.googleapis.com",
        description="Endpoint used by the GCS backend.",
    )

    # --- Logging ---
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application log level.",
    )

    # --- Environment ---
    ENVIRONMENT: Environment = Field(
        default=Environment.DEV,
        description="Deployment environment (dev/staging/prod).",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == Environment.PROD


def get_settings() -> Settings:
    """Factory function for dependency injection via FastAPI Depends."""
    return Settings()
