"""Runtime configuration for the ticket bridge."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ticketbridge import __version__


class Settings(BaseSettings):
    """Configuration values mapped from ``TICKETBRIDGE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TICKETBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field("ticketbridge", description="Service name shown in the OpenAPI docs.")
    version: str = Field(__version__)

    # Receiver configuration file (YAML) holding Jira connections and templates
    config_file: str = Field("./ticketbridge.yml")

    # HTTP listener
    host: str = Field("0.0.0.0")
    port: int = Field(8080)

    # Logging
    log_level: str = Field("info")
    log_format: str = Field("logfmt", description="logfmt or json")

    # Reconciliation
    hash_jira_label: bool = Field(False, description="Use the fixed length hashed ticket label.")
    request_timeout_seconds: float = Field(30.0)
    serialize_per_fingerprint: bool = Field(True)
    jira_timeout_seconds: float = Field(10.0)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance for dependency injection."""
    return Settings()
