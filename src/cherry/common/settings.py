"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CHERRY_",
        env_file="configs/local.env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Host for the webhook HTTP server",
    )
    port: int = Field(
        default=8080,
        validation_alias=AliasChoices("CHERRY_PORT", "PORT", "port"),
        description="Port for the webhook HTTP server",
    )

    # Webhook verification
    todoist_client_secret: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "CHERRY_TODOIST_CLIENT_SECRET",
            "TODOIST_CLIENT_SECRET",
            "todoist_client_secret",
        ),
        description="Todoist client secret used to verify webhook signatures",
    )
    signature_header: str = Field(
        default="X-Todoist-Hmac-SHA256",
        description="Header carrying the webhook HMAC signature",
    )
    webhook_path: str = Field(
        default="/webhooks/todoist",
        description="Path receiving Todoist webhook callbacks",
    )

    # Logging
    log_path: str | None = Field(
        default=None,
        description="Directory for daily log files (platform default if unset)",
    )
    log_prefix: str = Field(
        default="cherry",
        description="File name prefix for daily log files",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for diagnostic (stderr) logging",
    )
    log_json: bool = Field(
        default=False,
        description="Render diagnostic logs as JSON",
    )

    # Client
    client_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL used by the client library and CLI",
    )
    http_timeout: float = Field(
        default=10.0,
        description="HTTP client request timeout in seconds",
    )

    @property
    def verification_enabled(self) -> bool:
        """Whether webhook signatures are checked."""
        return bool(self.todoist_client_secret)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
