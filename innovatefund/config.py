"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite:///./innovatefund.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    firebase_service_account: str | None = Field(
        default=None,
        description="Firebase service account JSON used to send push notifications",
    )
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    openai_base_url: str | None = Field(
        default=None, description="Optional base URL for OpenAI compatible providers"
    )
    openai_model: str = Field(default="gpt-4.1-mini", description="Assistant model name")
    openai_temperature: float = Field(default=0.7, ge=0, le=2)
    openai_max_output_tokens: int | None = Field(default=None)
    frontend_url: str = Field(
        default="http://localhost:5173",
        description="Comma separated list of allowed frontend origins",
    )
    app_timezone: str = Field(default="UTC", description="Timezone used for timestamps")
    delivery_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to each push or email delivery call",
        gt=0,
    )
    persistence_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to the notification write",
        gt=0,
    )
    shutdown_grace_seconds: float = Field(
        default=5.0,
        description="Time pending deliveries get to finish on shutdown",
        gt=0,
    )
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @property
    def allowed_origins(self) -> list[str]:
        """Return the configured CORS origins."""

        return [origin.strip() for origin in self.frontend_url.split(",") if origin.strip()]

    @property
    def primary_frontend_url(self) -> str:
        origins = self.allowed_origins
        return origins[0] if origins else "http://localhost:5173"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
