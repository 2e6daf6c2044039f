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
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./university_alerts.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="Africa/Johannesburg",
        description="IANA timezone (or UTC offset) used for persisted timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending alert emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of alert emails",
        min_length=3,
    )
    twilio_account_sid: str | None = Field(
        default=None, description="Twilio account SID used for SMS delivery"
    )
    twilio_auth_token: str | None = Field(
        default=None, description="Twilio auth token used for SMS delivery"
    )
    twilio_from_number: str | None = Field(
        default=None, description="Sender phone number registered with Twilio"
    )
    firebase_credentials_file: str | None = Field(
        default=None,
        description="Path to the Firebase service account JSON used for push messages",
    )

    dispatch_concurrency: int = Field(
        default=20,
        description="Maximum number of provider calls running at the same time",
        gt=0,
    )
    ledger_write_attempts: int = Field(
        default=3,
        description="Attempts made to write an in-app delivery record before giving up",
        ge=1,
    )
    ledger_retry_backoff_seconds: float = Field(
        default=0.5,
        description="Initial delay between in-app ledger write attempts (doubles each retry)",
        ge=0,
    )
    subscription_scan_batch_size: int = Field(
        default=500,
        description="Rows fetched per round trip while scanning subscriptions",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_provider_credentials(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")

        twilio_values = (
            self.twilio_account_sid,
            self.twilio_auth_token,
            self.twilio_from_number,
        )
        if any(twilio_values) and not all(twilio_values):
            raise ValueError(
                "TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_FROM_NUMBER must all be "
                "provided to enable SMS"
            )
        return self

    @property
    def email_enabled(self) -> bool:
        return bool(self.sendgrid_api_key and self.sendgrid_sender)

    @property
    def sms_enabled(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token)

    @property
    def push_enabled(self) -> bool:
        return bool(self.firebase_credentials_file)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
