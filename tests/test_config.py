"""Tests for provider credential validation in settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.config import Settings


def test_providers_are_disabled_without_credentials() -> None:
    settings = Settings(_env_file=None)

    assert settings.email_enabled is False
    assert settings.sms_enabled is False
    assert settings.push_enabled is False


def test_complete_provider_credentials_enable_channels() -> None:
    settings = Settings(
        _env_file=None,
        sendgrid_api_key="SG.fake",
        sendgrid_sender="alerts@university.example",
        twilio_account_sid="AC123",
        twilio_auth_token="secret",
        twilio_from_number="+15005550006",
        firebase_credentials_file="service-account.json",
    )

    assert settings.email_enabled is True
    assert settings.sms_enabled is True
    assert settings.push_enabled is True


def test_partial_twilio_credentials_are_rejected() -> None:
    with pytest.raises(ValidationError, match="TWILIO_FROM_NUMBER"):
        Settings(_env_file=None, twilio_account_sid="AC123", twilio_auth_token="secret")


def test_sendgrid_sender_must_be_an_email_address() -> None:
    with pytest.raises(ValidationError, match="SENDGRID_SENDER"):
        Settings(_env_file=None, sendgrid_api_key="SG.fake", sendgrid_sender="alerts")


def test_sendgrid_key_without_sender_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, sendgrid_api_key="SG.fake")
