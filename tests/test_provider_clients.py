"""Tests for the Twilio and Firebase provider clients."""

from __future__ import annotations

import types

import pytest
from firebase_admin import messaging
from firebase_admin.exceptions import FirebaseError
from twilio.base.exceptions import TwilioRestException

from app.infrastructure.channels import (
    ChannelProviderError,
    FirebasePushClient,
    TwilioSmsClient,
)


class _FakeMessages:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.created: list[dict] = []

    def create(self, **kwargs):
        if self.error is not None:
            raise self.error
        self.created.append(kwargs)
        return types.SimpleNamespace(sid="SM123")


def test_twilio_client_sends_from_configured_number() -> None:
    fake = types.SimpleNamespace(messages=_FakeMessages())
    client = TwilioSmsClient("AC123", "secret", "+15005550006", client=fake)

    sid = client.send_sms(to="+27991234567", body="Lecture moved")

    assert sid == "SM123"
    assert fake.messages.created == [
        {"body": "Lecture moved", "from_": "+15005550006", "to": "+27991234567"}
    ]


def test_twilio_client_maps_rest_errors(caplog) -> None:
    error = TwilioRestException(
        400, "/Messages", msg="The 'To' number is not a valid phone number.", code=21211
    )
    fake = types.SimpleNamespace(messages=_FakeMessages(error=error))
    client = TwilioSmsClient("AC123", "secret", "+15005550006", client=fake)

    with caplog.at_level("ERROR"), pytest.raises(ChannelProviderError) as excinfo:
        client.send_sms(to="12", body="Lecture moved")

    assert str(excinfo.value) == "Twilio error 21211: The 'To' number is not a valid phone number."
    assert excinfo.value.status_code == 400
    assert "code 21211" in caplog.text


def test_push_client_requires_credentials() -> None:
    with pytest.raises(ValueError):
        FirebasePushClient()


def test_push_client_stringifies_data(monkeypatch: pytest.MonkeyPatch) -> None:
    app = object()
    captured = {}

    def fake_send(message, app=None):
        captured["message"] = message
        captured["app"] = app
        return "projects/demo/messages/1"

    monkeypatch.setattr(messaging, "send", fake_send)

    message_id = FirebasePushClient(app=app).send_push(
        token="device-token",
        title="Exam venue",
        body="Hall B",
        data={"alertId": "a1", "moduleId": 7, "category": None},
    )

    assert message_id == "projects/demo/messages/1"
    assert captured["app"] is app
    message = captured["message"]
    assert message.token == "device-token"
    assert message.notification.title == "Exam venue"
    assert message.data == {"alertId": "a1", "moduleId": "7", "category": ""}


def test_push_client_reports_expired_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_send(message, app=None):
        raise messaging.UnregisteredError("Requested entity was not found.")

    monkeypatch.setattr(messaging, "send", fake_send)

    with pytest.raises(ChannelProviderError, match="Invalid or expired push token"):
        FirebasePushClient(app=object()).send_push(
            token="stale", title="t", body="b", data={}
        )


def test_push_client_wraps_firebase_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_send(message, app=None):
        raise FirebaseError("UNAVAILABLE", "Service unavailable")

    monkeypatch.setattr(messaging, "send", fake_send)

    with pytest.raises(ChannelProviderError, match="FCM error UNAVAILABLE"):
        FirebasePushClient(app=object()).send_push(
            token="token", title="t", body="b", data={}
        )
