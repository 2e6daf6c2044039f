"""Tests for the individual channel dispatchers."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from app.application.use_cases.notifications import (
    EmailDispatcher,
    InAppDispatcher,
    PushDispatcher,
    SmsDispatcher,
    build_channel_dispatchers,
)
from app.application.use_cases.notifications.dispatchers import compose_email
from app.config import Settings
from app.domain.entities import AlertCategory, DeliveryChannel
from app.infrastructure.repositories import DeliveryRecordRepository
from tests.fakes import FakeEmailClient, FakePushClient, FakeSmsClient

pytestmark = pytest.mark.anyio


class RecordingPublisher:
    def __init__(self) -> None:
        self.published = []

    def dispatch(self, record) -> None:
        self.published.append(record)


async def test_sms_dispatcher_composes_body(make_alert, sms_client) -> None:
    alert = make_alert(title="Midterm", description="Bring a calculator.")

    result = await SmsDispatcher(sms_client).send("+27991234567", alert)

    assert result.success is True
    assert result.channel is DeliveryChannel.SMS
    assert sms_client.sent == [
        ("+27991234567", "Midterm\nBring a calculator.\nModule: Computer Science Fundamentals")
    ]


async def test_sms_provider_error_is_reported_not_raised(make_alert) -> None:
    alert = make_alert()
    client = FakeSmsClient(fail_for=("+000",))

    result = await SmsDispatcher(client, max_concurrency=2).send("+000", alert)

    assert result.success is False
    assert result.recipient == "+000"
    assert "Invalid 'To' phone number" in result.error_message
    assert result.retryable is False


async def test_unexpected_exception_is_contained(make_alert) -> None:
    class ExplodingClient:
        def send_sms(self, *, to, body):
            raise RuntimeError("connection reset")

    result = await SmsDispatcher(ExplodingClient()).send("+27991234567", make_alert())

    assert result.success is False
    assert result.error_message == "connection reset"


async def test_email_dispatcher_sends_subject_text_and_html(make_alert, email_client) -> None:
    alert = make_alert(title="Quiz <1>", category=AlertCategory.TEST)

    result = await EmailDispatcher(email_client).send("x@y.com", alert)

    assert result.success is True
    sent = email_client.sent[0]
    assert sent["recipient"] == "x@y.com"
    assert sent["subject"] == "Quiz <1> - Computer Science Fundamentals"
    assert "Type: test" in sent["plain_text"]
    assert "<h2>Quiz &lt;1&gt;</h2>" in sent["html_content"]


async def test_email_failure_is_reported(make_alert) -> None:
    result = await EmailDispatcher(FakeEmailClient(fail_for=("x@y.com",))).send(
        "x@y.com", make_alert()
    )

    assert result.success is False
    assert "status 400" in result.error_message


async def test_push_dispatcher_payload(make_alert, push_client) -> None:
    alert = make_alert("alert-9", category=AlertCategory.EXAM)

    result = await PushDispatcher(push_client).send("device-token", alert)

    assert result.success is True
    assert push_client.sent == [
        {
            "token": "device-token",
            "title": alert.title,
            "body": alert.description,
            "data": {"alertId": "alert-9", "moduleId": "m1", "category": "exam"},
        }
    ]


async def test_expired_push_token_is_a_failure(make_alert) -> None:
    result = await PushDispatcher(FakePushClient(fail_for=("stale",))).send(
        "stale", make_alert()
    )

    assert result.success is False
    assert "expired push token" in result.error_message


async def test_in_app_dispatch_is_idempotent_per_user_and_alert(session, make_alert) -> None:
    alert = make_alert()
    publisher = RecordingPublisher()
    dispatcher = InAppDispatcher(session, backoff_seconds=0, publisher=publisher)

    first = await dispatcher.send("u1", alert)
    second = await dispatcher.send("u1", alert)

    records = DeliveryRecordRepository(session).list_for_user("u1")
    assert first.success and second.success
    assert first.record_id == second.record_id
    assert len(records) == 1
    assert records[0].read is False
    assert records[0].module_name == "Computer Science Fundamentals"
    assert [record.id for record in publisher.published] == [first.record_id]


async def test_in_app_redelivery_keeps_read_flag(session, make_alert) -> None:
    alert = make_alert()
    dispatcher = InAppDispatcher(session, backoff_seconds=0)
    first = await dispatcher.send("u1", alert)
    DeliveryRecordRepository(session).set_read(first.record_id, user_id="u1", read=True)

    await dispatcher.send("u1", alert)

    assert DeliveryRecordRepository(session).get(first.record_id).read is True


async def test_in_app_write_is_retried(session, make_alert, monkeypatch) -> None:
    alert = make_alert()
    dispatcher = InAppDispatcher(session, attempts=3, backoff_seconds=0)
    original = DeliveryRecordRepository.upsert_in_app
    calls = {"count": 0}

    def flaky(self, record):
        calls["count"] += 1
        if calls["count"] == 1:
            raise OperationalError("INSERT", {}, Exception("database is locked"))
        return original(self, record)

    monkeypatch.setattr(DeliveryRecordRepository, "upsert_in_app", flaky)

    result = await dispatcher.send("u1", alert)

    assert result.success is True
    assert calls["count"] == 2


async def test_in_app_failure_is_flagged_retryable(session, make_alert, monkeypatch, caplog) -> None:
    alert = make_alert()
    dispatcher = InAppDispatcher(session, attempts=2, backoff_seconds=0)

    def always_fail(self, record):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(DeliveryRecordRepository, "upsert_in_app", always_fail)

    with caplog.at_level("WARNING"):
        result = await dispatcher.send("u1", alert)

    assert result.success is False
    assert result.retryable is True
    assert "disk I/O error" in result.error_message
    assert caplog.text.count("attempt") == 2


async def test_compose_email_uses_title_and_module_in_subject(make_alert) -> None:
    subject, plain_text, html_content = compose_email(make_alert(title="Midterm"))

    assert subject == "Midterm - Computer Science Fundamentals"
    assert plain_text.startswith("Midterm\n")
    assert "<p><strong>Module:</strong> Computer Science Fundamentals</p>" in html_content


async def test_external_dispatchers_share_one_limiter(session) -> None:
    settings = Settings(
        _env_file=None,
        sendgrid_api_key="SG.fake",
        sendgrid_sender="alerts@university.example",
        twilio_account_sid="AC123",
        twilio_auth_token="secret",
        twilio_from_number="+15005550006",
        dispatch_concurrency=3,
    )

    first = build_channel_dispatchers(session, settings)
    second = build_channel_dispatchers(session, settings)

    limiter = first[DeliveryChannel.SMS]._limiter
    assert limiter is not None
    assert limiter.total_tokens == 3
    assert first[DeliveryChannel.EMAIL]._limiter is limiter
    assert second[DeliveryChannel.SMS]._limiter is limiter
    assert DeliveryChannel.PUSH not in first
