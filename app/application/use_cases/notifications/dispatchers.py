"""Channel dispatchers sharing a uniform delivery result contract."""

from __future__ import annotations

import html
import logging
from functools import lru_cache, partial
from typing import Any

import anyio
from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings
from app.domain.entities import (
    Alert,
    DeliveryChannel,
    DeliveryRecord,
    DeliveryResult,
    DeliveryStatus,
)
from app.infrastructure.channels import (
    FirebasePushClient,
    SendGridEmailClient,
    TwilioSmsClient,
)
from app.infrastructure.notifications import NotificationPublisher
from app.infrastructure.repositories import DeliveryRecordRepository
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def compose_sms_body(alert: Alert) -> str:
    return f"{alert.title}\n{alert.description}\nModule: {alert.module_name}"


def compose_email(alert: Alert) -> tuple[str, str, str]:
    """Return ``(subject, plain_text, html)`` for ``alert``."""

    subject = f"{alert.title} - {alert.module_name}"
    plain_text = "\n".join(
        (
            alert.title,
            f"Module: {alert.module_name}",
            f"Type: {alert.category.value}",
            "",
            alert.description,
        )
    )
    html_content = "".join(
        (
            f"<h2>{html.escape(alert.title)}</h2>",
            f"<p><strong>Module:</strong> {html.escape(alert.module_name)}</p>",
            f"<p><strong>Type:</strong> {html.escape(alert.category.value)}</p>",
            f"<p>{html.escape(alert.description)}</p>",
        )
    )
    return subject, plain_text, html_content


def compose_push_payload(alert: Alert) -> dict[str, Any]:
    return {
        "title": alert.title,
        "body": alert.description,
        "data": {
            "alertId": alert.id,
            "moduleId": alert.module_id,
            "category": alert.category.value,
        },
    }


class ChannelDispatcher:
    """Base class for dispatchers; ``send`` never raises."""

    channel: DeliveryChannel

    async def send(self, recipient: str, alert: Alert) -> DeliveryResult:
        try:
            await self._deliver(recipient, alert)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.error(
                "%s delivery of alert %s to %s failed: %s",
                self.channel.value,
                alert.id,
                recipient,
                message,
            )
            return DeliveryResult(
                success=False,
                channel=self.channel,
                recipient=recipient,
                error_message=message,
            )
        return DeliveryResult(success=True, channel=self.channel, recipient=recipient)

    async def _deliver(self, recipient: str, alert: Alert) -> None:
        raise NotImplementedError


class ProviderCallLimiter:
    """Cap on blocking provider calls shared by every external dispatcher.

    The underlying :class:`anyio.CapacityLimiter` is created on first use so
    instances can be built outside an event loop.
    """

    def __init__(self, total_tokens: int) -> None:
        self.total_tokens = total_tokens
        self._limiter: anyio.CapacityLimiter | None = None

    def get(self) -> anyio.CapacityLimiter:
        if self._limiter is None:
            self._limiter = anyio.CapacityLimiter(self.total_tokens)
        return self._limiter


@lru_cache
def get_provider_limiter(total_tokens: int) -> ProviderCallLimiter:
    """Return the process-wide limiter for ``total_tokens`` concurrent calls."""

    return ProviderCallLimiter(total_tokens)


class _BlockingProviderDispatcher(ChannelDispatcher):
    """Run blocking SDK calls in worker threads under a shared limiter."""

    def __init__(
        self,
        client: Any,
        *,
        limiter: ProviderCallLimiter | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        self._client = client
        if limiter is None and max_concurrency:
            limiter = ProviderCallLimiter(max_concurrency)
        self._limiter = limiter

    async def _run(self, func, **kwargs: Any) -> Any:
        limiter = self._limiter.get() if self._limiter is not None else None
        return await to_thread.run_sync(partial(func, **kwargs), limiter=limiter)


class SmsDispatcher(_BlockingProviderDispatcher):
    channel = DeliveryChannel.SMS

    async def _deliver(self, recipient: str, alert: Alert) -> None:
        await self._run(self._client.send_sms, to=recipient, body=compose_sms_body(alert))


class EmailDispatcher(_BlockingProviderDispatcher):
    channel = DeliveryChannel.EMAIL

    async def _deliver(self, recipient: str, alert: Alert) -> None:
        subject, plain_text, html_content = compose_email(alert)
        await self._run(
            self._client.send_email,
            recipient=recipient,
            subject=subject,
            plain_text=plain_text,
            html_content=html_content,
        )


class PushDispatcher(_BlockingProviderDispatcher):
    channel = DeliveryChannel.PUSH

    async def _deliver(self, recipient: str, alert: Alert) -> None:
        payload = compose_push_payload(alert)
        await self._run(
            self._client.send_push,
            token=recipient,
            title=payload["title"],
            body=payload["body"],
            data=payload["data"],
        )


class InAppDispatcher(ChannelDispatcher):
    """Write the notification-feed row for a user.

    The recipient is the user identifier. Storage failures are retried with
    exponential backoff; once attempts are exhausted the result is flagged as
    ``retryable`` so operators can tell it apart from unreachable users.
    """

    channel = DeliveryChannel.IN_APP

    def __init__(
        self,
        session: Session,
        *,
        attempts: int = 3,
        backoff_seconds: float = 0.5,
        publisher: NotificationPublisher | None = None,
    ) -> None:
        self._repository = DeliveryRecordRepository(session)
        self._attempts = max(1, attempts)
        self._backoff_seconds = max(0.0, backoff_seconds)
        self._publisher = publisher

    async def send(self, recipient: str, alert: Alert) -> DeliveryResult:
        record = DeliveryRecord(
            id=None,
            user_id=recipient,
            alert_id=alert.id,
            channel=DeliveryChannel.IN_APP,
            status=DeliveryStatus.SENT,
            title=alert.title,
            description=alert.description,
            category=alert.category.value,
            module_id=alert.module_id,
            module_name=alert.module_name,
            created_at=now_in_app_timezone(),
            read=False,
        )

        delay = self._backoff_seconds
        last_error: Exception | None = None
        for attempt in range(1, self._attempts + 1):
            try:
                stored, created = self._repository.upsert_in_app(record)
            except SQLAlchemyError as exc:
                last_error = exc
                logger.warning(
                    "In-app ledger write for user %s, alert %s failed (attempt %s/%s): %s",
                    recipient,
                    alert.id,
                    attempt,
                    self._attempts,
                    exc,
                )
                if attempt < self._attempts:
                    await anyio.sleep(delay)
                    delay *= 2
                continue
            except Exception as exc:
                return self._failure(recipient, alert, exc, retryable=False)

            if created and self._publisher is not None:
                self._publisher.dispatch(stored)
            return DeliveryResult(
                success=True,
                channel=self.channel,
                recipient=recipient,
                record_id=stored.id,
            )

        return self._failure(recipient, alert, last_error, retryable=True)

    def _failure(
        self, recipient: str, alert: Alert, exc: Exception | None, *, retryable: bool
    ) -> DeliveryResult:
        message = str(exc) if exc is not None else "in-app ledger write failed"
        logger.error(
            "Giving up on in-app notification for user %s, alert %s: %s",
            recipient,
            alert.id,
            message,
        )
        return DeliveryResult(
            success=False,
            channel=self.channel,
            recipient=recipient,
            error_message=message,
            retryable=retryable,
        )


def build_channel_dispatchers(
    session: Session,
    settings: Settings,
    *,
    publisher: NotificationPublisher | None = None,
) -> dict[DeliveryChannel, ChannelDispatcher]:
    """Create a dispatcher for every configured provider plus the in-app feed.

    External dispatchers share one process-wide limiter, so at most
    ``settings.dispatch_concurrency`` provider calls run at once across all
    channels and requests.
    """

    limiter = get_provider_limiter(settings.dispatch_concurrency)

    dispatchers: dict[DeliveryChannel, ChannelDispatcher] = {
        DeliveryChannel.IN_APP: InAppDispatcher(
            session,
            attempts=settings.ledger_write_attempts,
            backoff_seconds=settings.ledger_retry_backoff_seconds,
            publisher=publisher,
        )
    }

    if settings.sms_enabled:
        dispatchers[DeliveryChannel.SMS] = SmsDispatcher(
            TwilioSmsClient(
                settings.twilio_account_sid,
                settings.twilio_auth_token,
                settings.twilio_from_number,
            ),
            limiter=limiter,
        )
    if settings.email_enabled:
        dispatchers[DeliveryChannel.EMAIL] = EmailDispatcher(
            SendGridEmailClient(settings.sendgrid_api_key, settings.sendgrid_sender),
            limiter=limiter,
        )
    if settings.push_enabled:
        try:
            push_client = FirebasePushClient(settings.firebase_credentials_file)
        except (OSError, ValueError) as exc:
            logger.error("Push notifications disabled: %s", exc)
        else:
            dispatchers[DeliveryChannel.PUSH] = PushDispatcher(
                push_client, limiter=limiter
            )

    return dispatchers


__all__ = [
    "ChannelDispatcher",
    "EmailDispatcher",
    "InAppDispatcher",
    "ProviderCallLimiter",
    "PushDispatcher",
    "SmsDispatcher",
    "build_channel_dispatchers",
    "compose_email",
    "compose_push_payload",
    "compose_sms_body",
    "get_provider_limiter",
]
