"""Fan an alert out to every subscribed user across their eligible channels."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace

import anyio
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.domain.entities import (
    Alert,
    DeliveryChannel,
    DeliveryRecord,
    DeliveryResult,
    FanOutSummary,
    UserProfile,
)
from app.infrastructure.notifications import NotificationPublisher
from app.infrastructure.repositories import (
    DeliveryRecordRepository,
    UserProfileRepository,
    UserSubscriptionRepository,
)
from app.utils import now_in_app_timezone

from .dispatchers import ChannelDispatcher, build_channel_dispatchers
from .preferences import resolve_channels
from .recipients import recipients_for_module

logger = logging.getLogger(__name__)

_CHANNEL_ORDER = {
    DeliveryChannel.IN_APP: 0,
    DeliveryChannel.SMS: 1,
    DeliveryChannel.EMAIL: 2,
    DeliveryChannel.PUSH: 3,
}


class FanOutError(RuntimeError):
    """The recipient set for an alert could not be read at all."""


@dataclass(frozen=True)
class _DispatchJob:
    user_id: str
    channel: DeliveryChannel
    address: str


def _address_for(profile: UserProfile, channel: DeliveryChannel) -> str:
    if channel is DeliveryChannel.SMS:
        return (profile.phone or "").strip()
    if channel is DeliveryChannel.EMAIL:
        return (profile.email or "").strip()
    if channel is DeliveryChannel.PUSH:
        return (profile.push_token or "").strip()
    return profile.id


class AlertFanOut:
    """Dispatch one alert to all eligible (recipient, channel) pairs.

    Every dispatch runs concurrently inside a single task group and the run
    only returns once all of them have settled. Failures are collected as
    results; nothing raised by one delivery can cancel another. Outcomes of
    external channels are appended to the delivery ledger, the in-app channel
    writes its own ledger row.
    """

    def __init__(
        self,
        session: Session,
        dispatchers: Mapping[DeliveryChannel, ChannelDispatcher],
        *,
        scan_batch_size: int = 500,
    ) -> None:
        self._session = session
        self._dispatchers = dict(dispatchers)
        self._scan_batch_size = scan_batch_size
        self._ledger = DeliveryRecordRepository(session)

    async def on_alert_created(self, alert: Alert) -> FanOutSummary:
        summary = FanOutSummary(alert_id=alert.id)

        try:
            recipients = recipients_for_module(
                UserSubscriptionRepository(self._session),
                alert.module_id,
                batch_size=self._scan_batch_size,
            )
            profiles = UserProfileRepository(self._session).get_map_by_ids(
                recipients, batch_size=self._scan_batch_size
            )
        except SQLAlchemyError as exc:
            logger.exception("Could not load recipients for alert %s", alert.id)
            raise FanOutError(f"Recipients for alert {alert.id} are unavailable") from exc

        summary.recipients = len(recipients)
        if not recipients:
            logger.info(
                "Alert %s targets module %s which has no subscribers; nothing to dispatch",
                alert.id,
                alert.module_id,
            )
            return summary

        jobs = self._plan(alert, recipients, profiles, summary)

        async with anyio.create_task_group() as task_group:
            for job in jobs:
                task_group.start_soon(self._dispatch, alert, job, summary.results)

        self._log_summary(alert, summary)
        return summary

    def _plan(
        self,
        alert: Alert,
        recipients: set[str],
        profiles: Mapping[str, UserProfile],
        summary: FanOutSummary,
    ) -> list[_DispatchJob]:
        jobs: list[_DispatchJob] = []
        unconfigured: set[DeliveryChannel] = set()

        for user_id in sorted(recipients):
            profile = profiles.get(user_id)
            if profile is None:
                logger.warning(
                    "Skipping recipient %s for alert %s: user profile not found",
                    user_id,
                    alert.id,
                )
                summary.skipped_recipients.append(user_id)
                continue

            channels = sorted(
                resolve_channels(profile, alert.category), key=_CHANNEL_ORDER.__getitem__
            )
            for channel in channels:
                if channel not in self._dispatchers:
                    unconfigured.add(channel)
                    continue
                jobs.append(
                    _DispatchJob(
                        user_id=user_id,
                        channel=channel,
                        address=_address_for(profile, channel),
                    )
                )

        for channel in sorted(unconfigured, key=_CHANNEL_ORDER.__getitem__):
            logger.info(
                "No %s provider configured; skipping that channel for alert %s",
                channel.value,
                alert.id,
            )
        return jobs

    async def _dispatch(
        self, alert: Alert, job: _DispatchJob, results: list[DeliveryResult]
    ) -> None:
        dispatcher = self._dispatchers[job.channel]
        try:
            result = await dispatcher.send(job.address, alert)
        except Exception as exc:
            logger.exception(
                "%s dispatcher raised for alert %s, user %s",
                job.channel.value,
                alert.id,
                job.user_id,
            )
            result = DeliveryResult(
                success=False,
                channel=job.channel,
                recipient=job.address,
                error_message=str(exc) or type(exc).__name__,
            )

        result = replace(result, user_id=job.user_id)
        results.append(result)

        if job.channel is not DeliveryChannel.IN_APP:
            self._record(alert, result)

    def _record(self, alert: Alert, result: DeliveryResult) -> None:
        record = DeliveryRecord(
            id=None,
            user_id=result.user_id or "",
            alert_id=alert.id,
            channel=result.channel,
            status=result.status,
            error=result.error_message,
            title=alert.title,
            description=alert.description,
            category=alert.category.value,
            module_id=alert.module_id,
            module_name=alert.module_name,
            created_at=now_in_app_timezone(),
        )
        try:
            self._ledger.append(record)
        except SQLAlchemyError:
            logger.exception(
                "Could not record %s outcome for alert %s, user %s",
                result.channel.value,
                alert.id,
                result.user_id,
            )

    @staticmethod
    def _log_summary(alert: Alert, summary: FanOutSummary) -> None:
        per_channel = ", ".join(
            f"{channel.value}: {counts.succeeded}/{counts.attempted} sent, {counts.failed} failed"
            for channel, counts in sorted(
                summary.channels.items(), key=lambda item: _CHANNEL_ORDER[item[0]]
            )
        )
        logger.info(
            "Alert %s dispatched to %s recipients (%s skipped): %s",
            alert.id,
            summary.recipients,
            len(summary.skipped_recipients),
            per_channel or "no deliveries",
        )


def create_fan_out(
    session: Session,
    settings: Settings | None = None,
    *,
    publisher: NotificationPublisher | None = None,
) -> AlertFanOut:
    """Build an :class:`AlertFanOut` wired to the configured providers."""

    settings = settings or get_settings()
    return AlertFanOut(
        session,
        build_channel_dispatchers(session, settings, publisher=publisher),
        scan_batch_size=settings.subscription_scan_batch_size,
    )


__all__ = ["AlertFanOut", "FanOutError", "create_fan_out"]
