"""Domain entities describing delivery attempts and their outcomes."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class DeliveryChannel(str, Enum):
    """Notification media an alert can be delivered through."""

    SMS = "sms"
    EMAIL = "email"
    PUSH = "push"
    IN_APP = "in_app"


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Uniform outcome returned by every channel dispatcher."""

    success: bool
    channel: DeliveryChannel
    recipient: str
    error_message: str | None = None
    retryable: bool = False
    record_id: str | None = None
    user_id: str | None = None

    @property
    def status(self) -> DeliveryStatus:
        return DeliveryStatus.SENT if self.success else DeliveryStatus.FAILED


@dataclass
class DeliveryRecord:
    """Persisted ledger entry for one dispatch attempt.

    In-app records double as the notification feed rows rendered by clients,
    which is why they carry a copy of the alert content and a ``read`` flag.
    """

    id: str | None
    user_id: str
    alert_id: str
    channel: DeliveryChannel
    status: DeliveryStatus
    error: str | None = None
    title: str = ""
    description: str = ""
    category: str | None = None
    module_id: str | None = None
    module_name: str | None = None
    created_at: datetime | None = None
    read: bool = False


@dataclass
class ChannelSummary:
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0


@dataclass
class FanOutSummary:
    """Aggregated outcome of a single fan-out run."""

    alert_id: str
    recipients: int = 0
    skipped_recipients: list[str] = field(default_factory=list)
    results: list[DeliveryResult] = field(default_factory=list)

    @property
    def channels(self) -> dict[DeliveryChannel, ChannelSummary]:
        summary: dict[DeliveryChannel, ChannelSummary] = {}
        for result in self.results:
            entry = summary.setdefault(result.channel, ChannelSummary())
            entry.attempted += 1
            if result.success:
                entry.succeeded += 1
            else:
                entry.failed += 1
        return summary

    @property
    def failed(self) -> int:
        return Counter(result.success for result in self.results)[False]


__all__ = [
    "ChannelSummary",
    "DeliveryChannel",
    "DeliveryRecord",
    "DeliveryResult",
    "DeliveryStatus",
    "FanOutSummary",
]
