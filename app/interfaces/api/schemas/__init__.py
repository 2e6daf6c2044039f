"""Pydantic schemas for the HTTP API."""

from .events import (
    AlertCreatedEvent,
    ChannelSummaryRead,
    DeliveryResultRead,
    FanOutSummaryRead,
)
from .notification import (
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    NotificationReadStateUpdate,
)

__all__ = [
    "AlertCreatedEvent",
    "ChannelSummaryRead",
    "DeliveryResultRead",
    "FanOutSummaryRead",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "NotificationReadStateUpdate",
]
