"""Domain entities exposed by the application."""

from .alert import Alert, AlertCategory
from .delivery import (
    ChannelSummary,
    DeliveryChannel,
    DeliveryRecord,
    DeliveryResult,
    DeliveryStatus,
    FanOutSummary,
)
from .user_profile import CategoryToggles, UserProfile, UserRole
from .user_subscription import UserSubscription

__all__ = [
    "Alert",
    "AlertCategory",
    "CategoryToggles",
    "ChannelSummary",
    "DeliveryChannel",
    "DeliveryRecord",
    "DeliveryResult",
    "DeliveryStatus",
    "FanOutSummary",
    "UserProfile",
    "UserRole",
    "UserSubscription",
]
