"""Alert fan-out and notification feed use cases."""

from .dispatchers import (
    ChannelDispatcher,
    EmailDispatcher,
    InAppDispatcher,
    ProviderCallLimiter,
    PushDispatcher,
    SmsDispatcher,
    build_channel_dispatchers,
    get_provider_limiter,
)
from .events import ALERTS_COLLECTION, AlertNotFoundError, handle_alert_created
from .fan_out import AlertFanOut, FanOutError, create_fan_out
from .feed import list_notifications, mark_notifications_read, set_notification_read
from .preferences import is_category_enabled, resolve_channels
from .recipients import recipients_for_module

__all__ = [
    "ALERTS_COLLECTION",
    "AlertFanOut",
    "AlertNotFoundError",
    "ChannelDispatcher",
    "EmailDispatcher",
    "FanOutError",
    "InAppDispatcher",
    "ProviderCallLimiter",
    "PushDispatcher",
    "SmsDispatcher",
    "build_channel_dispatchers",
    "create_fan_out",
    "get_provider_limiter",
    "handle_alert_created",
    "is_category_enabled",
    "list_notifications",
    "mark_notifications_read",
    "recipients_for_module",
    "resolve_channels",
    "set_notification_read",
]
