"""Repository implementations for infrastructure layer."""

from .alert_repository import AlertRepository
from .delivery_record_repository import DeliveryRecordRepository
from .user_profile_repository import UserProfileRepository
from .user_subscription_repository import UserSubscriptionRepository

__all__ = [
    "AlertRepository",
    "DeliveryRecordRepository",
    "UserProfileRepository",
    "UserSubscriptionRepository",
]
