"""ORM models used by the application infrastructure."""

from .alert import AlertModel
from .delivery_record import DeliveryRecordModel
from .module import ModuleModel
from .user_profile import UserProfileModel
from .user_subscription import UserSubscriptionModel

__all__ = [
    "AlertModel",
    "DeliveryRecordModel",
    "ModuleModel",
    "UserProfileModel",
    "UserSubscriptionModel",
]
