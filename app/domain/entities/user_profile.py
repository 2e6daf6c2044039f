"""Domain entities describing users and their delivery preferences."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .alert import AlertCategory


class UserRole(str, Enum):
    STUDENT = "student"
    LECTURER = "lecturer"
    ADMIN = "admin"


@dataclass
class CategoryToggles:
    """Per-category opt-in flags; ``None`` means the user never chose."""

    exam: bool | None = None
    test: bool | None = None
    assignment: bool | None = None
    general: bool | None = None

    def is_enabled(self, category: AlertCategory) -> bool:
        """Return the toggle for ``category``, defaulting to ``True`` when unset."""

        value = getattr(self, category.value, None)
        if value is None:
            return True
        return bool(value)


@dataclass
class UserProfile:
    """Contact details and notification preferences for a user."""

    id: str
    email: str | None
    display_name: str
    role: UserRole = UserRole.STUDENT
    phone: str | None = None
    category_toggles: CategoryToggles | None = field(default=None)
    email_notifications: bool = False
    push_notifications: bool = False
    push_token: str | None = None


__all__ = ["CategoryToggles", "UserProfile", "UserRole"]
