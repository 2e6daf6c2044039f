"""Domain entity mapping a user to the modules they follow."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class UserSubscription:
    """Module membership flags for a single user."""

    user_id: str
    modules: dict[str, bool] = field(default_factory=dict)

    def is_subscribed(self, module_id: str) -> bool:
        """Return ``True`` only when ``module_id`` is flagged as subscribed."""

        return self.modules.get(module_id) is True


__all__ = ["UserSubscription"]
