"""Persistence helpers for module subscriptions."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from sqlalchemy.orm import Session

from app.domain.entities import UserSubscription
from app.infrastructure.models import UserSubscriptionModel

logger = logging.getLogger(__name__)


class UserSubscriptionRepository:
    """Stream and update :class:`UserSubscription` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def iter_all(self, *, batch_size: int = 500) -> Iterator[UserSubscription]:
        """Yield every subscription, fetching ``batch_size`` rows per round trip."""

        query = (
            self.session.query(UserSubscriptionModel)
            .order_by(UserSubscriptionModel.user_id)
            .yield_per(batch_size)
        )
        for model in query:
            subscription = self._to_entity(model)
            if subscription is not None:
                yield subscription

    def get(self, user_id: str) -> UserSubscription | None:
        model = self.session.get(UserSubscriptionModel, user_id)
        return self._to_entity(model) if model else None

    def save(self, subscription: UserSubscription) -> UserSubscription:
        model = self.session.get(UserSubscriptionModel, subscription.user_id)
        if model is None:
            model = UserSubscriptionModel(user_id=subscription.user_id)
        model.modules = dict(subscription.modules)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return UserSubscription(user_id=model.user_id, modules=dict(model.modules or {}))

    @staticmethod
    def _to_entity(model: UserSubscriptionModel) -> UserSubscription | None:
        modules = model.modules
        if modules is None:
            modules = {}
        if not isinstance(modules, dict):
            logger.warning(
                "Ignoring malformed subscription for user %s: expected a mapping, got %s",
                model.user_id,
                type(modules).__name__,
            )
            return None
        return UserSubscription(
            user_id=model.user_id,
            modules={str(key): value is True for key, value in modules.items()},
        )


__all__ = ["UserSubscriptionRepository"]
