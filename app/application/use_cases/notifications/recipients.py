"""Compute the users subscribed to a module."""

from __future__ import annotations

from app.infrastructure.repositories import UserSubscriptionRepository


def recipients_for_module(
    repository: UserSubscriptionRepository, module_id: str, *, batch_size: int = 500
) -> set[str]:
    """Return the identifiers of users whose subscription flags ``module_id``.

    Subscriptions are streamed in batches so large user bases are never loaded
    into memory at once. An unknown or empty module yields an empty set.
    """

    if not module_id:
        return set()

    return {
        subscription.user_id
        for subscription in repository.iter_all(batch_size=batch_size)
        if subscription.is_subscribed(module_id)
    }


__all__ = ["recipients_for_module"]
