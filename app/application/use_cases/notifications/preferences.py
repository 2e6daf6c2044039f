"""Resolve which delivery channels a user is eligible for."""

from __future__ import annotations

from app.domain.entities import AlertCategory, DeliveryChannel, UserProfile


def _has_value(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_category_enabled(profile: UserProfile, category: AlertCategory) -> bool:
    """Return the user's toggle for ``category``.

    Missing toggles resolve to ``True`` so an unknown preference state never
    drops a message.
    """

    toggles = profile.category_toggles
    if toggles is None:
        return True
    try:
        return toggles.is_enabled(category)
    except (AttributeError, TypeError):
        return True


def resolve_channels(profile: UserProfile, category: AlertCategory) -> set[DeliveryChannel]:
    """Return the channels ``profile`` should receive a ``category`` alert through.

    * A phone number always enables SMS, whatever the other toggles say.
    * Email and push need the category toggle, their own flag and an address.
    * The in-app feed entry is always written.
    """

    channels = {DeliveryChannel.IN_APP}

    if _has_value(profile.phone):
        channels.add(DeliveryChannel.SMS)

    if is_category_enabled(profile, category):
        if profile.email_notifications is True and _has_value(profile.email):
            channels.add(DeliveryChannel.EMAIL)
        if profile.push_notifications is True and _has_value(profile.push_token):
            channels.add(DeliveryChannel.PUSH)

    return channels


__all__ = ["is_category_enabled", "resolve_channels"]
