"""Tests for computing the subscribers of a module."""

from __future__ import annotations

from app.application.use_cases.notifications import recipients_for_module
from app.infrastructure.models import UserSubscriptionModel
from app.infrastructure.repositories import UserSubscriptionRepository


def test_only_true_flags_count_as_subscribed(session, subscribe) -> None:
    subscribe("u1", {"m1": True, "m2": False})
    subscribe("u2", {"m1": True})
    repository = UserSubscriptionRepository(session)

    assert recipients_for_module(repository, "m1") == {"u1", "u2"}
    assert recipients_for_module(repository, "m2") == set()


def test_module_without_subscribers_yields_empty_set(session, subscribe) -> None:
    subscribe("u1", {"m1": True})

    assert recipients_for_module(UserSubscriptionRepository(session), "unknown") == set()
    assert recipients_for_module(UserSubscriptionRepository(session), "") == set()


def test_scan_streams_across_batches(session, subscribe) -> None:
    for index in range(7):
        subscribe(f"user-{index}", {"m1": index % 2 == 0})

    recipients = recipients_for_module(UserSubscriptionRepository(session), "m1", batch_size=2)

    assert recipients == {"user-0", "user-2", "user-4", "user-6"}


def test_malformed_subscription_rows_are_skipped(session, subscribe) -> None:
    subscribe("u1", {"m1": True})
    session.add(UserSubscriptionModel(user_id="broken", modules=["m1"]))
    session.add(UserSubscriptionModel(user_id="truthy", modules={"m1": "yes"}))
    session.commit()

    assert recipients_for_module(UserSubscriptionRepository(session), "m1") == {"u1"}
