"""Use cases backing the in-app notification feed."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from app.domain.entities import DeliveryRecord
from app.infrastructure.repositories import DeliveryRecordRepository

_MAX_FEED_LIMIT = 200


def list_notifications(
    session: Session, user_id: str, *, limit: int = 50, unread_only: bool = False
) -> Sequence[DeliveryRecord]:
    """Return the newest in-app notifications for ``user_id``."""

    limit = max(1, min(limit, _MAX_FEED_LIMIT))
    return DeliveryRecordRepository(session).list_for_user(
        user_id, limit=limit, unread_only=unread_only
    )


def set_notification_read(
    session: Session, user_id: str, record_id: str, *, read: bool
) -> DeliveryRecord:
    """Toggle the read flag of one notification owned by ``user_id``."""

    record = DeliveryRecordRepository(session).set_read(record_id, user_id=user_id, read=read)
    if record is None:
        raise ValueError("Notification not found")
    return record


def mark_notifications_read(session: Session, user_id: str, record_ids: Iterable[str]) -> int:
    return DeliveryRecordRepository(session).mark_as_read(record_ids, user_id=user_id)


__all__ = ["list_notifications", "mark_notifications_read", "set_notification_read"]
