"""Utility helpers to push in-app notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
from typing import Any

from anyio import from_thread

from app.domain.entities import DeliveryRecord

from .manager import NotificationConnectionManager, notification_manager


class NotificationPublisher:
    """Serialize in-app delivery records and schedule their delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._tasks: set[asyncio.Task[None]] = set()

    def dispatch(self, record: DeliveryRecord) -> None:
        """Schedule ``record`` to be delivered to its user."""

        if not self._manager.is_connected(record.user_id):
            return

        message = {"type": "notification", "data": serialize_notification(record)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            from_thread.run(self._manager.send_to_user, record.user_id, message)
        else:
            task = loop.create_task(self._manager.send_to_user(record.user_id, message))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)


def serialize_notification(record: DeliveryRecord) -> dict[str, Any]:
    """Return the websocket payload representation for ``record``."""

    return {
        "id": record.id,
        "user_id": record.user_id,
        "alert_id": record.alert_id,
        "title": record.title,
        "description": record.description,
        "category": record.category,
        "module_id": record.module_id,
        "module_name": record.module_name,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "read": record.read,
    }


notification_publisher = NotificationPublisher(notification_manager)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
