"""Pydantic models describing notification feed payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[str]:
        """Return the list of identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationReadStateUpdate(BaseModel):
    read: bool


class NotificationMarkReadResponse(BaseModel):
    updated: int


class NotificationRead(BaseModel):
    """Representation of an in-app notification delivered to the client."""

    id: str
    user_id: str
    alert_id: str
    title: str
    description: str
    category: str | None = None
    module_id: str | None = None
    module_name: str | None = None
    created_at: datetime
    read: bool = False


__all__ = [
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "NotificationReadStateUpdate",
]
