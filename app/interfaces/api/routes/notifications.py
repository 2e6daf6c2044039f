"""Endpoints and websocket handler for the in-app notification feed."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    list_notifications as list_notifications_uc,
    mark_notifications_read as mark_notifications_read_uc,
    set_notification_read as set_notification_read_uc,
)
from app.domain.entities import DeliveryRecord
from app.infrastructure.database import get_db
from app.infrastructure.notifications import notification_manager, serialize_notification
from app.interfaces.api.schemas import (
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    NotificationReadStateUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{user_id}/notifications", tags=["notifications"])


def _notification_to_schema(record: DeliveryRecord) -> NotificationRead:
    return NotificationRead(
        id=record.id or "",
        user_id=record.user_id,
        alert_id=record.alert_id,
        title=record.title,
        description=record.description,
        category=record.category,
        module_id=record.module_id,
        module_name=record.module_name,
        created_at=record.created_at,
        read=record.read,
    )


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    unread_only: bool = False,
    db: Session = Depends(get_db),
) -> list[NotificationRead]:
    """Return the most recent in-app notifications for ``user_id``."""

    records = list_notifications_uc(db, user_id, limit=limit, unread_only=unread_only)
    return [_notification_to_schema(record) for record in records]


@router.patch("/{record_id}", response_model=NotificationRead)
def update_notification_read_state(
    user_id: str,
    record_id: str,
    payload: NotificationReadStateUpdate,
    db: Session = Depends(get_db),
) -> NotificationRead:
    """Mark a single notification as read or unread."""

    try:
        record = set_notification_read_uc(db, user_id, record_id, read=payload.read)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _notification_to_schema(record)


@router.post("/read", response_model=NotificationMarkReadResponse)
def mark_notifications_read(
    user_id: str,
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
) -> NotificationMarkReadResponse:
    """Mark a batch of notifications as read."""

    updated = mark_notifications_read_uc(db, user_id, payload.unique_ids())
    return NotificationMarkReadResponse(updated=updated)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket, user_id: str, db: Session = Depends(get_db)
) -> None:
    """Websocket endpoint that streams new in-app notifications to ``user_id``."""

    pending = list_notifications_uc(db, user_id, unread_only=True)

    await notification_manager.connect(user_id, websocket)
    try:
        await websocket.send_json(
            {"type": "init", "data": [serialize_notification(record) for record in pending]}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    mark_notifications_read_uc(
                        db, user_id, [str(record_id) for record_id in ids]
                    )
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(user_id, websocket)
    except Exception:
        notification_manager.disconnect(user_id, websocket)
        logger.exception("Notification websocket for user %s closed unexpectedly", user_id)
        raise
