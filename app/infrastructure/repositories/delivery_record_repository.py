"""Persistence helpers for the delivery ledger."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.entities import DeliveryChannel, DeliveryRecord, DeliveryStatus
from app.infrastructure.models import DeliveryRecordModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class DeliveryRecordRepository:
    """Provide CRUD operations for :class:`DeliveryRecord` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: str,
        *,
        limit: int | None = 50,
        unread_only: bool = False,
    ) -> Sequence[DeliveryRecord]:
        """Return the in-app feed for ``user_id`` ordered newest first."""

        query = (
            self.session.query(DeliveryRecordModel)
            .filter(DeliveryRecordModel.user_id == user_id)
            .filter(DeliveryRecordModel.channel == DeliveryChannel.IN_APP.value)
        )
        if unread_only:
            query = query.filter(DeliveryRecordModel.read.is_(False))
        query = query.order_by(
            DeliveryRecordModel.created_at.desc(), DeliveryRecordModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_for_alert(
        self, alert_id: str, *, channel: DeliveryChannel | None = None
    ) -> Sequence[DeliveryRecord]:
        query = self.session.query(DeliveryRecordModel).filter(
            DeliveryRecordModel.alert_id == alert_id
        )
        if channel is not None:
            query = query.filter(DeliveryRecordModel.channel == channel.value)
        query = query.order_by(DeliveryRecordModel.created_at.asc())
        return [self._to_entity(model) for model in query.all()]

    def get(self, record_id: str) -> DeliveryRecord | None:
        model = self.session.get(DeliveryRecordModel, record_id)
        return self._to_entity(model) if model else None

    def append(self, record: DeliveryRecord) -> DeliveryRecord:
        """Insert ``record`` unconditionally (log entries for external channels)."""

        model = DeliveryRecordModel()
        self._apply_entity_to_model(model, record)
        self.session.add(model)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def upsert_in_app(self, record: DeliveryRecord) -> tuple[DeliveryRecord, bool]:
        """Write the in-app row for ``(user_id, alert_id)`` unless one exists.

        Returns the stored record and whether it was created by this call. An
        existing row is returned untouched so its ``read`` flag survives.
        """

        existing = self._get_in_app_model(record.user_id, record.alert_id)
        if existing is not None:
            return self._to_entity(existing), False

        model = DeliveryRecordModel()
        self._apply_entity_to_model(model, record)
        model.channel = DeliveryChannel.IN_APP.value
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            existing = self._get_in_app_model(record.user_id, record.alert_id)
            if existing is None:
                raise
            return self._to_entity(existing), False
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model), True

    def set_read(self, record_id: str, *, user_id: str, read: bool) -> DeliveryRecord | None:
        model = self.session.get(DeliveryRecordModel, record_id)
        if model is None or model.user_id != user_id:
            return None
        model.read = read
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, record_ids: Iterable[str], *, user_id: str) -> int:
        ids = [record_id for record_id in record_ids if record_id]
        if not ids:
            return 0
        updated = (
            self.session.query(DeliveryRecordModel)
            .filter(
                DeliveryRecordModel.id.in_(ids),
                DeliveryRecordModel.user_id == user_id,
            )
            .update({DeliveryRecordModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def _get_in_app_model(self, user_id: str, alert_id: str) -> DeliveryRecordModel | None:
        return (
            self.session.query(DeliveryRecordModel)
            .filter(
                DeliveryRecordModel.user_id == user_id,
                DeliveryRecordModel.alert_id == alert_id,
                DeliveryRecordModel.channel == DeliveryChannel.IN_APP.value,
            )
            .first()
        )

    @staticmethod
    def _apply_entity_to_model(model: DeliveryRecordModel, record: DeliveryRecord) -> None:
        if record.id is not None:
            model.id = record.id
        model.user_id = record.user_id
        model.alert_id = record.alert_id
        model.channel = record.channel.value
        model.status = record.status.value
        model.error = record.error
        model.title = record.title
        model.description = record.description
        model.category = record.category
        model.module_id = record.module_id
        model.module_name = record.module_name
        model.created_at = ensure_app_naive_datetime(
            record.created_at or now_in_app_timezone()
        )
        model.read = record.read

    @staticmethod
    def _to_entity(model: DeliveryRecordModel) -> DeliveryRecord:
        return DeliveryRecord(
            id=model.id,
            user_id=model.user_id,
            alert_id=model.alert_id,
            channel=DeliveryChannel(model.channel),
            status=DeliveryStatus(model.status),
            error=model.error,
            title=model.title or "",
            description=model.description or "",
            category=model.category,
            module_id=model.module_id,
            module_name=model.module_name,
            created_at=ensure_app_timezone(model.created_at),
            read=bool(model.read),
        )


__all__ = ["DeliveryRecordRepository"]
