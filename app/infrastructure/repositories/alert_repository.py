"""Persistence helpers for alert entities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import Alert, AlertCategory
from app.infrastructure.models import AlertModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone


class AlertRepository:
    """Read and create :class:`Alert` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, alert_id: str) -> Alert | None:
        model = self.session.get(AlertModel, alert_id)
        return self._to_entity(model) if model else None

    def create(self, alert: Alert) -> Alert:
        model = AlertModel(
            id=alert.id,
            title=alert.title,
            description=alert.description,
            category=alert.category.value,
            module_id=alert.module_id,
            module_name=alert.module_name,
            created_by=alert.created_by,
            scheduled_at=ensure_app_naive_datetime(alert.scheduled_at),
            image_url=alert.image_url,
        )
        if alert.created_at is not None:
            model.created_at = ensure_app_naive_datetime(alert.created_at)
        self.session.add(model)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: AlertModel) -> Alert:
        return Alert(
            id=model.id,
            title=model.title,
            description=model.description or "",
            category=AlertCategory.parse(model.category),
            module_id=model.module_id,
            module_name=model.module_name or "",
            created_at=ensure_app_timezone(model.created_at),
            created_by=model.created_by,
            scheduled_at=ensure_app_timezone(model.scheduled_at),
            image_url=model.image_url,
        )


__all__ = ["AlertRepository"]
