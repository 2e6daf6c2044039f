"""FastAPI dependency utilities."""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import AlertFanOut, create_fan_out
from app.config import Settings, get_settings
from app.infrastructure.database import get_db
from app.infrastructure.notifications import notification_publisher


def get_fan_out(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AlertFanOut:
    """Return an orchestrator bound to the request session and configured providers."""

    return create_fan_out(db, settings, publisher=notification_publisher)
