"""Entry point for alert creation events."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import FanOutSummary
from app.infrastructure.repositories import AlertRepository

from .fan_out import AlertFanOut, FanOutError

logger = logging.getLogger(__name__)

ALERTS_COLLECTION = "alerts"


class AlertNotFoundError(LookupError):
    """The alert referenced by a create event does not exist."""


async def handle_alert_created(
    session: Session,
    fan_out: AlertFanOut,
    *,
    collection: str,
    document_id: str,
) -> FanOutSummary:
    """Load the alert named by a create event and fan it out once."""

    if collection != ALERTS_COLLECTION:
        raise ValueError(f"Unsupported collection '{collection}'")

    try:
        alert = AlertRepository(session).get(document_id)
    except SQLAlchemyError as exc:
        logger.exception("Could not load alert %s", document_id)
        raise FanOutError(f"Alert {document_id} could not be loaded") from exc

    if alert is None:
        raise AlertNotFoundError(f"Alert '{document_id}' not found")

    logger.info("Alert %s created for module %s; starting fan-out", alert.id, alert.module_id)
    return await fan_out.on_alert_created(alert)


__all__ = ["ALERTS_COLLECTION", "AlertNotFoundError", "handle_alert_created"]
