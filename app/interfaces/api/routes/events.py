"""Ingress for alert creation events that trigger notification fan-out."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    AlertFanOut,
    AlertNotFoundError,
    FanOutError,
    handle_alert_created,
)
from app.domain.entities import FanOutSummary
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_fan_out
from app.interfaces.api.schemas import (
    AlertCreatedEvent,
    ChannelSummaryRead,
    DeliveryResultRead,
    FanOutSummaryRead,
)

router = APIRouter(prefix="/events", tags=["events"])


def _summary_to_schema(summary: FanOutSummary) -> FanOutSummaryRead:
    return FanOutSummaryRead(
        alert_id=summary.alert_id,
        recipients=summary.recipients,
        skipped_recipients=list(summary.skipped_recipients),
        channels={
            channel.value: ChannelSummaryRead(
                attempted=counts.attempted,
                succeeded=counts.succeeded,
                failed=counts.failed,
            )
            for channel, counts in summary.channels.items()
        },
        results=[
            DeliveryResultRead(
                channel=result.channel.value,
                user_id=result.user_id,
                success=result.success,
                error_message=result.error_message,
                retryable=result.retryable,
            )
            for result in summary.results
        ],
    )


@router.post("/alert-created", response_model=FanOutSummaryRead)
async def alert_created(
    event: AlertCreatedEvent,
    db: Session = Depends(get_db),
    fan_out: AlertFanOut = Depends(get_fan_out),
) -> FanOutSummaryRead:
    """Fan out the alert referenced by a create event to its subscribers."""

    try:
        summary = await handle_alert_created(
            db, fan_out, collection=event.collection, document_id=event.document_id
        )
    except AlertNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except FanOutError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return _summary_to_schema(summary)
