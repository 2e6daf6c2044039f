"""Pydantic models for the alert creation event endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AlertCreatedEvent(BaseModel):
    """Create trigger keyed by the record's collection and identifier."""

    collection: str = Field(default="alerts", min_length=1)
    document_id: str = Field(..., min_length=1, description="Identifier of the new alert")


class ChannelSummaryRead(BaseModel):
    attempted: int
    succeeded: int
    failed: int


class DeliveryResultRead(BaseModel):
    channel: str
    user_id: str | None = None
    success: bool
    error_message: str | None = None
    retryable: bool = False


class FanOutSummaryRead(BaseModel):
    """Outcome of fanning out one alert."""

    alert_id: str
    recipients: int
    skipped_recipients: list[str] = Field(default_factory=list)
    channels: dict[str, ChannelSummaryRead] = Field(default_factory=dict)
    results: list[DeliveryResultRead] = Field(default_factory=list)


__all__ = [
    "AlertCreatedEvent",
    "ChannelSummaryRead",
    "DeliveryResultRead",
    "FanOutSummaryRead",
]
