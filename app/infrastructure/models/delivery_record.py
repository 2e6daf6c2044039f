"""SQLAlchemy model for the delivery ledger."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text, text
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime

_IN_APP_ONLY = text("channel = 'in_app'")


def _new_record_id() -> str:
    return uuid4().hex


class DeliveryRecordModel(Base):
    """One dispatch attempt to one user through one channel."""

    __tablename__ = "delivery_record"
    __table_args__ = (
        Index(
            "uq_delivery_record_in_app",
            "user_id",
            "alert_id",
            unique=True,
            sqlite_where=_IN_APP_ONLY,
            postgresql_where=_IN_APP_ONLY,
        ),
        Index("ix_delivery_record_user_created", "user_id", "created_at"),
    )

    id = Column(String(32), primary_key=True, default=_new_record_id)
    user_id = Column(String(64), nullable=False, index=True)
    alert_id = Column(String(64), nullable=False, index=True)
    channel = Column(String(10), nullable=False)
    status = Column(String(10), nullable=False)
    error = Column(Text, nullable=True)
    title = Column(String(200), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    category = Column(String(20), nullable=True)
    module_id = Column(String(64), nullable=True)
    module_name = Column(String(120), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    read = Column(Boolean, nullable=False, default=False, server_default=expression.false())


__all__ = ["DeliveryRecordModel"]
