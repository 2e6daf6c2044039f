"""SQLAlchemy model for alerts."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class AlertModel(Base):
    """Database representation of an alert broadcast to a module."""

    __tablename__ = "alert"

    id = Column(String(64), primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(20), nullable=False, default="general")
    module_id = Column(String(64), ForeignKey("module.id"), nullable=False, index=True)
    module_name = Column(String(120), nullable=False, default="")
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    created_by = Column(String(64), nullable=True)
    scheduled_at = Column(DateTime(), nullable=True)
    image_url = Column(String(500), nullable=True)


__all__ = ["AlertModel"]
