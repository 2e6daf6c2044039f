"""SQLAlchemy model for module subscriptions."""

from sqlalchemy import JSON, Column, String

from app.infrastructure.database import Base


class UserSubscriptionModel(Base):
    """Module membership map keyed by user identifier."""

    __tablename__ = "user_subscription"

    user_id = Column(String(64), primary_key=True)
    modules = Column(JSON, nullable=False, default=dict)


__all__ = ["UserSubscriptionModel"]
