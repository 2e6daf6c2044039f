"""SQLAlchemy model for user profiles and delivery preferences."""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.sql import expression

from app.infrastructure.database import Base


class UserProfileModel(Base):
    """Database representation of a user profile."""

    __tablename__ = "user_profile"

    id = Column(String(64), primary_key=True)
    email = Column(String(120), nullable=True, index=True)
    display_name = Column(String(120), nullable=False, default="")
    role = Column(String(20), nullable=False, default="student")
    phone = Column(String(30), nullable=True)
    # NULL means the user never set the toggle.
    exam_alerts = Column(Boolean, nullable=True)
    test_alerts = Column(Boolean, nullable=True)
    assignment_alerts = Column(Boolean, nullable=True)
    general_alerts = Column(Boolean, nullable=True)
    email_notifications = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    push_notifications = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    push_token = Column(String(255), nullable=True)


__all__ = ["UserProfileModel"]
