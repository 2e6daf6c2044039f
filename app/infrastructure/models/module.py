"""SQLAlchemy model for course modules."""

from sqlalchemy import Column, String

from app.infrastructure.database import Base


class ModuleModel(Base):
    """Course module alerts are scoped to."""

    __tablename__ = "module"

    id = Column(String(64), primary_key=True)
    code = Column(String(30), nullable=True, index=True)
    name = Column(String(120), nullable=False)


__all__ = ["ModuleModel"]
