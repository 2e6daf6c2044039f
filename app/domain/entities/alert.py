"""Domain entities describing alerts broadcast to module subscribers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

logger = logging.getLogger(__name__)


class AlertCategory(str, Enum):
    """Fixed set of categories an alert can be published under."""

    GENERAL = "general"
    TEST = "test"
    EXAM = "exam"
    ASSIGNMENT = "assignment"

    @classmethod
    def parse(cls, value: str | None) -> "AlertCategory":
        """Return the category for ``value``, treating unknown values as general."""

        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            logger.warning("Unknown alert category %r; treating it as general", value)
            return cls.GENERAL


@dataclass
class Alert:
    """A broadcast message scoped to one course module."""

    id: str
    title: str
    description: str
    category: AlertCategory
    module_id: str
    module_name: str
    created_at: datetime | None
    created_by: str | None
    scheduled_at: datetime | None = None
    image_url: str | None = None


__all__ = ["Alert", "AlertCategory"]
