"""Persistence layer for user profiles."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from app.domain.entities import CategoryToggles, UserProfile, UserRole
from app.infrastructure.models import UserProfileModel


class UserProfileRepository:
    """Provide lookups and writes for :class:`UserProfile` entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> UserProfile | None:
        model = self.session.get(UserProfileModel, user_id)
        return self._to_entity(model) if model else None

    def get_map_by_ids(
        self, user_ids: Iterable[str], *, batch_size: int = 500
    ) -> dict[str, UserProfile]:
        """Load profiles for ``user_ids`` with at most ``batch_size`` ids per query."""

        unique_ids = sorted({str(user_id) for user_id in user_ids if user_id})
        batch_size = max(1, batch_size)

        profiles: dict[str, UserProfile] = {}
        for start in range(0, len(unique_ids), batch_size):
            chunk = unique_ids[start : start + batch_size]
            query = self.session.query(UserProfileModel).filter(
                UserProfileModel.id.in_(chunk)
            )
            profiles.update((model.id, self._to_entity(model)) for model in query.all())
        return profiles

    def save(self, profile: UserProfile) -> UserProfile:
        model = self.session.get(UserProfileModel, profile.id) or UserProfileModel(
            id=profile.id
        )
        toggles = profile.category_toggles or CategoryToggles()
        model.email = profile.email
        model.display_name = profile.display_name
        model.role = profile.role.value
        model.phone = profile.phone
        model.exam_alerts = toggles.exam
        model.test_alerts = toggles.test
        model.assignment_alerts = toggles.assignment
        model.general_alerts = toggles.general
        model.email_notifications = profile.email_notifications
        model.push_notifications = profile.push_notifications
        model.push_token = profile.push_token
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserProfileModel) -> UserProfile:
        toggles = CategoryToggles(
            exam=model.exam_alerts,
            test=model.test_alerts,
            assignment=model.assignment_alerts,
            general=model.general_alerts,
        )
        try:
            role = UserRole(model.role)
        except ValueError:
            role = UserRole.STUDENT
        return UserProfile(
            id=model.id,
            email=model.email,
            display_name=model.display_name or "",
            role=role,
            phone=model.phone,
            category_toggles=toggles,
            email_notifications=bool(model.email_notifications),
            push_notifications=bool(model.push_notifications),
            push_token=model.push_token,
        )


__all__ = ["UserProfileRepository"]
