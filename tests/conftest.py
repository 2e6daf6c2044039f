"""Shared fixtures: an in-memory database and fake provider clients."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Ensure the project root (which contains the ``app`` package) is importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.domain.entities import (
    Alert,
    AlertCategory,
    CategoryToggles,
    UserProfile,
    UserSubscription,
)
from app.infrastructure.database import enable_sqlite_foreign_keys, initialize_database
from app.infrastructure.models import ModuleModel
from app.infrastructure.repositories import (
    AlertRepository,
    UserProfileRepository,
    UserSubscriptionRepository,
)
from tests.fakes import FakeEmailClient, FakePushClient, FakeSmsClient


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    initialize_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def sms_client() -> FakeSmsClient:
    return FakeSmsClient()


@pytest.fixture()
def email_client() -> FakeEmailClient:
    return FakeEmailClient()


@pytest.fixture()
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture()
def add_profile(session):
    """Persist a user profile built from keyword overrides."""

    def _add(user_id: str, **overrides) -> UserProfile:
        values = {
            "email": None,
            "display_name": user_id.title(),
            "phone": None,
            "category_toggles": CategoryToggles(),
            "email_notifications": False,
            "push_notifications": False,
            "push_token": None,
        }
        values.update(overrides)
        return UserProfileRepository(session).save(UserProfile(id=user_id, **values))

    return _add


@pytest.fixture()
def subscribe(session):
    def _subscribe(user_id: str, modules: dict[str, bool]) -> UserSubscription:
        return UserSubscriptionRepository(session).save(
            UserSubscription(user_id=user_id, modules=modules)
        )

    return _subscribe


@pytest.fixture()
def make_alert(session):
    """Persist a module and an alert scoped to it."""

    def _make(
        alert_id: str = "alert-1",
        *,
        module_id: str = "m1",
        module_name: str = "Computer Science Fundamentals",
        category: AlertCategory = AlertCategory.GENERAL,
        title: str = "Lecture moved",
        description: str = "Monday's lecture moves to hall B.",
    ) -> Alert:
        if session.get(ModuleModel, module_id) is None:
            session.add(ModuleModel(id=module_id, code=module_id.upper(), name=module_name))
            session.commit()
        return AlertRepository(session).create(
            Alert(
                id=alert_id,
                title=title,
                description=description,
                category=category,
                module_id=module_id,
                module_name=module_name,
                created_at=None,
                created_by="lecturer-1",
            )
        )

    return _make
