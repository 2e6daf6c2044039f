"""Utility script to seed modules, a subscribed student and an alert."""

from __future__ import annotations

import argparse
from uuid import uuid4

import anyio
from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.notifications import create_fan_out
from app.domain.entities import (
    Alert,
    AlertCategory,
    CategoryToggles,
    UserProfile,
    UserRole,
    UserSubscription,
)
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.models import ModuleModel
from app.infrastructure.repositories import (
    AlertRepository,
    UserProfileRepository,
    UserSubscriptionRepository,
)
from app.utils import now_in_app_timezone

_MODULES = (
    ("CS101", "Computer Science Fundamentals"),
    ("DSA", "Data Structures and Algorithms"),
    ("MTH101", "Calculus I"),
    ("NOPS", "Networking and Operating Systems"),
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed demo data for the university alert notification service.",
    )
    parser.add_argument("--user-id", default="student-1", help="Identifier of the demo student")
    parser.add_argument("--email", default="student@example.com")
    parser.add_argument("--phone", default=None, help="Phone number; enables SMS delivery")
    parser.add_argument("--module", default="CS101", choices=[code for code, _ in _MODULES])
    parser.add_argument(
        "--category",
        default=AlertCategory.GENERAL.value,
        choices=[category.value for category in AlertCategory],
    )
    parser.add_argument(
        "--dispatch",
        action="store_true",
        help="Fan the seeded alert out immediately with the configured providers.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed the database and optionally dispatch the new alert."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        for code, name in _MODULES:
            session.merge(ModuleModel(id=code, code=code, name=name))
        session.commit()

        UserProfileRepository(session).save(
            UserProfile(
                id=args.user_id,
                email=args.email,
                display_name="Demo Student",
                role=UserRole.STUDENT,
                phone=args.phone,
                category_toggles=CategoryToggles(),
                email_notifications=True,
            )
        )
        UserSubscriptionRepository(session).save(
            UserSubscription(user_id=args.user_id, modules={args.module: True})
        )

        module_name = dict(_MODULES)[args.module]
        alert = AlertRepository(session).create(
            Alert(
                id=uuid4().hex,
                title=f"{module_name} update",
                description="Check the module page for details.",
                category=AlertCategory(args.category),
                module_id=args.module,
                module_name=module_name,
                created_at=now_in_app_timezone(),
                created_by="seed-script",
            )
        )
        print(f"Seeded alert {alert.id} for module {alert.module_id}")

        if args.dispatch:
            summary = anyio.run(create_fan_out(session).on_alert_created, alert)
            for channel, counts in summary.channels.items():
                print(
                    f"  {channel.value}: {counts.succeeded}/{counts.attempted} sent, "
                    f"{counts.failed} failed"
                )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not seed the database: {exc}") from exc
    finally:
        session.close()


if __name__ == "__main__":
    main()
