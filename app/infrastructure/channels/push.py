"""Firebase Cloud Messaging client used to deliver push notifications."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from .errors import ChannelProviderError

logger = logging.getLogger(__name__)

_APP_NAME = "university-alerts"


def _get_or_create_app(credentials_file: str) -> firebase_admin.App:
    try:
        return firebase_admin.get_app(_APP_NAME)
    except ValueError:
        cred = credentials.Certificate(credentials_file)
        return firebase_admin.initialize_app(cred, name=_APP_NAME)


class FirebasePushClient:
    """Send push messages to device tokens via Firebase Admin."""

    def __init__(
        self, credentials_file: str | None = None, *, app: firebase_admin.App | None = None
    ) -> None:
        if app is None:
            if not credentials_file:
                raise ValueError("A Firebase credentials file is required")
            app = _get_or_create_app(credentials_file)
        self._app = app

    def send_push(
        self, *, token: str, title: str, body: str, data: Mapping[str, object]
    ) -> str:
        """Send a notification to ``token`` and return the message identifier."""

        message = messaging.Message(
            token=token,
            notification=messaging.Notification(title=title, body=body),
            # FCM only accepts string values in the data map.
            data={key: "" if value is None else str(value) for key, value in data.items()},
        )
        try:
            return messaging.send(message, app=self._app)
        except (messaging.UnregisteredError, messaging.SenderIdMismatchError) as exc:
            logger.warning("Push token rejected by FCM: %s", exc)
            raise ChannelProviderError(f"Invalid or expired push token: {exc}") from exc
        except FirebaseError as exc:
            logger.error("FCM request failed (%s): %s", exc.code, exc)
            raise ChannelProviderError(f"FCM error {exc.code}: {exc}") from exc


__all__ = ["FirebasePushClient"]
