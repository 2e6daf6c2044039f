"""Twilio client used to deliver alert text messages."""

from __future__ import annotations

import logging
from typing import Any

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from .errors import ChannelProviderError

logger = logging.getLogger(__name__)


class TwilioSmsClient:
    """Send SMS messages through the Twilio REST API."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        *,
        client: Any | None = None,
    ) -> None:
        self._from_number = from_number
        self._client = client or Client(account_sid, auth_token)

    def send_sms(self, *, to: str, body: str) -> str:
        """Send ``body`` to ``to`` and return the provider message SID."""

        try:
            message = self._client.messages.create(
                body=body, from_=self._from_number, to=to
            )
        except TwilioRestException as exc:
            detail = exc.msg or str(exc)
            logger.error(
                "Twilio rejected SMS to %s (status %s, code %s): %s",
                to,
                exc.status,
                exc.code,
                detail,
            )
            raise ChannelProviderError(
                f"Twilio error {exc.code}: {detail}", status_code=exc.status
            ) from exc

        logger.debug("SMS queued for %s (SID: %s)", to, message.sid)
        return message.sid


__all__ = ["TwilioSmsClient"]
