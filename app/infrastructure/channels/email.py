"""SendGrid client used to deliver alert emails."""

from __future__ import annotations

import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from .errors import ChannelProviderError

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                field = item.get("field")
                if message and field:
                    messages.append(f"{message} (field: {field})")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_failure(status_code: Any, body: Any) -> str:
    details = _extract_sendgrid_error_details(body)
    if status_code and details:
        return f"SendGrid request failed with status {status_code}: {details}"
    if status_code:
        return f"SendGrid request failed with status {status_code}"
    if details:
        return f"SendGrid request failed: {details}"
    return "SendGrid request failed"


class SendGridEmailClient:
    """Thin wrapper around :class:`SendGridAPIClient` for multipart emails."""

    def __init__(self, api_key: str, sender: str, *, client: Any | None = None) -> None:
        self._sender = sender
        self._client = client or SendGridAPIClient(api_key)

    def send_email(
        self, *, recipient: str, subject: str, plain_text: str, html_content: str
    ) -> None:
        """Send one email, raising :class:`ChannelProviderError` on failure."""

        message = Mail(
            from_email=self._sender,
            to_emails=recipient,
            subject=subject,
            plain_text_content=plain_text,
            html_content=html_content,
        )

        try:
            response = self._client.send(message)
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            description = _describe_failure(status_code, getattr(exc, "body", None))
            if description == "SendGrid request failed":
                description = f"SendGrid request failed: {exc}"
            logger.error(description)
            raise ChannelProviderError(description, status_code=status_code) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            description = _describe_failure(status_code, getattr(response, "body", None))
            logger.error(description)
            raise ChannelProviderError(
                description,
                status_code=status_code if isinstance(status_code, int) else None,
            )


__all__ = ["SendGridEmailClient"]
