"""Clients for the external notification providers."""

from .email import SendGridEmailClient
from .errors import ChannelProviderError
from .push import FirebasePushClient
from .sms import TwilioSmsClient

__all__ = [
    "ChannelProviderError",
    "FirebasePushClient",
    "SendGridEmailClient",
    "TwilioSmsClient",
]
