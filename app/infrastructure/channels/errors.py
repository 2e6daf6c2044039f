"""Errors raised by notification provider clients."""

from __future__ import annotations


class ChannelProviderError(Exception):
    """An external provider rejected or failed a delivery request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = ["ChannelProviderError"]
