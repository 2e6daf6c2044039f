"""Aggregate application use cases."""

from .notifications import create_fan_out, handle_alert_created, resolve_channels

__all__ = [
    "create_fan_out",
    "handle_alert_created",
    "resolve_channels",
]
