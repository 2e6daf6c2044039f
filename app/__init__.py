"""University alerts notification service."""
