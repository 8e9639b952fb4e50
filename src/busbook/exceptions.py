"""Exceptions raised before the scheduler starts (startup-class errors)."""


class BusBookError(Exception):
    """Base class for busbook errors."""


class ConfigError(BusBookError):
    """Missing or malformed configuration (e.g. BUS_TOKEN unset)."""


class InvalidTimeFormatError(BusBookError, ValueError):
    """Target time is not a valid 24-hour HH:MM string."""
