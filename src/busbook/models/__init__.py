"""Data models for busbook."""

from busbook.models.booking import BookingOutcome
from busbook.models.departure import Departure
from busbook.models.target import TargetSpec, TimeOfDay

__all__ = [
    "BookingOutcome",
    "Departure",
    "TargetSpec",
    "TimeOfDay",
]
