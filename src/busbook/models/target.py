"""TimeOfDay and TargetSpec data models."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from busbook.exceptions import InvalidTimeFormatError

# 24-hour HH:MM, leading zero on the hour optional ("9:05" is accepted)
TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


@dataclass(frozen=True)
class TimeOfDay:
    """Wall-clock time with minute granularity."""

    hour: int
    minute: int

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour out of range: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute out of range: {self.minute}")

    @property
    def minutes_since_midnight(self) -> int:
        return self.hour * 60 + self.minute

    @classmethod
    def parse(cls, text: str) -> TimeOfDay:
        """Parse "HH:MM". Raises InvalidTimeFormatError on anything else."""
        match = TIME_PATTERN.match(text or "")
        if match is None:
            raise InvalidTimeFormatError(
                f"Invalid time format {text!r}. Please use HH:MM format (e.g., 14:30)"
            )
        return cls(hour=int(match.group(1)), minute=int(match.group(2)))

    @classmethod
    def from_datetime(cls, dt: datetime) -> TimeOfDay:
        """Seconds are dropped, not rounded."""
        return cls(hour=dt.hour, minute=dt.minute)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class TargetSpec:
    """What to book and when. Supplied once at startup."""

    route_name: str
    target_time: TimeOfDay
