"""Target-window check: is "now" within a few minutes of the target time?"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from busbook.config import TOLERANCE_MINUTES
from busbook.models.target import TimeOfDay

Clock = Callable[[], datetime]


def is_within_target(
    now: TimeOfDay,
    target: TimeOfDay,
    tolerance_minutes: int = TOLERANCE_MINUTES,
) -> bool:
    """True if ``now`` is at most ``tolerance_minutes`` away from ``target``.

    Both times are taken as the same day: there is no wraparound, so 23:59
    and 00:00 are 1439 minutes apart, not 1.
    """
    if tolerance_minutes < 0:
        raise ValueError(f"tolerance_minutes must be >= 0, got {tolerance_minutes}")
    diff = abs(now.minutes_since_midnight - target.minutes_since_midnight)
    return diff <= tolerance_minutes


def current_time_of_day(clock: Clock = datetime.now) -> TimeOfDay:
    """Local wall-clock time, minute granularity."""
    return TimeOfDay.from_datetime(clock())
