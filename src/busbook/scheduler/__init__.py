"""Polling scheduler for single-ticket booking.

Provides:
- PollingScheduler: Serialized tick loop driving the booking state machine
- SchedulerState: Enum for scheduler states (WAITING ... BOOKED, STOPPED)
- is_within_target: Target-window check with minute tolerance
- current_time_of_day: Local wall clock as TimeOfDay
"""

from busbook.scheduler.polling_scheduler import PollingScheduler, SchedulerState
from busbook.scheduler.time_window import current_time_of_day, is_within_target

__all__ = [
    "PollingScheduler",
    "SchedulerState",
    "current_time_of_day",
    "is_within_target",
]
