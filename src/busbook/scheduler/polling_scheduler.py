"""Polling scheduler for single-ticket booking.

Ticks on a fixed interval and walks the booking state machine:
- WAITING: outside the target window, departures are only reported
- IN_WINDOW_UNATTEMPTED: inside the window, next tick tries to book
- IN_WINDOW_ATTEMPTING: a tick is fetching/booking right now
- BOOKED: booking succeeded (terminal)
- STOPPED: cancelled from outside (terminal)

Ticks never overlap: the whole tick body runs under a lock, and ``run()``
starts tick N+1 only after tick N has returned.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol

from busbook.config import DEFAULT_CHECK_INTERVAL, TOLERANCE_MINUTES
from busbook.models.booking import BookingOutcome
from busbook.models.departure import Departure, Identifier
from busbook.models.target import TargetSpec, TimeOfDay
from busbook.scheduler.time_window import Clock, current_time_of_day, is_within_target

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Booking state machine states."""

    WAITING = "waiting"
    IN_WINDOW_UNATTEMPTED = "in_window_unattempted"
    IN_WINDOW_ATTEMPTING = "in_window_attempting"
    BOOKED = "booked"
    STOPPED = "stopped"

    @property
    def is_terminal(self) -> bool:
        return self in (SchedulerState.BOOKED, SchedulerState.STOPPED)


class Finder(Protocol):
    async def find(self) -> Optional[Departure]: ...


class Attemptor(Protocol):
    async def attempt(self, departure_id: Identifier) -> BookingOutcome: ...


OnBooked = Callable[[BookingOutcome], Awaitable[None]]


class PollingScheduler:
    """Drive finder + attemptor until a ticket is booked or the run is stopped.

    Args:
        target: route and time to book.
        finder: returns the matching departure for this tick, or None.
        attemptor: submits one booking request.
        check_interval: minimum spacing between tick starts, in seconds.
        tolerance_minutes: half-width of the target window.
        clock: returns the current local datetime (injectable for tests).
        stop_event: cancellation token; set it to stop the scheduler.
        on_booked: awaited once after a successful booking.
    """

    def __init__(
        self,
        target: TargetSpec,
        finder: Finder,
        attemptor: Attemptor,
        check_interval: float = DEFAULT_CHECK_INTERVAL,
        tolerance_minutes: int = TOLERANCE_MINUTES,
        clock: Clock = datetime.now,
        stop_event: asyncio.Event | None = None,
        on_booked: OnBooked | None = None,
    ):
        self.target = target
        self.finder = finder
        self.attemptor = attemptor
        self.check_interval = check_interval
        self.tolerance_minutes = tolerance_minutes
        self._clock = clock
        self._stop_event = stop_event or asyncio.Event()
        self._on_booked = on_booked
        self._tick_lock = asyncio.Lock()

        self.state: SchedulerState = SchedulerState.WAITING
        self.tick_count: int = 0
        self.booking_calls: int = 0
        self.last_outcome: BookingOutcome | None = None

    @property
    def booking_attempted(self) -> bool:
        """True only while a tick is in the middle of an attempt."""
        return self.state is SchedulerState.IN_WINDOW_ATTEMPTING

    @property
    def stop_event(self) -> asyncio.Event:
        return self._stop_event

    def stop(self) -> None:
        """Request cancellation. Takes effect at the next check point."""
        self._stop_event.set()

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    async def run(self) -> SchedulerState:
        """Tick until BOOKED or STOPPED. Returns the final state."""
        loop = asyncio.get_running_loop()
        while not self.state.is_terminal:
            started = loop.time()
            await self.tick()
            if self.state.is_terminal:
                break

            remaining = self.check_interval - (loop.time() - started)
            if remaining <= 0:
                continue
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=remaining)
            except asyncio.TimeoutError:
                pass  # normal — time to check again

        logger.info("Scheduler finished after %d ticks: %s", self.tick_count, self.state.value)
        return self.state

    async def tick(self) -> SchedulerState:
        """One check-and-act cycle. Concurrent calls queue on the lock."""
        async with self._tick_lock:
            if self.state.is_terminal:
                return self.state
            if self._stop_event.is_set():
                self._mark_stopped()
                return self.state

            self.tick_count += 1
            now = current_time_of_day(self._clock)
            logger.info(
                "[%s] Check #%d - Looking for %s...",
                now, self.tick_count, self.target.route_name,
            )

            try:
                if is_within_target(now, self.target.target_time, self.tolerance_minutes):
                    await self._handle_in_window()
                else:
                    await self._handle_waiting(now)
            except Exception:
                logger.exception("Error in tick %d", self.tick_count)

            if self.state is SchedulerState.BOOKED:
                await self._notify_booked()
            return self.state

    # ------------------------------------------------------------------
    # State handlers
    # ------------------------------------------------------------------

    async def _handle_waiting(self, now: TimeOfDay) -> None:
        """Outside the window: report only, never book."""
        self.state = SchedulerState.WAITING
        departure = await self.finder.find()
        if departure is not None:
            logger.info(
                "Found %s (ID: %s) but waiting for %s (current: %s)",
                self.target.route_name, departure.id, self.target.target_time, now,
            )
        else:
            logger.info("%s not available yet, waiting...", self.target.route_name)

    async def _handle_in_window(self) -> None:
        """Inside the window: find → book. Anything short of success
        leaves the scheduler ready to retry on the next tick."""
        logger.info("Target time reached! Attempting to book...")
        self.state = SchedulerState.IN_WINDOW_ATTEMPTING
        try:
            departure = await self.finder.find()
            if departure is None:
                logger.info("Bus not available yet at target time, will keep checking...")
                return

            logger.info("Found departure: %s (ID: %s)", departure.route_name, departure.id)
            if self._stop_event.is_set():
                self._mark_stopped()
                return

            self.booking_calls += 1
            outcome = await self.attemptor.attempt(departure.id)
            self.last_outcome = outcome
            if outcome.success:
                self.state = SchedulerState.BOOKED
                logger.info(
                    "Successfully booked ticket for %s at %s!",
                    self.target.route_name, self.target.target_time,
                )
            else:
                logger.info("Booking failed, will keep trying...")
        finally:
            if self.state is SchedulerState.IN_WINDOW_ATTEMPTING:
                self.state = SchedulerState.IN_WINDOW_UNATTEMPTED

    def _mark_stopped(self) -> None:
        if not self.state.is_terminal:
            logger.info("Scheduler stopped by user")
            self.state = SchedulerState.STOPPED

    async def _notify_booked(self) -> None:
        if self._on_booked is None or self.last_outcome is None:
            return
        try:
            await self._on_booked(self.last_outcome)
        except Exception as exc:
            logger.error("on_booked callback failed: %s", exc)
