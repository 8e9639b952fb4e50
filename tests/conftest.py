"""Shared test fixtures for busbook."""

from __future__ import annotations

from datetime import datetime

import pytest

from busbook.models.departure import Departure
from busbook.models.target import TargetSpec, TimeOfDay


class FakeClock:
    """Settable stand-in for datetime.now."""

    def __init__(self, hour: int, minute: int, second: int = 0):
        self.now = datetime(2026, 3, 2, hour, minute, second)

    def set(self, hour: int, minute: int, second: int = 0) -> None:
        self.now = self.now.replace(hour=hour, minute=minute, second=second)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def target() -> TargetSpec:
    return TargetSpec(route_name="Casablanca-Rabat", target_time=TimeOfDay(14, 30))


@pytest.fixture
def open_departure() -> Departure:
    """Unlocked departure on the target route."""
    return Departure(id=7, route_name="Casablanca-Rabat", locked=False)


@pytest.fixture
def sample_departures_payload() -> list[dict]:
    """Raw /departure/current response."""
    return [
        {"id": 3, "route": {"name": "Casablanca-Rabat"}, "locked": True},
        {"id": 5, "route": {"name": "Rabat-Casablanca"}, "locked": False},
        {"id": 7, "route": {"name": "Casablanca-Rabat"}, "locked": False},
        {"id": 9, "route": {"name": "Casablanca-Rabat"}, "locked": False},
    ]


@pytest.fixture
def clock() -> FakeClock:
    """Clock parked at 14:00, well before the 14:30 target."""
    return FakeClock(14, 0)
