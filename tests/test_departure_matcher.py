"""Tests for departure matching and the fetch+match finder."""

from __future__ import annotations

from unittest.mock import AsyncMock

from busbook.discovery.departure_matcher import DepartureFinder, find_match
from busbook.models.departure import Departure

ROUTE = "Casablanca-Rabat"


def _dep(id, route=ROUTE, locked=False) -> Departure:
    return Departure(id=id, route_name=route, locked=locked)


class TestFindMatch:
    def test_empty(self):
        assert find_match([], ROUTE) is None

    def test_single_match(self):
        assert find_match([_dep(7)], ROUTE) == _dep(7)

    def test_first_match_wins(self):
        departures = [_dep(7), _dep(9)]
        assert find_match(departures, ROUTE).id == 7

    def test_skips_locked(self):
        departures = [_dep(3, locked=True), _dep(7)]
        assert find_match(departures, ROUTE).id == 7

    def test_all_locked(self):
        assert find_match([_dep(1, locked=True), _dep(2, locked=True)], ROUTE) is None

    def test_no_route_match(self):
        assert find_match([_dep(5, route="Rabat-Casablanca")], ROUTE) is None

    def test_case_sensitive(self):
        assert find_match([_dep(5, route="casablanca-rabat")], ROUTE) is None

    def test_not_trimmed(self):
        assert find_match([_dep(5, route=" Casablanca-Rabat ")], ROUTE) is None

    def test_unknown_lock_state_skipped(self):
        assert find_match([_dep(5, locked=None), _dep(6)], ROUTE).id == 6

    def test_missing_route_name_skipped(self):
        assert find_match([_dep(5, route=None)], ROUTE) is None

    def test_from_payload(self, sample_departures_payload):
        departures = Departure.from_api_list(sample_departures_payload)
        assert find_match(departures, ROUTE).id == 7


class TestDepartureFinder:
    async def test_find_returns_match(self):
        fetch = AsyncMock(return_value=[_dep(3, locked=True), _dep(7)])
        finder = DepartureFinder(fetch, ROUTE)
        match = await finder.find()
        assert match.id == 7
        fetch.assert_awaited_once()

    async def test_fetch_failure_is_no_match(self):
        finder = DepartureFinder(AsyncMock(return_value=None), ROUTE)
        assert await finder.find() is None

    async def test_empty_listing(self):
        finder = DepartureFinder(AsyncMock(return_value=[]), ROUTE)
        assert await finder.find() is None

    async def test_fetches_fresh_each_time(self):
        fetch = AsyncMock(side_effect=[[], [_dep(7)]])
        finder = DepartureFinder(fetch, ROUTE)
        assert await finder.find() is None
        assert (await finder.find()).id == 7
        assert fetch.await_count == 2
