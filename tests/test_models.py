"""Tests for data models: TimeOfDay, TargetSpec, Departure, BookingOutcome."""

from __future__ import annotations

from datetime import datetime

import pytest

from busbook.exceptions import InvalidTimeFormatError
from busbook.models import BookingOutcome, Departure, TargetSpec, TimeOfDay


class TestTimeOfDayParse:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("14:30", TimeOfDay(14, 30)),
            ("00:00", TimeOfDay(0, 0)),
            ("23:59", TimeOfDay(23, 59)),
            ("9:05", TimeOfDay(9, 5)),
            ("09:05", TimeOfDay(9, 5)),
        ],
    )
    def test_valid(self, text, expected):
        assert TimeOfDay.parse(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["24:00", "14:60", "1430", "14:3", "14:30:00", " 14:30", "ab:cd", "", "-1:30"],
    )
    def test_invalid(self, text):
        with pytest.raises(InvalidTimeFormatError):
            TimeOfDay.parse(text)

    def test_invalid_is_value_error(self):
        """Callers catching ValueError still see bad input."""
        with pytest.raises(ValueError):
            TimeOfDay.parse("25:00")


class TestTimeOfDay:
    def test_minutes_since_midnight(self):
        assert TimeOfDay(0, 0).minutes_since_midnight == 0
        assert TimeOfDay(14, 30).minutes_since_midnight == 870
        assert TimeOfDay(23, 59).minutes_since_midnight == 1439

    def test_str_zero_padded(self):
        assert str(TimeOfDay(9, 5)) == "09:05"

    def test_from_datetime_drops_seconds(self):
        assert TimeOfDay.from_datetime(datetime(2026, 1, 1, 14, 29, 59)) == TimeOfDay(14, 29)

    def test_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            TimeOfDay(24, 0)
        with pytest.raises(ValueError):
            TimeOfDay(0, 60)

    def test_frozen(self):
        t = TimeOfDay(1, 2)
        with pytest.raises(AttributeError):
            t.hour = 3


class TestDepartureFromApi:
    def test_parses_record(self):
        d = Departure.from_api_response(
            {"id": 7, "route": {"name": "Casablanca-Rabat"}, "locked": False}
        )
        assert d == Departure(id=7, route_name="Casablanca-Rabat", locked=False)
        assert d.is_bookable is True

    def test_locked_not_bookable(self):
        d = Departure.from_api_response({"id": 1, "route": {"name": "X"}, "locked": True})
        assert d.is_bookable is False

    def test_missing_locked_not_bookable(self):
        """Only an explicit locked=false is bookable."""
        d = Departure.from_api_response({"id": 1, "route": {"name": "X"}})
        assert d.locked is None
        assert d.is_bookable is False

    def test_missing_route(self):
        d = Departure.from_api_response({"id": 1, "route": None, "locked": False})
        assert d.route_name is None

    def test_missing_id_returns_none(self):
        assert Departure.from_api_response({"route": {"name": "X"}, "locked": False}) is None

    def test_non_dict_returns_none(self):
        assert Departure.from_api_response("garbage") is None

    def test_from_api_list_skips_malformed(self, sample_departures_payload):
        records = sample_departures_payload + [{"locked": False}, 42]
        departures = Departure.from_api_list(records)
        assert [d.id for d in departures] == [3, 5, 7, 9]


class TestTargetAndOutcome:
    def test_target_spec_frozen(self):
        spec = TargetSpec("Casablanca-Rabat", TimeOfDay(14, 30))
        with pytest.raises(AttributeError):
            spec.route_name = "other"

    def test_outcome_defaults(self):
        outcome = BookingOutcome(success=True, departure_id=7)
        assert outcome.detail is None
