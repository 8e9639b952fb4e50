"""Departure data model."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

Identifier = Union[int, str]


@dataclass(frozen=True)
class Departure:
    """A single bus run as reported by /departure/current."""

    id: Identifier
    route_name: Optional[str]
    locked: Optional[bool]

    @property
    def is_bookable(self) -> bool:
        """Only an explicit ``locked: false`` counts as open."""
        return self.locked is False

    @staticmethod
    def from_api_response(raw: dict) -> Optional[Departure]:
        """API raw dict → Departure. None if the record has no id."""
        if not isinstance(raw, dict) or raw.get("id") is None:
            return None

        route = raw.get("route")
        route_name = route.get("name") if isinstance(route, dict) else None

        return Departure(
            id=raw["id"],
            route_name=route_name,
            locked=raw.get("locked"),
        )

    @staticmethod
    def from_api_list(records: list) -> list[Departure]:
        """Parse a departures payload, skipping malformed records."""
        departures: list[Departure] = []
        for raw in records:
            departure = Departure.from_api_response(raw)
            if departure is None:
                logger.warning("Skipping malformed departure record: %r", raw)
                continue
            departures.append(departure)
        return departures
