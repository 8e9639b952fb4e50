"""Departure matching — pick the bus to book out of a departures snapshot."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional, Sequence

from busbook.models.departure import Departure

logger = logging.getLogger(__name__)

FetchDepartures = Callable[[], Awaitable[Optional[Sequence[Departure]]]]


def find_match(
    departures: Sequence[Departure],
    route_name: str,
) -> Optional[Departure]:
    """First unlocked departure whose route name equals ``route_name`` exactly.

    No normalisation is applied (case and whitespace matter). Order is the
    order the API returned, so the first match wins.
    """
    for departure in departures:
        if departure.route_name == route_name and departure.is_bookable:
            return departure
    return None


class DepartureFinder:
    """Fetch the current departures and match them against one route.

    Args:
        fetch_departures: async callable returning the snapshot, or None
            when the request failed.
        route_name: exact route name to look for.
    """

    def __init__(self, fetch_departures: FetchDepartures, route_name: str):
        self._fetch_departures = fetch_departures
        self.route_name = route_name

    async def find(self) -> Optional[Departure]:
        """Fetch → match. A failed fetch counts as no match."""
        departures = await self._fetch_departures()
        if departures is None:
            logger.warning("Could not fetch departures, treating as no match")
            return None

        match = find_match(departures, self.route_name)
        logger.debug(
            "%d departures listed, match for %r: %s",
            len(departures), self.route_name,
            match.id if match is not None else "none",
        )
        return match
