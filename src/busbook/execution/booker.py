"""Booking attemptor — submit one booking request for a departure.

Never raises. A failed booking is an expected event here, so every
error is mapped to ``BookingOutcome(success=False)`` instead of raised.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from busbook.discovery.bus_client import BusClient
from busbook.models.booking import BookingOutcome
from busbook.models.departure import Identifier

logger = logging.getLogger(__name__)

# The service books either towards campus or away from it; this bot only does the latter.
TO_CAMPUS = False


def build_booking_payload(departure_id: Identifier) -> dict:
    """JSON body for POST /tickets/book."""
    return {
        "departure_id": departure_id,
        "to_campus": TO_CAMPUS,
    }


def _describe(body: Any) -> str:
    if isinstance(body, (dict, list)):
        return json.dumps(body, ensure_ascii=False)
    return str(body)


class BookingAttemptor:
    """Issue booking requests through a BusClient."""

    def __init__(self, client: BusClient):
        self.client = client

    async def attempt(self, departure_id: Identifier) -> BookingOutcome:
        """Book ``departure_id`` once.

        Returns:
            BookingOutcome; never raises.
        """
        payload = build_booking_payload(departure_id)
        try:
            status, body = await self.client.submit_booking(payload)
        except Exception as exc:
            detail = str(exc) or type(exc).__name__
            logger.warning("Booking failed for departure %s: %s", departure_id, detail)
            return BookingOutcome(success=False, departure_id=departure_id, detail=detail)

        detail = _describe(body)
        if 200 <= status < 300:
            logger.info("Booking successful for departure %s: %s", departure_id, detail)
            return BookingOutcome(success=True, departure_id=departure_id, detail=detail)

        logger.warning(
            "Booking failed for departure %s (HTTP %d): %s",
            departure_id, status, detail,
        )
        return BookingOutcome(success=False, departure_id=departure_id, detail=detail)
