"""BookingOutcome data model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from busbook.models.departure import Identifier


@dataclass(frozen=True)
class BookingOutcome:
    """Result of one booking request."""

    success: bool
    departure_id: Identifier
    detail: Optional[str] = None  # response body or error text
