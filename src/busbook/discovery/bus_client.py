"""Bus API client — departures lookup and ticket booking."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import aiohttp

from busbook.config import API_BASE_URL, DEFAULT_REQUEST_TIMEOUT, TOKEN_COOKIE_NAME
from busbook.models.departure import Departure

logger = logging.getLogger(__name__)

DEPARTURES_PATH = "/departure/current"
BOOKING_PATH = "/tickets/book"


class BusClient:
    """Async client for the bus booking API.

    Usage:
        async with BusClient(token="...") as client:
            departures = await client.fetch_departures()
    """

    def __init__(
        self,
        token: str,
        base_url: str = API_BASE_URL,
        timeout: int = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {
            "Content-Type": "application/json",
            "cookie": f"{TOKEN_COOKIE_NAME}={token}",
        }
        self._session: Optional[aiohttp.ClientSession] = None

    async def open(self) -> None:
        """Open aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout, headers=self.headers,
            )

    async def close(self) -> None:
        """Close aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> BusClient:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_departures(self) -> Optional[list[Departure]]:
        """GET /departure/current. None on failure, so callers can tell
        "request failed" apart from "no departures listed"."""
        url = f"{self.base_url}{DEPARTURES_PATH}"
        data = await self._get_json(url)
        if data is None:
            return None
        if not isinstance(data, list):
            logger.warning("Unexpected departures payload (%s), ignoring", type(data).__name__)
            return None
        return Departure.from_api_list(data)

    async def submit_booking(self, payload: dict) -> tuple[int, Any]:
        """POST /tickets/book. Returns (status, body).

        Network errors and timeouts propagate; the caller decides what a
        failure means.
        """
        await self.open()
        url = f"{self.base_url}{BOOKING_PATH}"
        async with self._session.post(url, json=payload) as resp:
            return resp.status, await self._read_body(resp)

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    async def _get_json(self, url: str) -> Any:
        """GET → parsed JSON, one request. Failures are logged and yield None."""
        await self.open()
        try:
            async with self._session.get(url) as resp:
                body = await self._read_body(resp)
                if resp.status == 200:
                    return body
                logger.warning("Bus API %s returned %d: %s", url, resp.status, body)
        except Exception as exc:
            logger.warning("Bus API %s error: %s", url, str(exc) or type(exc).__name__)
        return None

    @staticmethod
    async def _read_body(resp: aiohttp.ClientResponse) -> Any:
        """JSON body if parseable, text otherwise. Never raises on bad bytes."""
        text = (await resp.read()).decode("utf-8", errors="replace")
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text
