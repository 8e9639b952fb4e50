"""Telegram Bot API alerts.

스케줄러 시작, 예약 성공 알림 전송.
봇 토큰 미설정 시 모든 메서드가 no-op (크래시 없음).
"""

from __future__ import annotations

import logging

import aiohttp

from busbook.models.booking import BookingOutcome
from busbook.models.target import TargetSpec

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


class TelegramAlerter:
    """Telegram 알림 발송기.

    Args:
        bot_token: Telegram Bot API 토큰. None이면 비활성.
        chat_id: 메시지 대상 채팅 ID. None이면 비활성.
    """

    def __init__(
        self,
        bot_token: str | None = None,
        chat_id: str | None = None,
    ):
        self._bot_token = bot_token
        self._chat_id = chat_id

    @property
    def enabled(self) -> bool:
        """토큰과 chat_id 모두 설정됐을 때만 활성."""
        return bool(self._bot_token and self._chat_id)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def alert_started(self, target: TargetSpec, check_interval: float) -> None:
        """스케줄러 시작 알림."""
        if not self.enabled:
            return
        try:
            await self._send_message(self._format_started(target, check_interval))
        except Exception as exc:
            logger.error("Failed to send startup alert: %s", exc)

    async def alert_booked(self, target: TargetSpec, outcome: BookingOutcome) -> None:
        """예약 성공 알림."""
        if not self.enabled:
            return
        try:
            await self._send_message(self._format_booked(target, outcome))
        except Exception as exc:
            logger.error("Failed to send booking alert: %s", exc)

    # ------------------------------------------------------------------
    # Internal: HTTP
    # ------------------------------------------------------------------

    async def _send_message(self, text: str, parse_mode: str = "HTML") -> None:
        """Telegram sendMessage API 호출."""
        url = f"{TELEGRAM_API_URL}/bot{self._bot_token}/sendMessage"
        payload = {
            "chat_id": self._chat_id,
            "text": text,
            "parse_mode": parse_mode,
        }
        async with aiohttp.ClientSession() as session:
            async with session.post(url, json=payload) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    logger.warning("Telegram API %d: %s", resp.status, body[:200])

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    def _format_started(self, target: TargetSpec, check_interval: float) -> str:
        return (
            f"🚌 <b>Booking Scheduler Started</b>\n"
            f"{'━' * 24}\n"
            f"Route: {target.route_name}\n"
            f"Target Time: {target.target_time}\n"
            f"Interval: {check_interval:g}s"
        )

    def _format_booked(self, target: TargetSpec, outcome: BookingOutcome) -> str:
        return (
            f"🎉 <b>Ticket Booked</b>\n"
            f"{'━' * 24}\n"
            f"Route: {target.route_name}\n"
            f"Target Time: {target.target_time}\n"
            f"Departure ID: {outcome.departure_id}"
        )
