"""Bot configuration — API endpoints, timing constants, env-based config."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from busbook.exceptions import ConfigError

# ---------------------------------------------------------------------------
# Remote service
# ---------------------------------------------------------------------------

API_BASE_URL = "https://bus-med.1337.ma/api"
TOKEN_ENV_VAR = "BUS_TOKEN"
TOKEN_COOKIE_NAME = "le_token"

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------

DEFAULT_CHECK_INTERVAL = 1.0  # seconds
MIN_CHECK_INTERVAL = 0.5  # seconds
DEFAULT_REQUEST_TIMEOUT = 15  # seconds
TOLERANCE_MINUTES = 1


# ---------------------------------------------------------------------------
# BookerConfig — environment-based settings
# ---------------------------------------------------------------------------


@dataclass
class BookerConfig:
    """Runtime settings. Environment variables or defaults."""

    token: str
    api_base: str = API_BASE_URL
    check_interval: float = DEFAULT_CHECK_INTERVAL
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    tolerance_minutes: int = TOLERANCE_MINUTES
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None

    def __post_init__(self):
        if not math.isfinite(self.check_interval):
            raise ConfigError(f"check_interval must be a finite number, got {self.check_interval}")
        # floor on the polling interval
        if self.check_interval < MIN_CHECK_INTERVAL:
            self.check_interval = MIN_CHECK_INTERVAL
        if self.tolerance_minutes < 0:
            raise ConfigError("tolerance_minutes must be >= 0")

    @classmethod
    def from_env(cls, environ: dict | None = None) -> BookerConfig:
        """Load settings from the environment. BUS_TOKEN is mandatory."""
        env = os.environ if environ is None else environ

        token = (env.get(TOKEN_ENV_VAR) or "").strip()
        if not token:
            raise ConfigError(
                f"Please set the {TOKEN_ENV_VAR} environment variable in your .env file."
            )

        try:
            check_interval = float(
                env.get("BUS_CHECK_INTERVAL", str(DEFAULT_CHECK_INTERVAL))
            )
            request_timeout = int(
                env.get("BUS_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid numeric setting: {exc}") from exc

        return cls(
            token=token,
            api_base=env.get("BUS_API_BASE", API_BASE_URL).rstrip("/"),
            check_interval=check_interval,
            request_timeout=request_timeout,
            telegram_bot_token=env.get("TELEGRAM_BOT_TOKEN"),
            telegram_chat_id=env.get("TELEGRAM_CHAT_ID"),
        )

