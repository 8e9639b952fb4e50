"""Booking main loop — poll → match → book at the target time.

Usage:
    python -m busbook "Casablanca-Rabat" 14:30
    python -m busbook "Casablanca-Rabat" 14:30 --interval 2
    busbook "Casablanca-Rabat" 9:05 --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import math
import signal
import sys

from dotenv import load_dotenv

from busbook.config import MIN_CHECK_INTERVAL, BookerConfig
from busbook.discovery.bus_client import BusClient
from busbook.discovery.departure_matcher import DepartureFinder
from busbook.exceptions import ConfigError, InvalidTimeFormatError
from busbook.execution.booker import BookingAttemptor
from busbook.models.booking import BookingOutcome
from busbook.models.target import TargetSpec, TimeOfDay
from busbook.monitoring.telegram import TelegramAlerter
from busbook.scheduler.polling_scheduler import PollingScheduler, SchedulerState
from busbook.scheduler.time_window import current_time_of_day

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

# ---------------------------------------------------------------------------
# Banner
# ---------------------------------------------------------------------------

BANNER = r"""
╔══════════════════════════════════════════════╗
║   busbook — Bus Booking Scheduler            ║
║   Poll · Match · Book at target time         ║
╚══════════════════════════════════════════════╝
"""

# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _target_time(value: str) -> TimeOfDay:
    """argparse type for HH:MM."""
    try:
        return TimeOfDay.parse(value)
    except InvalidTimeFormatError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="busbook",
        description="Book a bus ticket as soon as the target time arrives",
        epilog="Example: busbook 'Casablanca-Rabat' 14:30",
    )
    parser.add_argument(
        "route", type=str,
        help="Route name, matched exactly (case-sensitive)",
    )
    parser.add_argument(
        "time", type=_target_time,
        help="Target time in 24-hour HH:MM format",
    )
    parser.add_argument(
        "--interval", type=float, default=None,
        help=f"Check interval in seconds (default: BUS_CHECK_INTERVAL or 1, min: {MIN_CHECK_INTERVAL})",
    )
    parser.add_argument(
        "--tolerance", type=int, default=None,
        help="Minutes around the target time during which booking is attempted (default: 1)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=False,
        help="Debug logging",
    )
    args = parser.parse_args(argv)
    if args.tolerance is not None and args.tolerance < 0:
        parser.error("--tolerance must be >= 0")
    if args.interval is not None and not math.isfinite(args.interval):
        parser.error("--interval must be a finite number of seconds")
    return args


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def _build_alerter(config: BookerConfig) -> TelegramAlerter:
    """TelegramAlerter from config (no-op when tokens are unset)."""
    return TelegramAlerter(
        bot_token=config.telegram_bot_token,
        chat_id=config.telegram_chat_id,
    )


def build_scheduler(
    config: BookerConfig,
    target: TargetSpec,
    client: BusClient,
    alerter: TelegramAlerter | None = None,
    stop_event: asyncio.Event | None = None,
) -> PollingScheduler:
    """Wire finder, attemptor and alerts into a PollingScheduler."""
    finder = DepartureFinder(client.fetch_departures, target.route_name)
    attemptor = BookingAttemptor(client)

    on_booked = None
    if alerter is not None and alerter.enabled:
        async def on_booked(outcome: BookingOutcome) -> None:
            await alerter.alert_booked(target, outcome)

    return PollingScheduler(
        target=target,
        finder=finder,
        attemptor=attemptor,
        check_interval=config.check_interval,
        tolerance_minutes=config.tolerance_minutes,
        stop_event=stop_event,
        on_booked=on_booked,
    )


# ---------------------------------------------------------------------------
# Main loop
# ---------------------------------------------------------------------------


async def booking_loop(config: BookerConfig, target: TargetSpec) -> SchedulerState:
    """Poll until the target window, book, and return the final state."""
    alerter = _build_alerter(config)

    print(BANNER)
    print(f"Route: {target.route_name}")
    print(f"Target Time: {target.target_time} (±{config.tolerance_minutes} min)")
    print(f"Checking every {config.check_interval:g} seconds...")
    print(f"Current Time: {current_time_of_day()}")
    print(f"Telegram alerts: {'ON' if alerter.enabled else 'OFF'}")
    print("-" * 50)

    await alerter.alert_started(target, config.check_interval)

    # Graceful shutdown
    stop_event = asyncio.Event()

    def _handle_signal():
        print("\n🛑 Stopping scheduler...")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _handle_signal)
        except NotImplementedError:
            pass  # Windows

    async with BusClient(
        token=config.token,
        base_url=config.api_base,
        timeout=config.request_timeout,
    ) as client:
        scheduler = build_scheduler(config, target, client, alerter, stop_event)
        state = await scheduler.run()

    if state is SchedulerState.BOOKED:
        print(f"🎉 Successfully booked ticket for {target.route_name} at {target.target_time}!")
    else:
        print("Scheduler stopped by user. Goodbye!")
    return state


def main(argv: list[str] | None = None) -> int:
    """Parse, configure, run. Returns the process exit code."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = BookerConfig.from_env()
    except ConfigError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return EXIT_FAILURE

    if args.interval is not None:
        config.check_interval = max(args.interval, MIN_CHECK_INTERVAL)
    if args.tolerance is not None:
        config.tolerance_minutes = args.tolerance

    target = TargetSpec(route_name=args.route, target_time=args.time)

    try:
        asyncio.run(booking_loop(config, target))
    except KeyboardInterrupt:
        print("\n🛑 Scheduler stopped by user")
    except Exception:
        logger.exception("Scheduler failed")
        return EXIT_FAILURE
    return EXIT_OK


def cli_main() -> None:
    """CLI entry point."""
    load_dotenv()
    sys.exit(main())


if __name__ == "__main__":
    cli_main()
