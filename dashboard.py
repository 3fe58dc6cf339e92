import argparse
import asyncio
import logging
import os
import sys
import time
from dataclasses import replace

from dotenv import load_dotenv

# Load configuration from single .env file
load_dotenv("shem-dashboard.env")

from client.fetcher import DataFetcher, PollIntervals, create_fetcher
from sinks.notifications import NotificationRouter
from sources.session import load_session

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"

# Stale data timeout (seconds)
STALE_DATA_TIMEOUT = 60
# How often the console view is refreshed (seconds)
REPORT_INTERVAL = 3


def format_snapshot(fetcher: DataFetcher) -> str:
    snapshot = fetcher.current_snapshot()
    status = fetcher.current_status().value
    if snapshot is None:
        return f"[{status}] waiting for data..."
    return (
        f"[{status}] {snapshot.power:.1f} W | {snapshot.voltage:.1f} V | "
        f"{snapshot.current:.2f} A | {snapshot.energy:.3f} kWh "
        f"({len(fetcher.current_history())} samples) @ {snapshot.timestamp}"
    )


class StaleDataMonitor:
    """
    Tracks whether the snapshot timestamp is still advancing.

    check() returns True exactly once per stale period: the first time no
    new timestamp has been seen for longer than `timeout` seconds. A new
    timestamp re-arms the alert.
    """

    def __init__(self, timeout: float = STALE_DATA_TIMEOUT, now: float | None = None):
        self.timeout = timeout
        self.last_timestamp: str | None = None
        self.last_change = time.time() if now is None else now
        self.stale_alert_sent = False

    def check(self, timestamp: str | None, now: float) -> bool:
        if timestamp != self.last_timestamp:
            self.last_timestamp = timestamp
            self.last_change = now

        if now - self.last_change > self.timeout:
            if not self.stale_alert_sent:
                self.stale_alert_sent = True
                return True
        else:
            # Reset stale flag when data is fresh
            self.stale_alert_sent = False
        return False


async def main(api_url: str, session_file: str | None, force_demo: bool, unit: float):
    session = load_session(session_file)
    if force_demo and not session.is_demo:
        session = replace(session, demo_user="demo")

    router = NotificationRouter()
    auth_expired = asyncio.Event()

    fetcher = create_fetcher(
        session,
        api_url,
        notify=router,
        on_auth_expired=auth_expired.set,
        intervals=PollIntervals.from_unit(unit),
    )

    stale = StaleDataMonitor()

    async def timeout_monitor():
        """Monitor that checks if data has gone stale"""
        while True:
            await asyncio.sleep(10)  # Check every 10 seconds

            snapshot = fetcher.current_snapshot()
            timestamp = snapshot.timestamp if snapshot else None
            if stale.check(timestamp, time.time()):
                logger.warning(f"No new reading for {STALE_DATA_TIMEOUT}s, data shown is stale")

    async def report():
        """Log the live view"""
        while True:
            await asyncio.sleep(REPORT_INTERVAL * unit)
            logger.info(format_snapshot(fetcher))

    await fetcher.start()
    monitor = asyncio.create_task(timeout_monitor())
    reporter = asyncio.create_task(report())
    try:
        await auth_expired.wait()
        logger.error("Session expired. Log in again and restart the dashboard.")
    finally:
        monitor.cancel()
        reporter.cancel()
        await asyncio.gather(monitor, reporter, return_exceptions=True)
        await fetcher.stop()

    sys.exit(1)


if __name__ == "__main__":
    # Parse command line arguments
    parser = argparse.ArgumentParser(description="SHEM live dashboard (console)")
    parser.add_argument(
        "--api-url",
        type=str,
        default=os.getenv("DASHBOARD_API_URL", DEFAULT_API_URL),
        help=f"Backend API root (default: {DEFAULT_API_URL})"
    )
    parser.add_argument(
        "--session-file",
        type=str,
        default=None,
        help="Session marker written by the login flow (default: $SHEM_SESSION_FILE or shem-session.json)"
    )
    parser.add_argument("--demo", action="store_true", help="Force demo mode")
    parser.add_argument(
        "--unit",
        type=float,
        default=1.0,
        help="Seconds per polling time unit (default: 1.0)"
    )
    args = parser.parse_args()

    try:
        asyncio.run(main(args.api_url, args.session_file, args.demo, args.unit))
    except KeyboardInterrupt:
        logger.info("Dashboard stopped by user.")
