import argparse
import asyncio
import logging
import os
import random
import sys
import time

from dotenv import load_dotenv

# Load configuration from single .env file
load_dotenv("shem-dashboard.env")

from sinks.ingestion import push_reading
from sources.simulated_device import DEFAULT_COST_PER_KWH, initial_state, tick

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

DEFAULT_TARGET_URL = "http://localhost:5000/api/energy"
DEFAULT_INTERVAL = 5.0


def get_cost_per_kwh() -> float:
    """Read the tariff with hard fail on misconfiguration"""
    raw = os.getenv("SIMULATOR_COST_PER_KWH")
    if raw is None:
        return DEFAULT_COST_PER_KWH
    try:
        return float(raw)
    except ValueError:
        logger.error(f"Simulator: SIMULATOR_COST_PER_KWH is not a number: {raw!r}")
        sys.exit(1)


async def main(url: str, interval: float, seed: int | None = None):
    rng = random.Random(seed)
    cost_per_kwh = get_cost_per_kwh()
    state = initial_state(time.time())

    logger.info("Simulator: Started")
    logger.info(f"Simulator: Target {url}, interval {interval}s")

    # Send immediately, then on interval
    while True:
        state, reading = tick(state, time.time(), rng, cost_per_kwh=cost_per_kwh)

        logger.info(
            f"Simulator: {reading.voltage} V | {reading.current} A | {reading.power} W | "
            f"{reading.energy_kwh} kWh | Rs {reading.cost_rs} | PF {reading.pf} | {reading.frequency} Hz"
        )
        await push_reading(url, reading)
        await asyncio.sleep(interval)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="SHEM synthetic sensor node")
    parser.add_argument(
        "--url",
        type=str,
        default=os.getenv("SIMULATOR_TARGET_URL", DEFAULT_TARGET_URL),
        help=f"Ingestion endpoint (default: {DEFAULT_TARGET_URL})"
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL,
        help=f"Seconds between readings (default: {DEFAULT_INTERVAL})"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    args = parser.parse_args()

    try:
        asyncio.run(main(args.url, args.interval, args.seed))
    except KeyboardInterrupt:
        logger.info("Simulator stopped by user.")
