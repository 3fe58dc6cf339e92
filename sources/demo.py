"""Demo data generator - fabricates dashboard data without any backend"""
import random
from datetime import date, datetime, timedelta

from sources.base import HistorySample, LiveDataSnapshot

LIVE_POWER_RANGE = (500.0, 2500.0)
LIVE_VOLTAGE_RANGE = (220.0, 240.0)
LIVE_CURRENT_RANGE = (2.0, 10.0)
LIVE_ENERGY_RANGE = (0.0, 5.0)

DAILY_POWER_RANGE = (1000.0, 2000.0)
DAILY_ENERGY_RANGE = (0.0, 20.0)
HISTORY_DAYS = 7


def generate_live_snapshot(rng: random.Random, now: datetime | None = None) -> LiveDataSnapshot:
    """Uniform sample of every field within its fixed physical range."""
    now = now or datetime.now().astimezone()
    return LiveDataSnapshot(
        power=round(rng.uniform(*LIVE_POWER_RANGE), 1),
        voltage=round(rng.uniform(*LIVE_VOLTAGE_RANGE), 1),
        current=round(rng.uniform(*LIVE_CURRENT_RANGE), 1),
        energy=round(rng.uniform(*LIVE_ENERGY_RANGE), 2),
        timestamp=now.isoformat(),
    )


def generate_seven_day_history(rng: random.Random, today: date | None = None) -> list[HistorySample]:
    """One independent sample per day, oldest first, ending today."""
    today = today or date.today()
    return [
        HistorySample(
            time=(today - timedelta(days=days_ago)).isoformat(),
            power=round(rng.uniform(*DAILY_POWER_RANGE), 1),
            energy=round(rng.uniform(*DAILY_ENERGY_RANGE), 2),
        )
        for days_ago in range(HISTORY_DAYS - 1, -1, -1)
    ]
