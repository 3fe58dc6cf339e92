"""
Live data fetchers - keep the dashboard's view of the sensor data fresh.

Two strategies share the DataFetcher protocol:

* LiveDataFetcher polls the backend and tracks whether it is reachable.
* DemoDataFetcher fabricates data in process and is always "online".

The strategy is picked once, from the session marker, by create_fetcher().
"""
import logging
import random
from dataclasses import dataclass
from typing import Callable, Protocol

from client.history import LIVE_HISTORY_CAPACITY, HistoryBuffer
from client.polling import Ticker, TickerGroup
from sinks.notifications import EventKind, FetchEvent, Severity
from sources.base import (
    AuthExpiredError,
    ConnectionStatus,
    HistorySample,
    LiveDataSnapshot,
    NetworkError,
    daily_sample,
    live_sample,
)
from sources.dashboard_api import DashboardApiClient
from sources.demo import generate_live_snapshot, generate_seven_day_history
from sources.session import Session

logger = logging.getLogger(__name__)

Notify = Callable[[FetchEvent], None]


@dataclass(frozen=True)
class PollIntervals:
    """
    Seconds between polls of each endpoint.

    The 1:20:1200 ratio between live, history and 7-day polls is what
    matters; from_unit() scales all three together.
    """
    live: float = 3.0
    history: float = 60.0
    seven_day: float = 3600.0
    demo: float = 1.0

    @classmethod
    def from_unit(cls, unit: float) -> "PollIntervals":
        return cls(live=3 * unit, history=60 * unit, seven_day=3600 * unit, demo=unit)


class DataFetcher(Protocol):
    """
    Protocol for dashboard data strategies.

    start() begins polling; stop() releases every timer and resets the state
    to its initial values.
    """

    is_online: bool
    is_loading: bool

    async def start(self) -> None:
        ...

    async def stop(self) -> None:
        ...

    def current_snapshot(self) -> LiveDataSnapshot | None:
        ...

    def current_history(self) -> list[HistorySample]:
        ...

    def current_seven_day_history(self) -> list[HistorySample]:
        ...

    def current_status(self) -> ConnectionStatus:
        ...


def _ignore_event(event: FetchEvent) -> None:
    pass


class _FetcherState:
    """State shared by both strategies; reset on stop()."""

    def __init__(self, history_capacity: int):
        self.history_capacity = history_capacity
        self._reset_state()

    def _reset_state(self) -> None:
        self.snapshot: LiveDataSnapshot | None = None
        self.history = HistoryBuffer(self.history_capacity)
        self.seven_day_history: list[HistorySample] = []
        self.status = ConnectionStatus.CONNECTING
        self.is_online = False
        self.is_loading = True

    def current_snapshot(self) -> LiveDataSnapshot | None:
        return self.snapshot

    def current_history(self) -> list[HistorySample]:
        return self.history.snapshot()

    def current_seven_day_history(self) -> list[HistorySample]:
        return list(self.seven_day_history)

    def current_status(self) -> ConnectionStatus:
        return self.status

    def _accept_snapshot(self, snapshot: LiveDataSnapshot, status: ConnectionStatus) -> None:
        self.snapshot = snapshot
        self.history.append(live_sample(snapshot))
        self.status = status
        self.is_online = True


class LiveDataFetcher(_FetcherState):
    """
    Polls the backend's live, history and 7-day endpoints on independent
    intervals.

    Live poll failures switch the status to Disconnected and emit one
    classified event; the next successful poll switches back to Live.
    History poll failures emit a transient notice and keep the data already
    shown.
    """

    def __init__(
        self,
        api: DashboardApiClient,
        notify: Notify = _ignore_event,
        on_auth_expired: Callable[[], None] | None = None,
        intervals: PollIntervals = PollIntervals(),
        history_capacity: int = LIVE_HISTORY_CAPACITY
    ):
        """
        Args:
            api: Dashboard client (connected by start(), closed by stop())
            notify: Receives classified failure events
            on_auth_expired: Login boundary, called as soon as the backend
                rejects the session. Must not await stop() itself.
            intervals: Poll periods
            history_capacity: Size of the rolling live history
        """
        super().__init__(history_capacity)
        self.api = api
        self.notify = notify
        self.on_auth_expired = on_auth_expired
        self.intervals = intervals
        self.tickers = TickerGroup()

    async def start(self) -> None:
        if self.tickers.running:
            return
        await self.api.connect()
        self.tickers = TickerGroup([
            Ticker("live", self.intervals.live, self.poll_live),
            Ticker("history", self.intervals.history, self.poll_history),
            Ticker("seven-day", self.intervals.seven_day, self.poll_seven_day),
        ])
        self.tickers.start()
        logger.info(
            f"Live fetcher: Polling every {self.intervals.live}s / "
            f"{self.intervals.history}s / {self.intervals.seven_day}s"
        )

    async def stop(self) -> None:
        await self.tickers.stop()
        await self.api.close()
        self._reset_state()
        logger.info("Live fetcher: Stopped")

    async def poll_live(self) -> None:
        """Fetch the latest reading; never raises."""
        self.is_loading = True
        try:
            data = await self.api.get_live()
            snapshot = LiveDataSnapshot.from_payload(data)
        except NetworkError as e:
            logger.error(f"Live fetcher: {e}")
            self._disconnect()
            self.notify(FetchEvent(
                kind=EventKind.NETWORK,
                message="Server connection lost. Retrying...",
                severity=Severity.ERROR,
            ))
        except AuthExpiredError as e:
            logger.error(f"Live fetcher: {e}")
            self._disconnect()
            self.notify(FetchEvent(
                kind=EventKind.AUTH_EXPIRED,
                message="Session expired. Please log in again.",
                severity=Severity.ERROR,
                key="auth-error",
            ))
            if self.on_auth_expired:
                self.on_auth_expired()
        except Exception as e:
            logger.error(f"Live fetcher: Error fetching live sensor data: {e}")
            self._disconnect()
            self.notify(FetchEvent(
                kind=EventKind.LIVE_FAILED,
                message="Failed to fetch live data.",
                severity=Severity.WARNING,
                key="live-data",
            ))
        else:
            self._accept_snapshot(snapshot, ConnectionStatus.LIVE)
        finally:
            self.is_loading = False

    async def poll_history(self) -> None:
        """Replace the live history with the backend's; never raises."""
        try:
            items = await self.api.get_history()
            samples = [live_sample(LiveDataSnapshot.from_payload(item)) for item in items]
        except Exception as e:
            logger.error(f"Live fetcher: Error fetching historical data: {e}")
            self.notify(FetchEvent(
                kind=EventKind.HISTORY_FAILED,
                message="Failed to fetch historical data.",
                key="history-error",
            ))
        else:
            self.history.replace(samples)

    async def poll_seven_day(self) -> None:
        """Replace the 7-day history with the backend's; never raises."""
        try:
            items = await self.api.get_seven_day_history()
            samples = [daily_sample(LiveDataSnapshot.from_payload(item)) for item in items]
        except Exception as e:
            logger.error(f"Live fetcher: Error fetching 7-day historical data: {e}")
            self.notify(FetchEvent(
                kind=EventKind.SEVEN_DAY_FAILED,
                message="Failed to fetch 7-day historical data.",
                key="7day-history-error",
            ))
        else:
            self.seven_day_history = samples

    def _disconnect(self) -> None:
        self.status = ConnectionStatus.DISCONNECTED
        self.is_online = False


class DemoDataFetcher(_FetcherState):
    """
    Fabricates a fresh snapshot and 7-day history every demo interval.

    Never talks to the backend and never reports a disconnection.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        intervals: PollIntervals = PollIntervals(),
        history_capacity: int = LIVE_HISTORY_CAPACITY
    ):
        super().__init__(history_capacity)
        self.rng = rng or random.Random()
        self.intervals = intervals
        self.tickers = TickerGroup()

    async def start(self) -> None:
        if self.tickers.running:
            return
        self.tickers = TickerGroup([
            Ticker("demo", self.intervals.demo, self.generate, immediate=False),
        ])
        self.tickers.start()
        logger.info(f"Demo fetcher: Generating data every {self.intervals.demo}s")

    async def stop(self) -> None:
        await self.tickers.stop()
        self._reset_state()
        logger.info("Demo fetcher: Stopped")

    async def generate(self) -> None:
        """One demo tick."""
        self._accept_snapshot(generate_live_snapshot(self.rng), ConnectionStatus.DEMO_LIVE)
        self.seven_day_history = generate_seven_day_history(self.rng)
        self.is_loading = False


def create_fetcher(
    session: Session,
    api_url: str,
    notify: Notify = _ignore_event,
    on_auth_expired: Callable[[], None] | None = None,
    intervals: PollIntervals = PollIntervals()
) -> DataFetcher:
    """Pick the fetcher strategy for this session; decided once."""
    if session.is_demo:
        logger.info("Using fetcher: Demo")
        return DemoDataFetcher(intervals=intervals)

    logger.info("Using fetcher: Live")
    api = DashboardApiClient(api_url, token=session.token)
    return LiveDataFetcher(api, notify=notify, on_auth_expired=on_auth_expired, intervals=intervals)
