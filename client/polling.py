"""Cancellable periodic tasks for polling"""
import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class Ticker:
    """
    Calls an async callback every `interval` seconds until stopped.

    Each call runs as its own task, so a slow callback does not delay the
    schedule; calls may overlap, the last one to finish wins. Exceptions
    from the callback are logged and never reach the event loop.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        callback: Callable[[], Awaitable[None]],
        immediate: bool = True
    ):
        """
        Args:
            name: Label used in logs and task names
            interval: Seconds between calls
            callback: Coroutine function to call
            immediate: Call once right away instead of after the first interval
        """
        if interval <= 0:
            raise ValueError(f"Ticker '{name}': interval must be positive, got {interval}")

        self.name = name
        self.interval = interval
        self.callback = callback
        self.immediate = immediate
        self._task: asyncio.Task | None = None
        self._in_flight: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking; must be called from a running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=f"ticker:{self.name}")

    async def _invoke(self) -> None:
        try:
            await self.callback()
        except Exception as e:
            logger.error(f"Ticker '{self.name}': Callback failed: {e}")

    def _spawn(self) -> None:
        task = asyncio.create_task(self._invoke(), name=f"ticker:{self.name}:call")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _run(self) -> None:
        if self.immediate:
            self._spawn()
        while True:
            await asyncio.sleep(self.interval)
            self._spawn()

    async def stop(self) -> None:
        """Stop ticking and cancel calls still in flight."""
        tasks = list(self._in_flight)
        if self._task is not None:
            tasks.append(self._task)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._task = None
        self._in_flight.clear()


class TickerGroup:
    """Supervisor that starts and stops a set of tickers together."""

    def __init__(self, tickers: list[Ticker] | None = None):
        self.tickers: list[Ticker] = list(tickers or [])

    def add(self, ticker: Ticker) -> Ticker:
        self.tickers.append(ticker)
        return ticker

    def start(self) -> None:
        for ticker in self.tickers:
            ticker.start()

    async def stop(self) -> None:
        await asyncio.gather(*(ticker.stop() for ticker in self.tickers))

    @property
    def running(self) -> bool:
        return any(ticker.running for ticker in self.tickers)
