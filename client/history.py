"""Bounded rolling history for short-term charts"""
from collections import deque
from typing import Iterable

from sources.base import HistorySample

LIVE_HISTORY_CAPACITY = 30


class HistoryBuffer:
    """
    Fixed-capacity FIFO of history samples, kept in arrival order.

    When full, appending evicts the oldest sample.
    """

    def __init__(self, capacity: int = LIVE_HISTORY_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._samples: deque[HistorySample] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._samples)

    def append(self, sample: HistorySample) -> None:
        self._samples.append(sample)

    def replace(self, samples: Iterable[HistorySample]) -> None:
        """Swap in a fresh series, keeping only its most recent `capacity` samples."""
        self._samples = deque(samples, maxlen=self.capacity)

    def clear(self) -> None:
        self._samples.clear()

    def snapshot(self) -> list[HistorySample]:
        return list(self._samples)
