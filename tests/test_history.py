import pytest

from client.history import LIVE_HISTORY_CAPACITY, HistoryBuffer
from sources.base import HistorySample


def sample(i):
    return HistorySample(time=f"t{i}", power=float(i), energy=i / 10)


def test_buffer_keeps_30_most_recent_in_arrival_order():
    buffer = HistoryBuffer()

    for i in range(45):
        buffer.append(sample(i))

    assert LIVE_HISTORY_CAPACITY == 30
    assert len(buffer) == 30
    assert buffer.snapshot() == [sample(i) for i in range(15, 45)]


def test_buffer_below_capacity_keeps_everything():
    buffer = HistoryBuffer(capacity=5)

    for i in range(3):
        buffer.append(sample(i))

    assert buffer.snapshot() == [sample(0), sample(1), sample(2)]


def test_replace_truncates_to_capacity():
    buffer = HistoryBuffer(capacity=3)
    buffer.append(sample(99))

    buffer.replace(sample(i) for i in range(10))

    assert buffer.snapshot() == [sample(7), sample(8), sample(9)]


def test_snapshot_is_a_copy():
    buffer = HistoryBuffer(capacity=3)
    buffer.append(sample(1))

    buffer.snapshot().clear()

    assert len(buffer) == 1


def test_invalid_capacity():
    with pytest.raises(ValueError):
        HistoryBuffer(capacity=0)
