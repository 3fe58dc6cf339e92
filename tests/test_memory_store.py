import pytest
from datetime import datetime, timedelta, timezone

from storage.base import NO_ROWS_CODE, StoreError
from storage.memory import InMemoryReadingStore


T0 = datetime(2026, 10, 19, 8, 0, 0, tzinfo=timezone.utc)


def fixed_clock(*times):
    """Clock returning the given datetimes in order"""
    iterator = iter(times)
    return lambda: next(iterator)


@pytest.mark.asyncio
async def test_latest_on_empty_store_reports_no_rows():
    store = InMemoryReadingStore()

    with pytest.raises(StoreError) as exc_info:
        await store.latest()

    assert exc_info.value.code == NO_ROWS_CODE
    assert exc_info.value.is_no_rows


@pytest.mark.asyncio
async def test_insert_assigns_id_and_created_at():
    store = InMemoryReadingStore(clock=fixed_clock(T0))

    stored = await store.insert({"power": 575.0, "energy_kwh": 0.5})

    assert stored["id"] == 1
    assert stored["created_at"] == T0.isoformat()
    assert stored["power"] == 575.0


@pytest.mark.asyncio
async def test_created_at_strictly_increases_with_a_stuck_clock():
    store = InMemoryReadingStore(clock=fixed_clock(T0, T0, T0 - timedelta(seconds=1)))

    first = await store.insert({"power": 1.0})
    second = await store.insert({"power": 2.0})
    third = await store.insert({"power": 3.0})

    stamps = [datetime.fromisoformat(r["created_at"]) for r in (first, second, third)]
    assert stamps[0] < stamps[1] < stamps[2]


@pytest.mark.asyncio
async def test_latest_returns_most_recent_insert():
    store = InMemoryReadingStore(clock=fixed_clock(T0, T0 + timedelta(seconds=5)))
    await store.insert({"power": 100.0})
    await store.insert({"power": 200.0})

    latest = await store.latest()

    assert latest["power"] == 200.0


@pytest.mark.asyncio
async def test_latest_returns_a_copy():
    store = InMemoryReadingStore(clock=fixed_clock(T0))
    await store.insert({"power": 100.0})

    latest = await store.latest()
    latest["power"] = -1

    assert (await store.latest())["power"] == 100.0


@pytest.mark.asyncio
async def test_query_range_filters_and_limits_to_most_recent():
    times = [T0 + timedelta(minutes=i) for i in range(5)]
    store = InMemoryReadingStore(clock=fixed_clock(*times))
    for i in range(5):
        await store.insert({"power": float(i)})

    in_range = await store.query_range(times[1], times[3])
    limited = await store.query_range(times[0], times[4], limit=2)

    assert [r["power"] for r in in_range] == [1.0, 2.0, 3.0]
    assert [r["power"] for r in limited] == [3.0, 4.0]
