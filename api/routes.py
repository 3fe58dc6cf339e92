"""
Routers for device ingestion and dashboard reads.
All reads and writes go through the ReadingStore on app.state.
"""
import json
import logging
from datetime import datetime, time, timedelta, timezone
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from api.errors import NotFoundError, StorageError, ValidationError
from api.translation import reshape_latest, reshape_live, to_store_record
from api.validator import validate_reading
from storage.base import Record, ReadingStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
root_router = APIRouter()

HISTORY_WINDOW = timedelta(hours=24)
SEVEN_DAY_WINDOW = 7


class MessageResponse(BaseModel):
    """Acknowledgement returned by the ingestion endpoint."""

    message: str = Field(..., description="Status message")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_store(request: Request) -> ReadingStore:
    """Dependency returning the store configured at app creation."""
    return request.app.state.store


def get_history_limit(request: Request) -> int:
    return request.app.state.history_limit


Store = Annotated[ReadingStore, Depends(get_store)]


async def _read_latest(store: ReadingStore) -> Record:
    try:
        return await store.latest()
    except StoreError as e:
        if e.is_no_rows:
            raise NotFoundError() from e
        logger.error(f"Store: Fetching latest reading failed: {e.message}")
        raise StorageError("Error fetching data") from e


@root_router.get("/", response_class=PlainTextResponse)
async def index() -> str:
    return "API Running"


@router.post("/esp32data", response_model=MessageResponse)
@router.post("/energy", response_model=MessageResponse)
async def receive_reading(request: Request, store: Store) -> MessageResponse:
    """
    Ingest one reading from the sensor node (or the simulator).

    No retry on store failure: the device sends a fresh reading next cycle,
    so a failed write is a dropped sample.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Request body must be valid JSON") from e

    reading = validate_reading(payload)

    try:
        stored = await store.insert(to_store_record(reading))
    except StoreError as e:
        logger.error(f"Store: Saving reading failed: {e.message} (code={e.code})")
        raise StorageError("Error saving reading") from e

    logger.info(
        f"Ingest: Saved reading {stored.get('id')} "
        f"({reading.power} W, {reading.energy_kwh} kWh)"
    )
    return MessageResponse(message="Data received and saved successfully")


@router.get("/esp32data")
async def get_latest_reading(store: Store) -> dict[str, Any]:
    """Most recent reading, reshaped to client field names."""
    record = await _read_latest(store)
    return reshape_latest(record)


@router.get("/data/live")
async def get_live(store: Store) -> dict[str, Any]:
    record = await _read_latest(store)
    return reshape_live(record)


@router.get("/data/history")
async def get_history(
    store: Store,
    limit: Annotated[int, Depends(get_history_limit)],
) -> list[dict[str, Any]]:
    """Most recent readings of the last 24 hours, oldest first."""
    end = utc_now()
    try:
        records = await store.query_range(end - HISTORY_WINDOW, end, limit=limit)
    except StoreError as e:
        logger.error(f"Store: History query failed: {e.message}")
        raise StorageError("Error fetching history") from e
    return [reshape_live(record) for record in records]


@router.get("/data/history/7day")
async def get_seven_day_history(store: Store) -> list[dict[str, Any]]:
    """
    Last reading of each of the last 7 UTC days, oldest first.

    Days without data are left out.
    """
    today = utc_now().date()
    items = []
    try:
        for days_ago in range(SEVEN_DAY_WINDOW - 1, -1, -1):
            day_start = datetime.combine(
                today - timedelta(days=days_ago), time.min, tzinfo=timezone.utc
            )
            day_end = day_start + timedelta(days=1) - timedelta(microseconds=1)
            records = await store.query_range(day_start, day_end, limit=1)
            items.extend(reshape_live(record) for record in records)
    except StoreError as e:
        logger.error(f"Store: 7-day history query failed: {e.message}")
        raise StorageError("Error fetching 7-day history") from e
    return items
