"""In-process reading store - used for development and tests"""
import logging
from datetime import datetime, timedelta, timezone

from storage.base import NO_ROWS_CODE, Record, StoreError

logger = logging.getLogger(__name__)


def _parse_created_at(record: Record) -> datetime:
    return datetime.fromisoformat(record["created_at"])


class InMemoryReadingStore:
    """
    Append-only list of readings kept in process memory.

    Timestamps are assigned by the store in UTC. Two inserts within the same
    clock tick are separated by one microsecond so that created_at stays
    strictly increasing.
    """

    def __init__(self, clock=None):
        """
        Args:
            clock: Callable returning the current aware datetime
                   (default: datetime.now(timezone.utc)). Injected by tests.
        """
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._records: list[Record] = []
        self._last_created_at: datetime | None = None
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    async def insert(self, record: Record) -> Record:
        created_at = self._clock()
        if self._last_created_at is not None and created_at <= self._last_created_at:
            created_at = self._last_created_at + timedelta(microseconds=1)

        stored = dict(record)
        stored["id"] = self._next_id
        stored["created_at"] = created_at.isoformat()

        self._records.append(stored)
        self._last_created_at = created_at
        self._next_id += 1

        logger.debug(f"Memory store: Inserted reading {stored['id']}")
        return dict(stored)

    async def latest(self) -> Record:
        if not self._records:
            raise StoreError("No rows in energy_readings", code=NO_ROWS_CODE)
        return dict(self._records[-1])

    async def query_range(
        self,
        start: datetime,
        end: datetime,
        limit: int | None = None
    ) -> list[Record]:
        # Records are appended in created_at order, no sort needed
        matches = [
            dict(record) for record in self._records
            if start <= _parse_created_at(record) <= end
        ]
        if limit is not None:
            matches = matches[-limit:] if limit > 0 else []
        return matches
