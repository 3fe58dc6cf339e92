"""Base definitions for reading stores - record contract and gateway protocol"""
from datetime import datetime
from typing import Any, Protocol

# PostgREST code for "JSON object requested, multiple (or no) rows returned".
# Every store reports an empty table with this code so callers can tell
# "no data yet" apart from a real failure.
NO_ROWS_CODE = "PGRST116"

# A stored record uses storage naming (energy_kwh) and carries the
# store-assigned id and created_at.
Record = dict[str, Any]


class StoreError(Exception):
    """
    Failure reported by a reading store.

    Attributes:
        message: Human readable cause (logged, never returned to clients).
        code: Store-provided error code, e.g. NO_ROWS_CODE.
    """

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code

    @property
    def is_no_rows(self) -> bool:
        return self.code == NO_ROWS_CODE


class ReadingStore(Protocol):
    """
    Protocol for persistence gateways (in-memory, Supabase, ...).

    Each operation is an atomic single-row (or single-query) operation.
    Implementations raise StoreError on failure.
    """

    async def insert(self, record: Record) -> Record:
        """
        Persist one reading and return it as stored.

        The store assigns `id` and `created_at`; `created_at` strictly
        increases with insertion order.
        """
        ...

    async def latest(self) -> Record:
        """
        Return the most recent reading (created_at descending, limit 1).

        Raises StoreError with code NO_ROWS_CODE when the store is empty.
        """
        ...

    async def query_range(
        self,
        start: datetime,
        end: datetime,
        limit: int | None = None
    ) -> list[Record]:
        """
        Return readings with start <= created_at <= end, oldest first.

        With a limit, only the most recent `limit` readings of the range
        are returned (still oldest first).
        """
        ...
