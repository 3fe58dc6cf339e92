"""Supabase reading store - persists readings in a Postgres table via PostgREST"""
import asyncio
import logging
from datetime import datetime

from postgrest.exceptions import APIError
from supabase import Client, create_client

from storage.base import NO_ROWS_CODE, Record, StoreError

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "energy_readings"


class SupabaseReadingStore:
    """
    Supabase (PostgREST) reading store.

    The supabase client is synchronous, so every query is offloaded to a
    thread to keep the event loop free. Errors from PostgREST keep their
    error code (e.g. PGRST116 for an empty result on .single()).
    """

    def __init__(self, url: str, key: str, table: str = DEFAULT_TABLE):
        """
        Initialize Supabase store.

        Args:
            url: Project URL (e.g., "https://xyz.supabase.co")
            key: API key with insert/select rights on the table
            table: Table holding the readings (default: energy_readings)
        """
        self.url = url
        self.table = table
        self.client: Client = create_client(url, key)
        logger.info(f"Supabase: Using table '{table}' at {url}")

    async def _run(self, query, operation: str):
        try:
            response = await asyncio.to_thread(query.execute)
        except APIError as e:
            raise StoreError(f"Supabase {operation} failed: {e.message}", code=e.code) from e
        except Exception as e:
            raise StoreError(f"Supabase {operation} failed: {e}") from e
        return response.data

    async def insert(self, record: Record) -> Record:
        query = self.client.table(self.table).insert(record)
        rows = await self._run(query, "insert")
        if not rows:
            raise StoreError("Supabase insert returned no row")
        return rows[0]

    async def latest(self) -> Record:
        query = (
            self.client.table(self.table)
            .select("*")
            .order("created_at", desc=True)
            .limit(1)
            .single()
        )
        row = await self._run(query, "latest")
        if not row:
            raise StoreError("No rows in table", code=NO_ROWS_CODE)
        return row

    async def query_range(
        self,
        start: datetime,
        end: datetime,
        limit: int | None = None
    ) -> list[Record]:
        query = (
            self.client.table(self.table)
            .select("*")
            .gte("created_at", start.isoformat())
            .lte("created_at", end.isoformat())
        )
        if limit is None:
            query = query.order("created_at")
            return await self._run(query, "range")

        # Newest first so the limit keeps the most recent rows
        query = query.order("created_at", desc=True).limit(limit)
        rows = await self._run(query, "range")
        return list(reversed(rows))
