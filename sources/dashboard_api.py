"""Dashboard API ingress module - fetches live and historical readings via HTTP"""
import logging
from typing import Any

import httpx

from sources.base import AuthExpiredError, FetchError, NetworkError

logger = logging.getLogger(__name__)


class DashboardApiClient:
    """
    HTTP client for the backend's dashboard endpoints.

    Uses one keep-alive client for all polls. Every failure is raised as a
    FetchError subclass so callers can classify it:

    * NetworkError: no response at all (connection refused, DNS, reset)
    * AuthExpiredError: HTTP 401
    * FetchError: timeout, any other HTTP error, or a non-JSON body
    """

    def __init__(self, base_url: str, token: str | None = None, timeout: float = 5.0):
        """
        Initialize dashboard client.

        Args:
            base_url: API root (e.g., "http://localhost:5000/api")
            token: Session token sent as a bearer header, if any
            timeout: HTTP request timeout in seconds (default: 5.0)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.client = None

    async def connect(self) -> None:
        """Create the persistent HTTP client."""
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            limits=httpx.Limits(max_keepalive_connections=2)
        )
        logger.info(f"Dashboard API: Using {self.base_url}")

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("Dashboard API: Client closed")

    async def _get(self, path: str) -> Any:
        if self.client is None:
            raise FetchError("Dashboard API client used before connect()")

        try:
            response = await self.client.get(path)
        except httpx.TimeoutException as e:
            raise FetchError(f"Request to {path} timed out") from e
        except httpx.TransportError as e:
            raise NetworkError(f"Network error on {path}: {e}") from e

        if response.status_code == 401:
            raise AuthExpiredError("Session expired", status_code=401)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"HTTP {e.response.status_code} on {path}",
                status_code=e.response.status_code
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {path}", status_code=response.status_code) from e

    async def get_live(self) -> dict[str, Any]:
        return await self._get("/data/live")

    async def get_history(self) -> list[dict[str, Any]]:
        return await self._get("/data/history")

    async def get_seven_day_history(self) -> list[dict[str, Any]]:
        return await self._get("/data/history/7day")

    async def get_latest_reading(self) -> dict[str, Any]:
        return await self._get("/esp32data")
