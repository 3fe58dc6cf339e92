"""Ingestion egress module - POSTs readings to the backend ingestion endpoint"""
import asyncio
import logging

import requests

from sources.base import Reading

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5


def _perform_http_request(url: str, payload: dict, timeout: float) -> bool:
    """
    Executes the HTTP POST to the ingestion endpoint.
    Is ran in a thread to not block the main loop.

    Returns True when the backend acknowledged the reading.
    """
    try:
        r = requests.post(url, json=payload, timeout=timeout)
        r.raise_for_status()
    except requests.ConnectionError:
        logger.error(f"Ingestion: Backend not running at {url}! Start it with: python server.py")
        return False
    except requests.HTTPError as e:
        logger.warning(f"Ingestion: Backend rejected reading: HTTP {e.response.status_code} {e.response.text}")
        return False
    except requests.RequestException as e:
        logger.warning(f"Ingestion: Failed HTTP POST {e}")
        return False

    logger.info(f"Ingestion: Response {r.status_code} - {r.text}")
    return True


async def push_reading(url: str, reading: Reading, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """
    Sends one reading to the backend, offloading the blocking call to a thread.

    A failed push is not retried or queued; the next reading supersedes it.

    Args:
        url: Ingestion endpoint (e.g. http://localhost:5000/api/energy)
        reading: Reading to send
        timeout: Request timeout in seconds
    """
    return await asyncio.to_thread(_perform_http_request, url, reading.to_payload(), timeout)
