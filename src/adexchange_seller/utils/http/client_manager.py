"""HTTP client manager with connection pooling and lifecycle management.

This module provides a singleton manager that lazily creates, shares and
closes the one ``httpx.AsyncClient`` used by services that were not
given a client of their own. The pooled client is the only resource
concurrent calls share; credentials and per-call timeouts are applied
per request, so one pool serves every call.
"""

import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class HTTPClientManager:
    """Manages the shared HTTP client and its connection pool."""

    _instance: Optional["HTTPClientManager"] = None
    _lock = asyncio.Lock()

    def __new__(cls):
        """Ensure singleton pattern - only one instance exists.

        :return: The single instance of HTTPClientManager
        :rtype: HTTPClientManager
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize default timeouts and limits."""
        if not hasattr(self, "_initialized"):
            self._client: Optional[httpx.AsyncClient] = None
            self._default_timeout = httpx.Timeout(
                connect=5.0, read=30.0, write=10.0, pool=5.0
            )
            self._default_limits = httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0,
            )
            self._initialized = True

    async def get_client(self) -> httpx.AsyncClient:
        """Get the shared client, creating it if missing or closed.

        :return: Pooled HTTP client
        :rtype: httpx.AsyncClient
        """
        client = self._client
        if client is None or client.is_closed:
            async with self._lock:
                client = self._client
                if client is None or client.is_closed:
                    client = httpx.AsyncClient(
                        timeout=self._default_timeout,
                        limits=self._default_limits,
                        follow_redirects=True,
                    )
                    self._client = client
                    logger.debug("Created shared HTTP client")
        return client

    async def close_all(self) -> None:
        """Close the shared client, if one was created."""
        client, self._client = self._client, None
        if client is None or client.is_closed:
            logger.debug("No HTTP client to close")
            return
        try:
            await client.aclose()
            logger.debug("Closed shared HTTP client")
        except (httpx.HTTPError, RuntimeError) as e:
            logger.warning("Error closing shared HTTP client: %s", e)


http_client_manager = HTTPClientManager()


async def get_http_client() -> httpx.AsyncClient:
    """Get the pooled HTTP client from the global manager.

    :return: Shared HTTP client instance
    :rtype: httpx.AsyncClient
    """
    return await http_client_manager.get_client()
