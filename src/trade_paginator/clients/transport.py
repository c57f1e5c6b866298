"""HTTP transport: one GET request with a bounded timeout."""

import asyncio
import aiohttp
import logging
from typing import Any, Optional, Protocol

from ..config.settings import TransportConfig
from ..exceptions import NetworkError, RequestTimeoutError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can fetch and decode one URL."""

    async def perform_request(self, url: str, timeout_ms: int) -> Any:
        ...


class HTTPTransport:
    """aiohttp-backed transport. No retries, no interpretation of the body."""

    def __init__(self, config: Optional[TransportConfig] = None):
        self.config = config or TransportConfig()
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self.session = aiohttp.ClientSession(
            headers={
                'User-Agent': self.config.user_agent,
                'Accept': 'application/json',
            },
            connector=aiohttp.TCPConnector(limit=10, limit_per_host=2)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None

    async def perform_request(self, url: str, timeout_ms: int) -> Any:
        """
        GET ``url`` and return the decoded JSON body.

        Raises:
            RequestTimeoutError: no response within ``timeout_ms``
            NetworkError: connection failure, non-2xx status or undecodable body
        """
        if not self.session:
            raise RuntimeError("Transport not initialized. Use async context manager.")

        # aiohttp treats a zero total as "no timeout"
        if timeout_ms <= 0:
            raise RequestTimeoutError(f"timeout after {timeout_ms}ms for {url}", url=url)

        timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000.0)
        logger.debug(f"GET {url} (timeout={timeout_ms}ms)")

        try:
            async with self.session.get(url, timeout=timeout) as response:
                response.raise_for_status()
                return await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(f"timeout after {timeout_ms}ms for {url}", url=url) from e
        except aiohttp.ClientResponseError as e:
            raise NetworkError(f"HTTP {e.status} {e.message} for {url}", url=url, status=e.status) from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"request to {url} failed: {e}", url=url) from e
        except ValueError as e:
            raise NetworkError(f"invalid JSON body from {url}: {e}", url=url) from e
