"""Cursor-driven paginator with fixed-delay retries and page throttling."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional

from .clients.transport import Transport
from .config.settings import PaginationConfig
from .exceptions import (
    MalformedPageError,
    NetworkError,
    PaginationCancelledError,
    PaginationError,
)
from .utils.logging import log_with_context
from .utils.retry import SleepFn, fixed_delay_retry

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Page = List[Record]

# Upstream marks "no more trades" with an id of 0 on the trailing record
SENTINEL_TID = 0


@dataclass(frozen=True)
class PageRequest:
    """One page request: ``<base_url>?tid=<cursor>``."""
    base_url: str
    cursor: int

    def __post_init__(self):
        if isinstance(self.cursor, bool) or not isinstance(self.cursor, int):
            raise ValueError(f"cursor must be an integer, got {self.cursor!r}")
        if self.cursor < 0:
            raise ValueError(f"cursor must be non-negative, got {self.cursor}")

    @property
    def url(self) -> str:
        return f"{self.base_url}?tid={self.cursor}"


def next_cursor(page: Page) -> Optional[int]:
    """
    Return the cursor for the page after ``page``, or None when pagination
    should stop (empty page, or trailing record carrying the sentinel id).
    """
    if not page:
        return None

    last = page[-1]
    tid = last.get('tid') if isinstance(last, dict) else None
    if isinstance(tid, bool) or not isinstance(tid, int) or tid < 0:
        raise MalformedPageError(f"last record has no valid 'tid': {last!r}")

    if tid == SENTINEL_TID:
        return None
    return tid


class Paginator:
    """
    Walks a trades endpoint page by page.

    Only one request is outstanding at a time. Retry and throttle delays go
    through the injected ``sleep`` coroutine and are interrupted by
    ``cancel()``.
    """

    def __init__(
        self,
        transport: Transport,
        config: Optional[PaginationConfig] = None,
        sleep: Optional[SleepFn] = None,
    ):
        self.transport = transport
        self.config = config or PaginationConfig()
        self._sleep = sleep or asyncio.sleep
        self._cancel_event = asyncio.Event()

        self.stats = {
            'requests_made': 0,
            'failed_attempts': 0,
            'pages_fetched': 0,
            'records_fetched': 0,
        }

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Stop pagination at the next fetch or during the current delay."""
        if not self._cancel_event.is_set():
            logger.info("Pagination cancellation requested")
        self._cancel_event.set()

    def get_stats(self) -> Dict[str, int]:
        return dict(self.stats)

    def _raise_if_cancelled(self):
        if self._cancel_event.is_set():
            raise PaginationCancelledError("pagination cancelled")

    async def _pause(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless cancelled first."""
        self._raise_if_cancelled()

        sleep_task = asyncio.ensure_future(self._sleep(seconds))
        cancel_task = asyncio.ensure_future(self._cancel_event.wait())
        try:
            await asyncio.wait(
                {sleep_task, cancel_task},
                return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            pending = [task for task in (sleep_task, cancel_task) if not task.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        self._raise_if_cancelled()
        # surface errors raised by the sleep itself
        sleep_task.result()

    async def fetch_page_with_retry(self, base_url: str, cursor: int) -> Page:
        """
        Fetch one page, retrying network failures.

        Makes at most ``max_retries`` attempts with ``retry_delay_ms``
        between them.

        Raises:
            PaginationError: every attempt failed; the last ``NetworkError``
                is the cause
            MalformedPageError: the body is not a list
            PaginationCancelledError: ``cancel()`` was called
        """
        request = PageRequest(base_url=base_url, cursor=cursor)
        url = request.url
        self._raise_if_cancelled()

        async def _attempt(attempt: int):
            self._raise_if_cancelled()
            self.stats['requests_made'] += 1
            try:
                return await self.transport.perform_request(url, self.config.request_timeout_ms)
            except NetworkError:
                self.stats['failed_attempts'] += 1
                raise

        try:
            body = await fixed_delay_retry(
                _attempt,
                max_attempts=self.config.max_retries,
                delay_seconds=self.config.retry_delay_seconds,
                sleep=self._pause,
                exceptions=(NetworkError,),
                description=f"GET {url}",
                context={'cursor': cursor, 'url': url},
            )
        except NetworkError as e:
            raise PaginationError(
                f"giving up on {url} after {self.config.max_retries} attempts: {e}",
                cause=e,
                url=url,
                attempts=self.config.max_retries
            ) from e

        if not isinstance(body, list):
            raise MalformedPageError(
                f"expected a list of trades from {url}, got {type(body).__name__}",
                url=url
            )

        logger.debug(f"Fetched {len(body)} records from {url}")
        return body

    async def paginate(self, base_url: str, start_cursor: int) -> AsyncIterator[Page]:
        """
        Yield pages starting at ``start_cursor`` until an empty page.

        The cursor for each subsequent request is the ``tid`` of the last
        record of the page just yielded. ``throttle_ms`` is slept after the
        consumer resumes, before the next fetch.
        """
        cursor = start_cursor
        logger.info(f"Starting pagination of {base_url} at tid={cursor}")

        while True:
            page = await self.fetch_page_with_retry(base_url, cursor)
            following = next_cursor(page)

            if following is None:
                if page:
                    log_with_context(
                        logger, logging.WARNING,
                        f"Page at tid={cursor} ends with sentinel tid={SENTINEL_TID}; "
                        f"dropping {len(page)} records and stopping",
                        cursor=cursor, url=base_url, dropped_records=len(page)
                    )
                logger.info(
                    f"Pagination of {base_url} finished: "
                    f"{self.stats['pages_fetched']} pages, {self.stats['records_fetched']} records"
                )
                return

            self.stats['pages_fetched'] += 1
            self.stats['records_fetched'] += len(page)

            yield page

            await self._pause(self.config.throttle_seconds)
            cursor = following
