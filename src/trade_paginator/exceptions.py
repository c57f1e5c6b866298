"""Error taxonomy for transport and pagination failures."""

from typing import Optional


class TradePaginatorError(Exception):
    """Base class for all errors raised by this package."""


class NetworkError(TradePaginatorError):
    """A single request failed: connection error, non-2xx status or bad body."""

    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class RequestTimeoutError(NetworkError, TimeoutError):
    """No response was received within the request timeout."""


class PaginationError(TradePaginatorError):
    """
    Fatal error for a pagination sequence.

    Raised once the retry budget for a page is exhausted. The last
    ``NetworkError`` is available both as ``cause`` and as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        url: Optional[str] = None,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.cause = cause
        self.url = url
        self.attempts = attempts


class MalformedPageError(PaginationError):
    """The response body is not a list of records carrying a ``tid``."""


class PaginationCancelledError(PaginationError):
    """Pagination was stopped through ``Paginator.cancel()``."""
