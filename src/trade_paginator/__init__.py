"""
Trade Paginator - cursor-driven trade history fetcher.

This package walks a paginated trades endpoint (``<base_url>?tid=<cursor>``)
page by page, retrying transient network failures with a fixed delay and
throttling between pages, until the API returns an empty page.
"""

from .exceptions import (
    TradePaginatorError,
    NetworkError,
    RequestTimeoutError,
    PaginationError,
    MalformedPageError,
    PaginationCancelledError,
)
from .config.settings import PaginationConfig
from .paginator import Paginator, PageRequest, next_cursor

__version__ = "1.0.0"
__author__ = "Trade Paginator Team"

__all__ = [
    "TradePaginatorError",
    "NetworkError",
    "RequestTimeoutError",
    "PaginationError",
    "MalformedPageError",
    "PaginationCancelledError",
    "PaginationConfig",
    "Paginator",
    "PageRequest",
    "next_cursor",
]
