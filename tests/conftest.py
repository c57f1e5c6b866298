"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Dict, List
from unittest.mock import AsyncMock

from trade_paginator.config.settings import PaginationConfig
from trade_paginator.paginator import Paginator


@pytest.fixture
def fast_config() -> PaginationConfig:
    """Pagination config with small delays."""
    return PaginationConfig(
        max_retries=2,
        retry_delay_ms=10,
        request_timeout_ms=10,
        throttle_ms=20
    )


@pytest.fixture
def mock_transport():
    """Transport whose perform_request is an AsyncMock."""
    transport = AsyncMock()
    transport.perform_request = AsyncMock(return_value=[])
    return transport


@pytest.fixture
def mock_sleep():
    """Sleep replacement that returns immediately and records delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def paginator(mock_transport, fast_config, mock_sleep) -> Paginator:
    return Paginator(mock_transport, fast_config, sleep=mock_sleep)


@pytest.fixture
def sample_trades() -> List[Dict[str, Any]]:
    """Two consecutive trades as returned by the trades endpoint."""
    return [
        {
            'tid': 8191061,
            'date': 1611853484,
            'type': 'buy',
            'price': 174799.8998,
            'amount': 0.00932356
        },
        {
            'tid': 8191062,
            'date': 1611853489,
            'type': 'sell',
            'price': 174700.10001,
            'amount': 0.00555123
        },
    ]
