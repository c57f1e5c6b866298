"""Retry utilities with a fixed delay between attempts."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from .logging import log_with_context

logger = logging.getLogger(__name__)

T = TypeVar('T')

SleepFn = Callable[[float], Awaitable[None]]


async def fixed_delay_retry(
    func: Callable[[int], Awaitable[T]],
    max_attempts: int,
    delay_seconds: float,
    sleep: Optional[SleepFn] = None,
    exceptions: tuple = (Exception,),
    description: str = "request",
    context: Optional[Dict[str, Any]] = None,
) -> T:
    """
    Execute an async function, retrying with a fixed delay on failure.

    Attempts are numbered from 1 and ``func`` receives the current attempt
    number. A failure on attempt ``max_attempts`` is final, so at most
    ``max_attempts`` calls and ``max_attempts - 1`` sleeps happen.

    Args:
        func: Async function taking the attempt number
        max_attempts: Total number of attempts allowed (>= 1)
        delay_seconds: Delay between attempts
        sleep: Delay coroutine, ``asyncio.sleep`` when omitted
        exceptions: Tuple of exceptions to catch and retry on
        description: Label used in log messages
        context: Extra fields attached to every retry log record

    Returns:
        Result of the first successful call

    Raises:
        The exception of the last attempt once the budget is exhausted
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    sleep = sleep or asyncio.sleep
    context = context or {}
    attempt = 1

    while True:
        try:
            return await func(attempt)
        except exceptions as e:
            if attempt == max_attempts:
                log_with_context(
                    logger, logging.ERROR,
                    f"[{attempt}] {description} failed, max retries reached: {e}",
                    attempt=attempt, max_attempts=max_attempts,
                    error_type=type(e).__name__, **context
                )
                raise

            log_with_context(
                logger, logging.WARNING,
                f"[{attempt}] {description} failed: {e}. "
                f"Retrying in {delay_seconds * 1000:.0f}ms",
                attempt=attempt, max_attempts=max_attempts,
                error_type=type(e).__name__, **context
            )
            await sleep(delay_seconds)
            attempt += 1
