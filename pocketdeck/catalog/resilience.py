"""
Deadline and retry combinators for calls to the card database.

The two are independent: wrap an operation in with_timeout, then hand
that to retry_with_backoff so every attempt gets its own deadline.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
Sleep = Callable[[float], Awaitable[None]]


async def with_timeout(operation: Operation[T], seconds: float) -> T:
    """
    Await an operation with a deadline.

    Args:
        operation: Zero-argument callable returning an awaitable
        seconds: Deadline in seconds

    Returns:
        The operation's result

    Raises:
        TimeoutError: If the deadline passes first. The pending operation is
            cancelled and its eventual result is discarded.
    """
    return await asyncio.wait_for(operation(), timeout=seconds)


async def retry_with_backoff(
    operation: Operation[T],
    max_attempts: int = 3,
    initial_delay: float = 2.0,
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Invoke an operation, retrying failures with exponential backoff.

    The delay doubles after each failed attempt: with the defaults the
    operation runs at t=0, t=2s and t=6s.

    Args:
        operation: Zero-argument callable returning an awaitable
        max_attempts: Total number of attempts, including the first
        initial_delay: Seconds to wait before the first retry
        retry_on: Exception types considered retryable. Anything else
            propagates immediately.
        sleep: Awaitable sleep function (injectable for tests)

    Returns:
        The first successful result

    Raises:
        ValueError: If max_attempts is less than 1
        Exception: The last failure, unchanged, once attempts are exhausted
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    attempt = 1
    while True:
        try:
            return await operation()
        except retry_on as e:
            if attempt >= max_attempts:
                raise
            delay = initial_delay * 2 ** (attempt - 1)
            logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.1fs",
                attempt,
                max_attempts,
                e.__class__.__name__,
                delay,
            )
            await sleep(delay)
            attempt += 1
