"""
Exponential backoff retry for async operations.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    *,
    should_retry: Optional[Callable[[Exception], bool]] = None,
    sleeper: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run an async operation with exponential backoff.

    The operation is attempted up to ``max_retries`` times. Between attempts the
    delay doubles starting at ``initial_delay`` seconds (1s, 2s, 4s, ...), with
    no jitter. The first successful result is returned; once the attempt budget
    is exhausted the last exception is re-raised unchanged.

    The operation MUST be safe to repeat (idempotent or side-effect tolerant):
    a failed attempt may have partially reached the remote side.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt
        max_retries: Total number of attempts (>= 1)
        initial_delay: Delay in seconds before the second attempt
        should_retry: Optional classifier. When it returns False for an
            exception, that exception is raised immediately. Every exception
            is retried when omitted.
        sleeper: Awaitable sleep function (injected in tests)

    Raises:
        ValueError: If max_retries is less than 1
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    for attempt in range(max_retries):
        try:
            return await operation()
        except Exception as exc:
            if should_retry is not None and not should_retry(exc):
                raise
            if attempt == max_retries - 1:
                logger.warning("Giving up after %d attempts: %s", max_retries, exc)
                raise

            delay = initial_delay * (2 ** attempt)
            logger.warning(
                "Attempt %d/%d failed (%s); retrying in %.1fs",
                attempt + 1,
                max_retries,
                exc,
                delay,
            )
            await sleeper(delay)

    # Unreachable: the loop either returns or raises
    raise RuntimeError("retry loop exited without a result")
