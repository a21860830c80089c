"""Bounded retry loop with a fixed sleep between attempts."""

import asyncio
import inspect
from typing import Any, Callable, Optional, Tuple, Type

from loguru import logger

DEFAULT_RETRIES = 3
DEFAULT_DELAY_S = 1.0


async def retry_async(
    operation: Callable[[], Any],
    retries: int = DEFAULT_RETRIES,
    delay_s: float = DEFAULT_DELAY_S,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    on_retry: Optional[Callable[[int, BaseException], None]] = None,
) -> Any:
    """
    Run ``operation`` and retry it on failure.

    The operation is attempted once, then retried up to ``retries`` more times
    with ``delay_s`` seconds of sleep before each retry. The last error is
    re-raised once attempts are exhausted.

    Args:
        operation: Zero-argument callable; may return a value or an awaitable
        retries: Number of retries after the first attempt
        delay_s: Fixed sleep between attempts
        retry_on: Exception types that trigger a retry (others propagate at once)
        on_retry: Called with (retry number, error) before each sleep

    Returns:
        Whatever the operation returns on its first successful attempt
    """
    attempt = 0
    while True:
        try:
            result = operation()
            if inspect.isawaitable(result):
                result = await result
            return result
        except retry_on as e:
            if attempt >= retries:
                raise
            attempt += 1
            logger.debug(f"Attempt {attempt} failed ({e!r}); retrying in {delay_s}s")
            if on_retry is not None:
                on_retry(attempt, e)
            await asyncio.sleep(delay_s)
