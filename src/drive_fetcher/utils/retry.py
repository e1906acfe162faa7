"""
Caller-side retry helper for transient Drive failures.

DriveApiService never retries on its own. Callers that want retries wrap
single calls, for example a list_page with the same page token:

    page = await retry_transient(service.list_page, token, folder_id, page_token,
                                 operation_name="list folder")
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable

from ..exceptions import TransientNetworkError

logger = logging.getLogger(__name__)


async def retry_transient(
        func: Callable[..., Awaitable[Any]],
        *args,
        max_retries: int = 3,
        base_delay: float = 1.0,
        backoff_factor: float = 2.0,
        max_delay: float = 30.0,
        operation_name: str = "operation",
        **kwargs
) -> Any:
    """
    Await func, retrying with exponential backoff on TransientNetworkError only.

    Any other exception, AuthError included, propagates on its first occurrence.

    Args:
        func: Coroutine function to call.
        *args: Positional arguments for func.
        max_retries: Retries after the first attempt.
        base_delay: Delay before the first retry, in seconds.
        backoff_factor: Multiplier applied to the delay after each retry.
        max_delay: Upper bound for a single delay, before jitter.
        operation_name: Name used in log messages.
        **kwargs: Keyword arguments for func.

    Returns:
        Whatever func returns.
    """
    if max_retries < 0:
        raise ValueError("max_retries must not be negative")

    for attempt in range(max_retries + 1):
        try:
            if attempt > 0:
                logger.info("Retry attempt %d/%d for %s", attempt, max_retries, operation_name)

            result = await func(*args, **kwargs)

            if attempt > 0:
                logger.info("Successfully completed %s after %d retries", operation_name, attempt)
            return result

        except TransientNetworkError as e:
            if attempt == max_retries:
                logger.error("Final retry failed for %s: %s", operation_name, e)
                raise

            delay = min(base_delay * (backoff_factor ** attempt), max_delay)
            # Jitter spreads out retries from concurrent callers
            delay += random.uniform(0.1, 0.3) * delay

            logger.warning("Attempt %d failed for %s: %s. Retrying in %.2fs",
                           attempt + 1, operation_name, e, delay)
            await asyncio.sleep(delay)
