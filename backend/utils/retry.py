import asyncio
from functools import wraps
from typing import Any, Callable, Optional

from config import logger


class RetryConfig:
    MAX_ATTEMPTS = 3
    BASE_DELAY = 0.5
    MAX_DELAY = 5.0
    EXPONENTIAL_BASE = 2


def backoff_delay(
    attempt: int,
    base_delay: float = RetryConfig.BASE_DELAY,
    max_delay: float = RetryConfig.MAX_DELAY,
    exponential_base: float = RetryConfig.EXPONENTIAL_BASE
) -> float:
    """Delay before retry number `attempt + 1` (attempt is zero-based)."""
    return min(base_delay * (exponential_base ** attempt), max_delay)


def async_retry(
    max_attempts: int = RetryConfig.MAX_ATTEMPTS,
    base_delay: float = RetryConfig.BASE_DELAY,
    max_delay: float = RetryConfig.MAX_DELAY,
    exponential_base: float = RetryConfig.EXPONENTIAL_BASE,
    exceptions: tuple = (Exception,),
    retry_if: Optional[Callable[[Exception], bool]] = None
):
    """
    Retry an async callable with exponential backoff.

    Only exceptions listed in `exceptions` are retried, and `retry_if` can
    veto a retry for one of them (e.g. a missing API key).
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if retry_if is not None and not retry_if(e):
                        raise
                    if attempt + 1 >= max_attempts:
                        logger.error("%s failed after %d attempts: %s", func.__name__, max_attempts, e)
                        raise

                    delay = backoff_delay(attempt, base_delay, max_delay, exponential_base)
                    logger.warning(
                        "%s failed (attempt %d/%d), retrying in %.2fs: %s",
                        func.__name__, attempt + 1, max_attempts, delay, e
                    )
                    await asyncio.sleep(delay)
                    attempt += 1

        return wrapper
    return decorator
