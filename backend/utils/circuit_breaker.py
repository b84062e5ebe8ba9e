import asyncio
import time
from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional

from config import logger
from exceptions import CircuitBreakerOpenException


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Stops calling an upstream service after repeated failures.

    After `failure_threshold` consecutive failures the circuit opens and calls
    are rejected with CircuitBreakerOpenException until `recovery_timeout`
    seconds have passed; the next call is then let through as a probe. A
    failed probe reopens the circuit immediately.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        expected_exception: type = Exception,
        name: Optional[str] = None
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception
        self.name = name or "unnamed"
        self._lock = asyncio.Lock()
        self.reset()

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def reset(self):
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at: Optional[float] = None

    async def call(self, func: Callable, *args, **kwargs) -> Any:
        await self._admit()
        try:
            result = await func(*args, **kwargs)
        except self.expected_exception:
            await self._record_failure()
            raise
        await self._record_success()
        return result

    async def _admit(self):
        async with self._lock:
            if self._state is not CircuitState.OPEN:
                return
            if self._opened_at is not None and time.monotonic() - self._opened_at >= self.recovery_timeout:
                logger.info(f"Circuit breaker {self.name}: probing upstream (half-open)")
                self._state = CircuitState.HALF_OPEN
                return
            logger.warning(
                f"Circuit breaker {self.name} is open, rejecting request",
                extra={"circuit_breaker": self.name, "failure_count": self._failure_count}
            )
            raise CircuitBreakerOpenException(self.name, self._failure_count)

    async def _record_success(self):
        async with self._lock:
            if self._state is CircuitState.HALF_OPEN:
                logger.info(f"Circuit breaker {self.name}: upstream recovered, closing circuit")
            self.reset()

    async def _record_failure(self):
        async with self._lock:
            self._failure_count += 1
            probe_failed = self._state is CircuitState.HALF_OPEN
            if probe_failed or self._failure_count >= self.failure_threshold:
                logger.error(
                    f"Circuit breaker {self.name}: opening circuit after {self._failure_count} failures",
                    extra={"circuit_breaker": self.name, "threshold": self.failure_threshold}
                )
                self._state = CircuitState.OPEN
                self._opened_at = time.monotonic()


def circuit_breaker(
    failure_threshold: int = 5,
    recovery_timeout: float = 60.0,
    expected_exception: type = Exception,
    name: Optional[str] = None
):
    """Wrap an async callable in its own CircuitBreaker, exposed as `.circuit_breaker`."""
    def decorator(func: Callable):
        breaker = CircuitBreaker(
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout,
            expected_exception=expected_exception,
            name=name or func.__name__
        )

        @wraps(func)
        async def wrapper(*args, **kwargs):
            return await breaker.call(func, *args, **kwargs)

        wrapper.circuit_breaker = breaker
        return wrapper
    return decorator
