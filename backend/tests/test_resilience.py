import pytest
from unittest.mock import AsyncMock, patch

from exceptions import CircuitBreakerOpenException, LLMException
from utils.circuit_breaker import CircuitBreaker, CircuitState, circuit_breaker
from utils.rate_limiter import RateLimiter, get_rate_limiter, reset_rate_limiters
from utils.retry import async_retry


@pytest.mark.asyncio
class TestAsyncRetry:
    """Tests for the async_retry decorator."""

    async def test_succeeds_after_failures(self):
        calls = AsyncMock(side_effect=[ValueError("a"), ValueError("b"), "ok"])

        @async_retry(max_attempts=3, base_delay=0, exceptions=(ValueError,))
        async def flaky():
            return await calls()

        assert await flaky() == "ok"
        assert calls.call_count == 3

    async def test_gives_up(self):
        calls = AsyncMock(side_effect=ValueError("always"))

        @async_retry(max_attempts=2, base_delay=0, exceptions=(ValueError,))
        async def broken():
            return await calls()

        with pytest.raises(ValueError):
            await broken()
        assert calls.call_count == 2

    async def test_unlisted_exception_not_retried(self):
        calls = AsyncMock(side_effect=KeyError("x"))

        @async_retry(max_attempts=3, base_delay=0, exceptions=(ValueError,))
        async def broken():
            return await calls()

        with pytest.raises(KeyError):
            await broken()
        assert calls.call_count == 1

    async def test_retry_if_veto(self):
        calls = AsyncMock(side_effect=LLMException("bad key", recoverable=False))

        @async_retry(max_attempts=3, base_delay=0, exceptions=(LLMException,),
                     retry_if=lambda e: e.details["recoverable"])
        async def broken():
            return await calls()

        with pytest.raises(LLMException):
            await broken()
        assert calls.call_count == 1

    async def test_backoff_is_capped(self):
        calls = AsyncMock(side_effect=[ValueError(), ValueError(), ValueError(), "ok"])

        @async_retry(max_attempts=4, base_delay=1.0, max_delay=3.0, exceptions=(ValueError,))
        async def flaky():
            return await calls()

        with patch("utils.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            assert await flaky() == "ok"

        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0, 3.0]


@pytest.mark.asyncio
class TestCircuitBreaker:
    """Tests for CircuitBreaker."""

    async def test_opens_after_threshold(self):
        breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=60, expected_exception=ValueError, name="test")
        failing = AsyncMock(side_effect=ValueError("down"))

        for _ in range(2):
            with pytest.raises(ValueError):
                await breaker.call(failing)

        assert breaker.state is CircuitState.OPEN
        with pytest.raises(CircuitBreakerOpenException) as exc_info:
            await breaker.call(failing)
        assert exc_info.value.details == {"service": "test", "failure_count": 2}
        assert failing.call_count == 2

    async def test_success_resets_count(self):
        breaker = CircuitBreaker(failure_threshold=2, expected_exception=ValueError)
        func = AsyncMock(side_effect=[ValueError(), "ok", ValueError()])

        with pytest.raises(ValueError):
            await breaker.call(func)
        assert await breaker.call(func) == "ok"
        with pytest.raises(ValueError):
            await breaker.call(func)

        assert breaker.state is CircuitState.CLOSED
        assert breaker.failure_count == 1

    async def test_unexpected_exception_not_counted(self):
        breaker = CircuitBreaker(failure_threshold=1, expected_exception=ValueError)
        with pytest.raises(KeyError):
            await breaker.call(AsyncMock(side_effect=KeyError()))
        assert breaker.state is CircuitState.CLOSED

    async def test_half_open_probe(self):
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=0, expected_exception=ValueError)
        with pytest.raises(ValueError):
            await breaker.call(AsyncMock(side_effect=ValueError()))
        assert breaker.state is CircuitState.OPEN

        assert await breaker.call(AsyncMock(return_value="ok")) == "ok"
        assert breaker.state is CircuitState.CLOSED

    async def test_half_open_failure_reopens(self):
        breaker = CircuitBreaker(failure_threshold=3, recovery_timeout=0, expected_exception=ValueError)
        breaker._state = CircuitState.OPEN
        breaker._opened_at = 0.0

        with pytest.raises(ValueError):
            await breaker.call(AsyncMock(side_effect=ValueError()))
        assert breaker.state is CircuitState.OPEN

    async def test_decorator_exposes_breaker(self):
        @circuit_breaker(failure_threshold=1, expected_exception=ValueError, name="decorated")
        async def broken():
            raise ValueError("down")

        with pytest.raises(ValueError):
            await broken()
        with pytest.raises(CircuitBreakerOpenException):
            await broken()

        broken.circuit_breaker.reset()
        assert broken.circuit_breaker.state is CircuitState.CLOSED


@pytest.mark.asyncio
class TestRateLimiter:
    """Tests for RateLimiter."""

    async def test_spaces_calls(self):
        limiter = RateLimiter(calls_per_second=2)
        with patch("utils.rate_limiter.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            await limiter.acquire()
            await limiter.acquire()

        assert mock_sleep.call_count == 1
        assert 0 < mock_sleep.call_args[0][0] <= 0.5

    async def test_unlimited(self):
        limiter = RateLimiter(calls_per_second=0)
        with patch("utils.rate_limiter.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            await limiter.acquire()
            await limiter.acquire()
        mock_sleep.assert_not_called()

    async def test_registry(self):
        reset_rate_limiters()
        limiter = get_rate_limiter("TEST", 5)
        assert get_rate_limiter("TEST", 1) is limiter
        assert limiter.calls_per_second == 5
        reset_rate_limiters()
        assert get_rate_limiter("TEST", 1) is not limiter
