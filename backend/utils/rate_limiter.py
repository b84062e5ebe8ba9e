import asyncio
import time
from typing import Dict

class RateLimiter:
    """Spaces calls to one upstream service at least 1/calls_per_second apart."""

    def __init__(self, calls_per_second: float):
        self.calls_per_second = calls_per_second
        self.min_interval = 1.0 / calls_per_second if calls_per_second > 0 else 0.0
        self.last_call = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self):
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self.last_call

            if elapsed < self.min_interval:
                await asyncio.sleep(self.min_interval - elapsed)

            self.last_call = time.monotonic()


_rate_limiters: Dict[str, RateLimiter] = {}

def get_rate_limiter(api_name: str, calls_per_second: float = 10.0) -> RateLimiter:
    if api_name not in _rate_limiters:
        _rate_limiters[api_name] = RateLimiter(calls_per_second)
    return _rate_limiters[api_name]

def reset_rate_limiters():
    _rate_limiters.clear()
