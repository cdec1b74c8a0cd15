"""Minimum-interval request throttle."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from ..config import RateLimiterConfig

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class RequestThrottle:
    """Keeps successive requests at least ``min_request_interval`` apart.

    The interval runs from the completion of the last successful request to
    the start of the next one. Admission is serialized by a lock, so two
    callers sharing a throttle never both observe a stale timestamp.
    """

    def __init__(
        self,
        config: Optional[RateLimiterConfig] = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config or RateLimiterConfig()
        self._clock = clock
        self._sleep = sleep
        self._last_completed: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def last_completed(self) -> Optional[float]:
        return self._last_completed

    def time_until_ready(self) -> float:
        """Seconds left before the next request may start."""
        if self._last_completed is None:
            return 0.0
        elapsed = self._clock() - self._last_completed
        return max(0.0, self.config.min_request_interval - elapsed)

    async def wait(self) -> None:
        """Sleep out the remainder of the minimum interval, if any."""
        delay = self.time_until_ready()
        if delay > 0:
            logger.debug(f"Throttling request for {delay:.2f}s")
            await self._sleep(delay)

    def mark_completed(self) -> None:
        """Record that a request just completed."""
        self._last_completed = self._clock()

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold the admission lock for one request, after the interval has passed."""
        async with self._lock:
            await self.wait()
            yield
