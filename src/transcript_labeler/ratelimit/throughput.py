"""
Global throughput limiter for remote model calls.

Every remote call in the process waits here before it starts. At most one call
start is admitted per interval, across all callers and all batches.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

import structlog

from transcript_labeler.monitoring.metrics import rate_limiter_wait_seconds


logger = structlog.get_logger(__name__)


class IntervalRateLimiter:
    """
    FIFO limiter admitting one call start per fixed interval.

    Each ``acquire`` reserves the next free start slot and then sleeps until
    that slot. Reading and advancing the slot happens with no ``await`` in
    between, so on a single event loop two waiters can never claim the same
    slot, and slots are handed out in the order ``acquire`` was called.

    Usage:
        limiter = IntervalRateLimiter(interval_seconds=1.0)
        async with limiter:
            response = await client.generate(request)
    """

    def __init__(
        self,
        interval_seconds: float = 1.0,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Initialize limiter.

        Args:
            interval_seconds: Minimum spacing between two call starts
            clock: Monotonic time source (defaults to time.monotonic)
            sleep: Coroutine used to wait for a slot (defaults to asyncio.sleep)
        """
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")

        self.interval_seconds = interval_seconds
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep
        self._next_slot: Optional[float] = None
        self._admitted = 0

    @property
    def admitted(self) -> int:
        """Number of call starts admitted so far."""
        return self._admitted

    def _reserve_slot(self) -> tuple[float, float]:
        now = self._clock()
        slot = now if self._next_slot is None else max(now, self._next_slot)
        self._next_slot = slot + self.interval_seconds
        self._admitted += 1
        return now, slot

    async def acquire(self) -> float:
        """
        Wait for this caller's start slot.

        Returns:
            Seconds spent waiting
        """
        now, slot = self._reserve_slot()
        delay = slot - now
        if delay > 0:
            logger.debug("Waiting for throughput slot", delay_seconds=round(delay, 3))
            await self._sleep(delay)
        rate_limiter_wait_seconds.observe(max(delay, 0.0))
        return max(delay, 0.0)

    async def __aenter__(self) -> "IntervalRateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(interval_seconds={self.interval_seconds})"
