from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional


class IntervalTicker:
    """Fixed-rate trigger: fires at start, start + interval, start + 2*interval, ...

    The first wait() returns immediately. Boundaries are independent of how
    long the caller took between waits; if the caller overran one or more
    boundaries, the next wait() returns at once and the missed boundaries are
    coalesced into that single tick.
    """

    def __init__(
        self,
        interval_s: float,
        clock: Optional[Callable[[], float]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval_s <= 0:
            raise ValueError(f"interval must be positive, got {interval_s}")
        self.interval_s = float(interval_s)
        self._clock = clock
        self._sleep = sleep
        self._next: Optional[float] = None
        self.coalesced = 0

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return asyncio.get_running_loop().time()

    async def wait(self) -> None:
        now = self._now()
        if self._next is None:
            self._next = now + self.interval_s
            return

        delay = self._next - now
        if delay > 0:
            await self._sleep(delay)
            self._next += self.interval_s
            return

        # Overran: fire now, snap to the first boundary still in the future
        missed = int((now - self._next) // self.interval_s)
        self.coalesced += missed
        self._next += (missed + 1) * self.interval_s
