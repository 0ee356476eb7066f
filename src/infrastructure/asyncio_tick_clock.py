"""Asyncio implementation of the elapsed-time clock."""

import asyncio
import logging
from typing import Optional

from ..domain.interfaces.elapsed_clock import ElapsedClock

logger = logging.getLogger(__name__)


class AsyncioTickClock(ElapsedClock):
    """
    Counts elapsed seconds with a repeating asyncio task.

    Each tick adds exactly one second regardless of how late the event loop
    wakes the task, so the counter can lag wall-clock time slightly. Arming
    the clock requires a running event loop.
    """

    def __init__(self, tick_interval: float = 1.0):
        self.tick_interval = tick_interval
        self._elapsed = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())
        logger.debug("Elapsed clock armed")

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.debug(f"Elapsed clock disarmed at {self._elapsed}s")

    def reset(self, seconds: int = 0) -> None:
        self._elapsed = max(0, int(seconds))

    def tick(self) -> None:
        """Advance the counter by one second."""
        self._elapsed += 1

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.tick_interval)
                self.tick()
        except asyncio.CancelledError:
            logger.debug("Elapsed clock task cancelled")
            raise
