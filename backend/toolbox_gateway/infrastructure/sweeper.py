"""Periodic Sweeper: runs a cleanup callable on a fixed interval inside the event loop.

Invariants:
    - Nothing runs until start(); stop() cancels and awaits the task
    - start() twice is a no-op while running
    - A failing sweep is logged and the loop keeps going
"""

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class PeriodicSweeper:
    def __init__(self, sweep: Callable[[], int], interval_seconds: float, name: str = "sweep"):
        self._sweep = sweep
        self.interval_seconds = interval_seconds
        self.name = name
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=self.name)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def run_once(self) -> int:
        evicted = self._sweep()
        if evicted:
            logger.info(
                "%s evicted %d entries", self.name, evicted,
                extra={"event": "sweep", "evicted": evicted},
            )
        return evicted

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.run_once()
            except Exception as exc:
                logger.error(f"{self.name} failed: {exc}", exc_info=True)
