# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Periodic tick task for the garage door simulator."""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Ticker:
    """Calls a tick callback at a fixed interval while there is work to do.

    The callback returns True while motion remains. As soon as it returns
    False the task finishes on its own, so an idle simulation has no pending
    wakeups. The next state-changing command calls start() again.
    """

    def __init__(self, interval: float, callback: Callable[[], bool]):
        self.interval = interval
        self._callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        """Whether a tick task is scheduled."""
        return self._task is not None and not self._task.done()

    def start(self):
        """Start ticking if not already running. Needs a running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._tick_loop())
        logger.debug(f"Ticker started ({self.interval * 1000:g}ms)")

    def cancel(self):
        """Cancel the tick task without waiting.

        The task is cancelled at its pending sleep, so no further tick runs
        once this returns.
        """
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("Ticker cancelled")
        self._task = None

    async def stop(self):
        """Cancel the tick task and wait for it to finish."""
        task = self._task
        self.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _tick_loop(self):
        """Background task that ticks until the callback reports idle."""
        while True:
            try:
                await asyncio.sleep(self.interval)
                if not self._callback():
                    logger.debug("Ticker idle, stopping")
                    break
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in tick: {e}")
                break

        if self._task is asyncio.current_task():
            self._task = None
