# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Garage door simulator.

This module contains the GarageSimulator class that couples the interlock
controller to a real-time ticker on the asyncio event loop.
"""

import asyncio
import logging
from typing import Callable, Optional

from .const import BOTTOM_SENSOR_NAME, TOP_SENSOR_NAME
from .controller import GarageController
from .state import GarageSnapshot, MotionConfig, SensorSignals, Viewport
from .ticker import Ticker

logger = logging.getLogger(__name__)

FrameListener = Callable[[GarageSnapshot], None]


class GarageSimulator:
    """Real-time garage door and vehicle simulation.

    Commands are applied synchronously on the event loop thread, so a tick
    never sees a half-applied command. Whenever a command leaves something in
    motion the ticker is (re)started; it stops by itself once everything has
    settled.

    Example:
        simulator = GarageSimulator()
        await simulator.start()

        simulator.open()
        await simulator.wait_until_settled()   # door open, vehicle parked

        simulator.close()
        await simulator.shutdown()
    """

    def __init__(
        self,
        config: Optional[MotionConfig] = None,
        viewport: Optional[Viewport] = None,
    ):
        self.controller = GarageController(config=config, viewport=viewport)
        self._ticker = Ticker(self.controller.config.tick_interval, self._on_tick)
        self._frame_listeners: list[FrameListener] = []
        self._last_sensors: SensorSignals = self.controller.sensors()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def ticking(self) -> bool:
        """Whether the tick task is currently scheduled."""
        return self._ticker.running

    async def start(self):
        """Start the simulator."""
        self._running = True
        logger.info(
            f"Garage simulator started ({self.controller.viewport.width:g}x"
            f"{self.controller.viewport.height:g}, "
            f"{self.controller.config.tick_interval * 1000:g}ms ticks)"
        )
        self._ensure_ticking()

    async def shutdown(self):
        """Stop the simulator and its tick task."""
        self._running = False
        await self._ticker.stop()
        logger.info("Garage simulator stopped")

    # =========================================================================
    # Commands
    # =========================================================================

    def open(self):
        """Open the door (ignored if not currently permitted)."""
        self.controller.open()
        self._ensure_ticking()

    def close(self):
        """Close the door (ignored if not currently permitted)."""
        self.controller.close()
        self._ensure_ticking()

    def stop(self):
        """Halt all motion before returning."""
        self._ticker.cancel()
        self.controller.stop()
        self._check_sensors()
        self._notify_frame()

    def reset(self):
        """Halt all motion and restore the initial state."""
        self._ticker.cancel()
        self.controller.reset()
        self._check_sensors()
        self._notify_frame()

    def resize(self, width: float, height: float):
        """Forward a new render surface size into the core."""
        self.controller.set_viewport(width, height)

    def step(self, ticks: int = 1) -> int:
        """Advance the simulation manually by up to `ticks` ticks.

        Returns the number of ticks actually run (stops early once settled).
        """
        count = 0
        for _ in range(ticks):
            if not self.controller.in_motion:
                break
            self._on_tick()
            count += 1
        return count

    # =========================================================================
    # Observation
    # =========================================================================

    def snapshot(self) -> GarageSnapshot:
        return self.controller.snapshot()

    def add_frame_listener(self, listener: FrameListener):
        """Register a callback that receives a snapshot after every tick."""
        self._frame_listeners.append(listener)

    def remove_frame_listener(self, listener: FrameListener):
        if listener in self._frame_listeners:
            self._frame_listeners.remove(listener)

    async def wait_until_settled(self, timeout: Optional[float] = None):
        """Wait until neither the door nor the vehicle is moving.

        Raises:
            asyncio.TimeoutError: if still moving after `timeout` seconds.
        """

        async def _wait():
            while self.controller.in_motion:
                await asyncio.sleep(self.controller.config.tick_interval)

        await asyncio.wait_for(_wait(), timeout=timeout)

    # =========================================================================
    # Ticking
    # =========================================================================

    def _ensure_ticking(self):
        if self._running and self.controller.in_motion:
            self._ticker.start()

    def _on_tick(self) -> bool:
        """Run one tick; return whether anything is still moving."""
        self.controller.tick()
        self._check_sensors()
        self._notify_frame()
        return self.controller.in_motion

    def _notify_frame(self):
        if not self._frame_listeners:
            return
        snapshot = self.controller.snapshot()
        for listener in list(self._frame_listeners):
            listener(snapshot)

    def _check_sensors(self):
        """Log limit sensor edges."""
        sensors = self.controller.sensors()
        if sensors.top != self._last_sensors.top:
            logger.info(f"{TOP_SENSOR_NAME} (top) {'ON' if sensors.top else 'OFF'}")
        if sensors.bottom != self._last_sensors.bottom:
            logger.info(f"{BOTTOM_SENSOR_NAME} (bottom) {'ON' if sensors.bottom else 'OFF'}")
        self._last_sensors = sensors
