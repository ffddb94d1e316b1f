# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Interlock controller for the garage door simulator.

The controller is the command surface of the simulation. It validates every
command against the current door and vehicle state before touching anything,
and it is the only writer of commanded state (door label, animating flag,
vehicle state on command). Positions are only ever written by the motion
models in `engine`, except for RESET and the vehicle leaving on CLOSE.

A command whose precondition fails is simply ignored, the same way a
disabled button on a physical control panel does nothing. Each precondition
is exposed as an `is_*_enabled()` predicate so a renderer can grey out the
matching control.

Example usage:
    controller = GarageController()
    controller.open()
    while controller.in_motion:
        controller.tick()
    print(controller.vehicle_state())  # VehicleState.INSIDE
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from .const import VEHICLE_SENTINEL
from .engine import TickEvent, step
from .sensors import read_sensors
from .state import (
    Command,
    Door,
    DoorState,
    GarageSnapshot,
    GarageState,
    MotionConfig,
    SensorSignals,
    Vehicle,
    VehicleState,
    Viewport,
)

logger = logging.getLogger(__name__)

EventListener = Callable[[TickEvent], None]


class GarageController:
    """Validates commands and owns the simulation state.

    A prebuilt `state` takes the place of `config` and `viewport`.
    """

    def __init__(
        self,
        config: Optional[MotionConfig] = None,
        viewport: Optional[Viewport] = None,
        state: Optional[GarageState] = None,
    ):
        if state is None:
            state = GarageState(
                config=config or MotionConfig(),
                viewport=viewport or Viewport(),
            )
        self._state = state
        self._listeners: list[EventListener] = []

    @property
    def state(self) -> GarageState:
        """The live state record. Renderers should prefer snapshot()."""
        return self._state

    @property
    def config(self) -> MotionConfig:
        return self._state.config

    @property
    def viewport(self) -> Viewport:
        return self._state.viewport

    @property
    def in_motion(self) -> bool:
        """Whether the door or the vehicle is currently moving."""
        return self._state.in_motion

    # =========================================================================
    # Accessors
    # =========================================================================

    def door_position(self) -> float:
        return self._state.door.position

    def door_state(self) -> DoorState:
        return self._state.door.state

    def is_animating(self) -> bool:
        return self._state.door.animating

    def vehicle_position(self) -> float:
        return self._state.vehicle.position

    def vehicle_state(self) -> VehicleState:
        return self._state.vehicle.state

    def sensors(self) -> SensorSignals:
        """Current limit sensor readings (recomputed on every call)."""
        return read_sensors(self._state.door.position)

    def snapshot(self) -> GarageSnapshot:
        """Build a read-only snapshot for the current frame."""
        door = self._state.door
        vehicle = self._state.vehicle
        return GarageSnapshot(
            door_position=door.position,
            door_state=door.state,
            door_animating=door.animating,
            vehicle_position=vehicle.position,
            vehicle_state=vehicle.state,
            sensors=self.sensors(),
            viewport_width=self._state.viewport.width,
            viewport_height=self._state.viewport.height,
            open_enabled=self.is_open_enabled(),
            close_enabled=self.is_close_enabled(),
            stop_enabled=self.is_stop_enabled(),
            reset_enabled=self.is_reset_enabled(),
            in_motion=self.in_motion,
        )

    # =========================================================================
    # Command Predicates
    # =========================================================================

    def is_open_enabled(self) -> bool:
        """OPEN needs a door not already commanded open and no vehicle in the way."""
        return (
            self._state.door.state is not DoorState.OPEN
            and self._state.vehicle.state is VehicleState.OUTSIDE
        )

    def is_close_enabled(self) -> bool:
        """CLOSE needs a door not already commanded shut and no vehicle entering."""
        return (
            self._state.door.state is not DoorState.SHUT
            and self._state.vehicle.state is not VehicleState.ENTERING
        )

    def is_stop_enabled(self) -> bool:
        return True

    def is_reset_enabled(self) -> bool:
        return True

    def is_enabled(self, command: Command) -> bool:
        """Check whether a command would currently take effect."""
        predicates = {
            Command.OPEN: self.is_open_enabled,
            Command.CLOSE: self.is_close_enabled,
            Command.STOP: self.is_stop_enabled,
            Command.RESET: self.is_reset_enabled,
        }
        return predicates[command]()

    def rejection_reason(self, command: Command) -> Optional[str]:
        """Explain why a command would be ignored, or None if it is enabled."""
        if self.is_enabled(command):
            return None
        door = self._state.door
        vehicle = self._state.vehicle
        if command is Command.OPEN:
            if door.state is DoorState.OPEN:
                return "door already open"
            return f"vehicle {vehicle.state.value.lower()}"
        if door.state is DoorState.SHUT:
            return "door already shut"
        return "vehicle entering"

    # =========================================================================
    # Commands
    # =========================================================================

    def open(self):
        """Start opening the door."""
        if not self.is_open_enabled():
            logger.debug(f"Open command ignored ({self.rejection_reason(Command.OPEN)})")
            return

        self._state.door.state = DoorState.OPEN
        self._state.door.animating = True
        logger.info(f"Door opening from {self._state.door.position:.0%}")

    def close(self):
        """Start closing the door.

        A vehicle parked inside is taken to have left: it goes straight back
        to the off-screen position before the door starts moving.
        """
        if not self.is_close_enabled():
            logger.debug(f"Close command ignored ({self.rejection_reason(Command.CLOSE)})")
            return

        if self._state.vehicle.state is VehicleState.INSIDE:
            self._state.vehicle.state = VehicleState.OUTSIDE
            self._state.vehicle.position = VEHICLE_SENTINEL
            logger.info("Vehicle left the garage")

        self._state.door.state = DoorState.SHUT
        self._state.door.animating = True
        logger.info(f"Door closing from {self._state.door.position:.0%}")

    def stop(self):
        """Freeze the door where it is and abort a vehicle entry.

        The door keeps its commanded label and the vehicle keeps its
        position; only RESET brings an aborted vehicle back off-screen.
        """
        door = self._state.door
        vehicle = self._state.vehicle

        if door.animating:
            logger.info(f"Door stopped at {door.position:.0%}")
        door.animating = False

        if vehicle.state is VehicleState.ENTERING:
            vehicle.state = VehicleState.OUTSIDE
            logger.info(f"Vehicle entry aborted at x={vehicle.position:g}")

    def reset(self):
        """Restore the door and the vehicle to their initial state."""
        self._state.door = Door()
        self._state.vehicle = Vehicle()
        logger.info("Simulation reset")

    def apply(self, command: Command):
        """Apply a Command enum value."""
        handlers = {
            Command.OPEN: self.open,
            Command.CLOSE: self.close,
            Command.STOP: self.stop,
            Command.RESET: self.reset,
        }
        handlers[command]()

    # =========================================================================
    # Viewport
    # =========================================================================

    def set_viewport(self, width: float, height: float):
        """Update the render surface size.

        Sizes that are not finite and positive are clamped to zero, which in
        turn clamps the vehicle parking spot to zero.
        """
        self._state.viewport.width = self._clamp_dimension("width", width)
        self._state.viewport.height = self._clamp_dimension("height", height)
        logger.debug(
            f"Viewport set to {self._state.viewport.width:g}x{self._state.viewport.height:g}"
        )

    @staticmethod
    def _clamp_dimension(name: str, value: float) -> float:
        value = float(value)
        if not math.isfinite(value) or value <= 0:
            logger.warning(f"Invalid viewport {name} {value!r}, clamping to 0")
            return 0.0
        return value

    # =========================================================================
    # Ticking
    # =========================================================================

    def add_listener(self, listener: EventListener):
        """Register a callback for tick events."""
        self._listeners.append(listener)

    def remove_listener(self, listener: EventListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def tick(self) -> list[TickEvent]:
        """Advance the simulation by one tick."""
        events = step(self._state)
        for event in events:
            self._log_event(event)
            for listener in list(self._listeners):
                listener(event)
        return events

    def _log_event(self, event: TickEvent):
        if event is TickEvent.DOOR_OPENED:
            logger.info("Door fully open")
        elif event is TickEvent.DOOR_SHUT:
            logger.info("Door fully shut")
        elif event is TickEvent.VEHICLE_ENTERING:
            logger.info("Vehicle entering garage")
        elif event is TickEvent.VEHICLE_PARKED:
            logger.info(f"Vehicle parked inside at x={self._state.vehicle.position:g}")
