# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""State dataclasses for the garage door simulator.

This module contains the enums and records that make up the single
explicit state owned by the core engine, plus the read-only snapshot
handed to renderers once per frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .const import (
    CMD_CLOSE,
    CMD_OPEN,
    CMD_RESET,
    CMD_STOP,
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
    DOOR_POSITION_OPEN,
    DOOR_POSITION_SHUT,
    DOOR_SPEED,
    DOOR_STATE_OPEN,
    DOOR_STATE_SHUT,
    TICK_INTERVAL,
    VEHICLE_SENTINEL,
    VEHICLE_SPEED,
    VEHICLE_STATE_ENTERING,
    VEHICLE_STATE_INSIDE,
    VEHICLE_STATE_OUTSIDE,
    VEHICLE_STOP_OFFSET,
)


class DoorState(Enum):
    """Commanded door state."""

    SHUT = DOOR_STATE_SHUT
    OPEN = DOOR_STATE_OPEN


class VehicleState(Enum):
    """Vehicle progress relative to the garage."""

    OUTSIDE = VEHICLE_STATE_OUTSIDE
    ENTERING = VEHICLE_STATE_ENTERING
    INSIDE = VEHICLE_STATE_INSIDE


class Command(Enum):
    """Commands accepted by the interlock controller."""

    OPEN = CMD_OPEN
    CLOSE = CMD_CLOSE
    STOP = CMD_STOP
    RESET = CMD_RESET


@dataclass
class MotionConfig:
    """Configurable motion parameters.

    Speeds are in position units per tick; the interval is in seconds.
    """

    # Door travel per tick on the normalized [0, 1] axis
    door_speed: float = DOOR_SPEED

    # Vehicle travel per tick in world units
    vehicle_speed: float = VEHICLE_SPEED

    # Time between ticks while anything is moving
    tick_interval: float = TICK_INTERVAL

    # Vehicle parks this far left of the viewport centre
    vehicle_stop_offset: float = VEHICLE_STOP_OFFSET


@dataclass
class Viewport:
    """Render surface size supplied by the renderer."""

    width: float = DEFAULT_VIEWPORT_WIDTH
    height: float = DEFAULT_VIEWPORT_HEIGHT


@dataclass
class Door:
    """The garage door.

    `state` is the commanded target label. While the door is animating, or
    after a STOP, `position` may lag behind it.
    """

    position: float = DOOR_POSITION_SHUT
    state: DoorState = DoorState.SHUT
    animating: bool = False

    @property
    def target(self) -> float:
        """Position the door is travelling toward."""
        return DOOR_POSITION_OPEN if self.state is DoorState.OPEN else DOOR_POSITION_SHUT


@dataclass
class Vehicle:
    """The vehicle driving into the garage."""

    position: float = VEHICLE_SENTINEL
    state: VehicleState = VehicleState.OUTSIDE

    @property
    def animating(self) -> bool:
        """Whether the vehicle moves on each tick."""
        return self.state is VehicleState.ENTERING


@dataclass(frozen=True)
class SensorSignals:
    """Limit sensor readings derived from the door position."""

    top: bool
    bottom: bool


@dataclass
class GarageState:
    """Complete simulator state."""

    door: Door = field(default_factory=Door)
    vehicle: Vehicle = field(default_factory=Vehicle)
    viewport: Viewport = field(default_factory=Viewport)
    config: MotionConfig = field(default_factory=MotionConfig)

    @property
    def in_motion(self) -> bool:
        """Whether a tick would change anything."""
        return self.door.animating or self.vehicle.animating

    def copy(self) -> "GarageState":
        """Return an independent copy of this state."""
        return GarageState(
            door=replace(self.door),
            vehicle=replace(self.vehicle),
            viewport=replace(self.viewport),
            config=replace(self.config),
        )


@dataclass(frozen=True)
class GarageSnapshot:
    """Read-only view of the simulator for a single frame."""

    door_position: float
    door_state: DoorState
    door_animating: bool
    vehicle_position: float
    vehicle_state: VehicleState
    sensors: SensorSignals
    viewport_width: float
    viewport_height: float
    open_enabled: bool
    close_enabled: bool
    stop_enabled: bool
    reset_enabled: bool
    in_motion: bool

    def to_dict(self) -> dict:
        """Convert to a plain dict."""
        return {
            "door_position": self.door_position,
            "door_state": self.door_state.value,
            "door_animating": self.door_animating,
            "vehicle_position": self.vehicle_position,
            "vehicle_state": self.vehicle_state.value,
            "top_sensor": self.sensors.top,
            "bottom_sensor": self.sensors.bottom,
            "viewport_width": self.viewport_width,
            "viewport_height": self.viewport_height,
            "open_enabled": self.open_enabled,
            "close_enabled": self.close_enabled,
            "stop_enabled": self.stop_enabled,
            "reset_enabled": self.reset_enabled,
            "in_motion": self.in_motion,
        }
