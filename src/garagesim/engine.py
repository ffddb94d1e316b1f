# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Per-tick motion models for the door and the vehicle.

Everything here is framework independent: a tick is a plain function call
on a GarageState, so the whole simulation can be driven headless.

Example usage:
    from garagesim.engine import advance
    from garagesim.state import DoorState, GarageState

    state = GarageState()
    state.door.state = DoorState.OPEN
    state.door.animating = True

    later = advance(state, 50)
    print(round(later.door.position, 3))  # 0.25
"""

from __future__ import annotations

from enum import Enum

from .const import DOOR_POSITION_OPEN
from .state import (
    Door,
    GarageState,
    MotionConfig,
    Vehicle,
    VehicleState,
    Viewport,
)


class TickEvent(Enum):
    """Transitions that can happen during a tick."""

    DOOR_OPENED = "door_opened"
    DOOR_SHUT = "door_shut"
    VEHICLE_ENTERING = "vehicle_entering"
    VEHICLE_PARKED = "vehicle_parked"


def vehicle_target(viewport: Viewport, config: MotionConfig) -> float:
    """Parking position for the vehicle, never negative."""
    return max(0.0, viewport.width / 2 - config.vehicle_stop_offset)


def advance_door(door: Door, config: MotionConfig) -> list[TickEvent]:
    """Move the door one step toward its target.

    When the remaining distance is at most one step the door snaps exactly
    onto the target and stops animating, so no step ever exceeds
    `config.door_speed`.
    """
    if not door.animating:
        return []

    target = door.target
    remaining = target - door.position

    if abs(remaining) <= config.door_speed:
        door.position = target
        door.animating = False
        if target == DOOR_POSITION_OPEN:
            return [TickEvent.DOOR_OPENED]
        return [TickEvent.DOOR_SHUT]

    door.position += config.door_speed if remaining > 0 else -config.door_speed
    return []


def advance_vehicle(
    vehicle: Vehicle, viewport: Viewport, config: MotionConfig
) -> list[TickEvent]:
    """Move an entering vehicle one step toward its parking spot."""
    if vehicle.state is not VehicleState.ENTERING:
        return []

    target = vehicle_target(viewport, config)
    new_position = vehicle.position + config.vehicle_speed

    if new_position >= target:
        vehicle.position = target
        vehicle.state = VehicleState.INSIDE
        return [TickEvent.VEHICLE_PARKED]

    vehicle.position = new_position
    return []


def step(state: GarageState) -> list[TickEvent]:
    """Run a single tick in place: door first, then vehicle.

    A door that finishes opening during this tick sends a waiting vehicle
    in, and the vehicle takes its first step in the same tick.
    """
    events = advance_door(state.door, state.config)

    if TickEvent.DOOR_OPENED in events and state.vehicle.state is VehicleState.OUTSIDE:
        state.vehicle.state = VehicleState.ENTERING
        events.append(TickEvent.VEHICLE_ENTERING)

    events.extend(advance_vehicle(state.vehicle, state.viewport, state.config))
    return events


def advance(state: GarageState, ticks: int = 1) -> GarageState:
    """Return the state after `ticks` ticks, leaving `state` untouched."""
    if ticks < 0:
        raise ValueError(f"ticks must be non-negative, got {ticks}")

    result = state.copy()
    for _ in range(ticks):
        if not result.in_motion:
            break
        step(result)
    return result
