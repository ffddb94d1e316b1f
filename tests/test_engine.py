# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for the per-tick motion models (engine.py)."""
from __future__ import annotations

import pytest

from garagesim import DoorState, GarageState, MotionConfig, TickEvent, VehicleState, Viewport, advance
from garagesim.engine import advance_door, advance_vehicle, step, vehicle_target


def opening_state(position: float = 0.0) -> GarageState:
    state = GarageState()
    state.door.position = position
    state.door.state = DoorState.OPEN
    state.door.animating = True
    return state


# ============================================================================
# Door Motion Tests
# ============================================================================

class TestDoorMotion:
    """Tests for advance_door."""

    def test_idle_door_does_not_move(self):
        state = GarageState()
        state.door.position = 0.4
        assert advance_door(state.door, state.config) == []
        assert state.door.position == 0.4

    def test_opening_moves_up_by_speed(self):
        state = opening_state()
        advance_door(state.door, state.config)
        assert state.door.position == pytest.approx(0.005)
        assert state.door.animating is True

    def test_closing_moves_down_by_speed(self):
        state = GarageState()
        state.door.position = 0.5
        state.door.animating = True
        advance_door(state.door, state.config)
        assert state.door.position == pytest.approx(0.495)

    def test_steps_never_exceed_speed(self):
        """Travel is monotonic and every step is at most door_speed."""
        state = opening_state()
        previous = state.door.position
        while state.door.animating:
            advance_door(state.door, state.config)
            delta = state.door.position - previous
            assert 0 <= delta <= state.config.door_speed + 1e-12
            previous = state.door.position

    def test_snaps_exactly_to_open(self):
        state = opening_state()
        events = []
        while state.door.animating:
            events.extend(advance_door(state.door, state.config))
        assert state.door.position == 1.0
        assert events == [TickEvent.DOOR_OPENED]

    def test_snaps_exactly_to_shut(self):
        state = GarageState()
        state.door.position = 0.3
        state.door.animating = True
        events = []
        while state.door.animating:
            events.extend(advance_door(state.door, state.config))
        assert state.door.position == 0.0
        assert events == [TickEvent.DOOR_SHUT]

    def test_snaps_when_within_one_step(self):
        state = opening_state(0.998)
        assert advance_door(state.door, state.config) == [TickEvent.DOOR_OPENED]
        assert state.door.position == 1.0
        assert state.door.animating is False

    def test_full_travel_takes_about_two_hundred_ticks(self):
        state = opening_state()
        ticks = 0
        while state.door.animating:
            advance_door(state.door, state.config)
            ticks += 1
        assert 199 <= ticks <= 201


# ============================================================================
# Vehicle Motion Tests
# ============================================================================

class TestVehicleMotion:
    """Tests for advance_vehicle and vehicle_target."""

    def test_target_default_viewport(self):
        assert vehicle_target(Viewport(800, 400), MotionConfig()) == 350.0

    def test_target_clamped_to_zero(self):
        assert vehicle_target(Viewport(60, 400), MotionConfig()) == 0.0
        assert vehicle_target(Viewport(0, 0), MotionConfig()) == 0.0

    def test_outside_vehicle_does_not_move(self):
        state = GarageState()
        assert advance_vehicle(state.vehicle, state.viewport, state.config) == []
        assert state.vehicle.position == -200.0

    def test_entering_vehicle_moves_by_speed(self):
        state = GarageState()
        state.vehicle.state = VehicleState.ENTERING
        advance_vehicle(state.vehicle, state.viewport, state.config)
        assert state.vehicle.position == -197.0

    def test_vehicle_parks_exactly_on_target(self):
        state = GarageState()
        state.vehicle.state = VehicleState.ENTERING
        events = []
        while state.vehicle.state is VehicleState.ENTERING:
            events.extend(advance_vehicle(state.vehicle, state.viewport, state.config))
        assert state.vehicle.position == 350.0
        assert state.vehicle.state is VehicleState.INSIDE
        assert events == [TickEvent.VEHICLE_PARKED]

    def test_vehicle_past_target_parks_immediately(self):
        """A viewport shrunk under an entering vehicle parks it on the next tick."""
        state = GarageState()
        state.vehicle.state = VehicleState.ENTERING
        state.vehicle.position = 300.0
        state.viewport.width = 200.0
        advance_vehicle(state.vehicle, state.viewport, state.config)
        assert state.vehicle.position == 50.0
        assert state.vehicle.state is VehicleState.INSIDE


# ============================================================================
# Tick Tests
# ============================================================================

class TestStep:
    """Tests for the combined tick."""

    def test_door_opening_releases_vehicle_same_tick(self):
        state = opening_state(0.999)
        events = step(state)
        assert events == [TickEvent.DOOR_OPENED, TickEvent.VEHICLE_ENTERING]
        assert state.vehicle.state is VehicleState.ENTERING
        assert state.vehicle.position == -197.0

    def test_door_shutting_does_not_release_vehicle(self):
        state = GarageState()
        state.door.position = 0.001
        state.door.animating = True
        assert step(state) == [TickEvent.DOOR_SHUT]
        assert state.vehicle.state is VehicleState.OUTSIDE

    def test_vehicle_waits_until_fully_open(self):
        state = opening_state()
        for _ in range(100):
            step(state)
        assert state.door.position == pytest.approx(0.5)
        assert state.vehicle.state is VehicleState.OUTSIDE
        assert state.vehicle.position == -200.0

    def test_idle_tick_changes_nothing(self):
        state = GarageState()
        before = state.copy()
        assert step(state) == []
        assert state == before


class TestAdvance:
    """Tests for the pure advance() helper."""

    def test_does_not_mutate_input(self):
        state = opening_state()
        later = advance(state, 50)
        assert state.door.position == 0.0
        assert later.door.position == pytest.approx(0.25)

    def test_zero_ticks_returns_equal_copy(self):
        state = opening_state(0.3)
        later = advance(state, 0)
        assert later == state
        assert later is not state

    def test_negative_ticks_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            advance(GarageState(), -1)

    def test_full_cycle_parks_vehicle(self):
        later = advance(opening_state(), 10000)
        assert later.door.position == 1.0
        assert later.door.animating is False
        assert later.vehicle.state is VehicleState.INSIDE
        assert later.vehicle.position == 350.0
        assert later.in_motion is False
