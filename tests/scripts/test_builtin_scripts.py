# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for the built-in scripts."""
from __future__ import annotations

import pytest

from garagesim import DoorState, VehicleState
from garagesim.scripting import get_builtin_script


# ============================================================================
# enter_garage
# ============================================================================

class TestEnterGarage:
    """Tests for the enter_garage script."""

    def test_script_exists(self):
        script = get_builtin_script("enter_garage")
        assert script.name == "Enter Garage"

    def test_script_has_expected_steps(self):
        script = get_builtin_script("enter_garage")
        actions = [s.action for s in script.steps]
        assert "open" in actions
        assert "wait_for" in actions

    @pytest.mark.asyncio
    async def test_script_runs_successfully(self, runner):
        script = get_builtin_script("enter_garage")
        assert await runner.run(script, verbose=False) is True

    @pytest.mark.asyncio
    async def test_vehicle_parked(self, runner, simulator):
        await runner.run(get_builtin_script("enter_garage"), verbose=False)
        snapshot = simulator.snapshot()
        assert snapshot.vehicle_state is VehicleState.INSIDE
        assert snapshot.vehicle_position == 350.0

    @pytest.mark.asyncio
    async def test_vehicle_waits_for_top_sensor(self, runner, frames):
        """No frame shows the vehicle moving before LS1 is on."""
        await runner.run(get_builtin_script("enter_garage"), verbose=False)
        assert frames
        for frame in frames:
            if frame.vehicle_state is not VehicleState.OUTSIDE:
                assert frame.door_position == 1.0
                assert frame.sensors.top is True

    @pytest.mark.asyncio
    async def test_repeatable(self, runner):
        script = get_builtin_script("enter_garage")
        assert await runner.run(script, verbose=False) is True
        assert await runner.run(script, verbose=False) is True


# ============================================================================
# close_behind_vehicle
# ============================================================================

class TestCloseBehindVehicle:
    """Tests for the close_behind_vehicle script."""

    def test_script_exists(self):
        script = get_builtin_script("close_behind_vehicle")
        assert script.name == "Close Behind Vehicle"

    @pytest.mark.asyncio
    async def test_script_runs_successfully(self, runner):
        script = get_builtin_script("close_behind_vehicle")
        assert await runner.run(script, verbose=False) is True

    @pytest.mark.asyncio
    async def test_ends_shut_and_empty(self, runner, simulator):
        await runner.run(get_builtin_script("close_behind_vehicle"), verbose=False)
        snapshot = simulator.snapshot()
        assert snapshot.door_state is DoorState.SHUT
        assert snapshot.door_position == 0.0
        assert snapshot.vehicle_state is VehicleState.OUTSIDE
        assert snapshot.sensors.bottom is True

    @pytest.mark.asyncio
    async def test_door_never_closes_on_entering_vehicle(self, runner, frames):
        await runner.run(get_builtin_script("close_behind_vehicle"), verbose=False)
        for frame in frames:
            if frame.vehicle_state is VehicleState.ENTERING:
                assert frame.door_state is DoorState.OPEN


# ============================================================================
# stop_mid_open
# ============================================================================

class TestStopMidOpen:
    """Tests for the stop_mid_open script."""

    def test_script_exists(self):
        script = get_builtin_script("stop_mid_open")
        assert script.name == "Stop Mid Open"
        assert "stop" in [s.action for s in script.steps]

    @pytest.mark.asyncio
    async def test_script_runs_successfully(self, runner):
        script = get_builtin_script("stop_mid_open")
        assert await runner.run(script, verbose=False) is True

    @pytest.mark.asyncio
    async def test_vehicle_never_enters(self, runner, frames):
        await runner.run(get_builtin_script("stop_mid_open"), verbose=False)
        assert all(f.vehicle_state is VehicleState.OUTSIDE for f in frames)


# ============================================================================
# interlock_check
# ============================================================================

class TestInterlockCheck:
    """Tests for the interlock_check script."""

    def test_script_exists(self):
        script = get_builtin_script("interlock_check")
        assert script.name == "Interlock Check"

    @pytest.mark.asyncio
    async def test_script_runs_successfully(self, runner):
        script = get_builtin_script("interlock_check")
        assert await runner.run(script, verbose=False) is True

    @pytest.mark.asyncio
    async def test_ends_ready_to_open(self, runner, simulator):
        await runner.run(get_builtin_script("interlock_check"), verbose=False)
        assert simulator.controller.is_open_enabled() is True
        assert simulator.controller.in_motion is False
