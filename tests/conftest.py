# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Pytest configuration and fixtures for garage simulator tests."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from garagesim import (
    CommandHandler,
    GarageController,
    GarageSimulator,
    MotionConfig,
    ScriptRunner,
)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def fast_config() -> MotionConfig:
    """Motion config that settles in a few dozen milliseconds.

    The door takes 20 ticks to travel fully and the vehicle 22 ticks to park
    in the default 800 wide viewport.
    """
    return MotionConfig(
        door_speed=0.05,
        vehicle_speed=25.0,
        tick_interval=0.001,
    )


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def controller() -> GarageController:
    """Controller with the default motion config."""
    return GarageController()


@pytest.fixture
async def simulator(fast_config):
    """Create and start a simulator with fast motion for unit tests."""
    sim = GarageSimulator(config=fast_config)
    await sim.start()
    yield sim
    await sim.shutdown()


@pytest.fixture
async def idle_simulator(fast_config):
    """A simulator that is never started, so it only moves via step()."""
    sim = GarageSimulator(config=fast_config)
    yield sim
    await sim.shutdown()


@pytest.fixture
async def runner(simulator) -> ScriptRunner:
    """Create a script runner."""
    return ScriptRunner(simulator)


@pytest.fixture
def command_handler(simulator, runner) -> CommandHandler:
    """Create a command handler for the simulator."""
    return CommandHandler(
        simulator=simulator,
        script_runner=runner,
        stop_callback=MagicMock(),
    )


@pytest.fixture
def run_until_settled():
    """Tick a controller until nothing moves; returns the tick count."""
    def run(controller: GarageController, limit: int = 10000) -> int:
        ticks = 0
        while controller.in_motion:
            controller.tick()
            ticks += 1
            assert ticks < limit, "simulation did not settle"
        return ticks
    return run


# ============================================================================
# Utility Fixtures
# ============================================================================

@pytest.fixture
def callback_tracker() -> dict[str, list]:
    """Track callback invocations."""
    return {
        "calls": [],
        "args": [],
    }


@pytest.fixture
def make_callback(callback_tracker):
    """Factory to create tracked callbacks."""
    def factory(name: str = "callback"):
        def callback(*args, **kwargs):
            callback_tracker["calls"].append(name)
            callback_tracker["args"].append((args, kwargs))
        return callback
    return factory
