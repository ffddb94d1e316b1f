# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Shared fixtures for built-in script tests."""
from __future__ import annotations

import pytest

from garagesim import GarageSimulator, MotionConfig


@pytest.fixture
def script_config() -> MotionConfig:
    """Motion config for built-in script tests.

    The door needs enough ticks to travel that a script can catch it
    partway up (stop_mid_open waits for 30% and then expects it below 100%).
    """
    return MotionConfig(
        door_speed=0.02,
        vehicle_speed=25.0,
        tick_interval=0.002,
    )


@pytest.fixture
async def simulator(script_config):
    """Create and start a simulator with script-appropriate motion."""
    sim = GarageSimulator(config=script_config)
    await sim.start()
    yield sim
    await sim.shutdown()


@pytest.fixture
def frames(simulator) -> list:
    """Snapshots recorded after every tick."""
    recorded = []
    simulator.add_frame_listener(recorded.append)
    return recorded
