# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Garage door simulator.

This package simulates a garage door with two limit sensors (LS1 at the
top, LS2 at the bottom) and a vehicle that drives in once the door is
fully open. An interlock controller decides which control panel commands
(OPEN, CLOSE, STOP, RESET) are currently allowed.

The simulator can:
- Animate the door and vehicle in real time on the asyncio event loop
- Be stepped manually, one tick at a time, for headless use
- Report limit sensor readings and which buttons are enabled
- Run scripted scenarios with assertions
- Be controlled interactively via keyboard or programmatically

Example usage:
    # Run interactively
    python -m garagesim

    # Or use programmatically
    from garagesim import GarageSimulator
    simulator = GarageSimulator()
    await simulator.start()
    simulator.open()
    await simulator.wait_until_settled()
"""

from .state import (
    Command,
    DoorState,
    GarageSnapshot,
    GarageState,
    MotionConfig,
    SensorSignals,
    VehicleState,
    Viewport,
)
from .engine import TickEvent, advance
from .sensors import read_sensors
from .controller import GarageController
from .simulator import GarageSimulator
from .commands import CommandHandler, CommandResult
from .scripting import (
    Script,
    ScriptRunner,
    ScriptStep,
    ScriptError,
    AssertionFailed,
    get_builtin_script,
    list_builtin_scripts,
)

__all__ = [
    # Main classes
    "GarageController",
    "GarageSimulator",
    # State
    "Command",
    "DoorState",
    "VehicleState",
    "GarageState",
    "GarageSnapshot",
    "MotionConfig",
    "SensorSignals",
    "Viewport",
    # Motion
    "TickEvent",
    "advance",
    "read_sensors",
    # Commands
    "CommandHandler",
    "CommandResult",
    # Scripting
    "Script",
    "ScriptRunner",
    "ScriptStep",
    "ScriptError",
    "AssertionFailed",
    "get_builtin_script",
    "list_builtin_scripts",
]
