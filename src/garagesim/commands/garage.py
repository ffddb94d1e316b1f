# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Control panel commands."""

import asyncio
from typing import TYPE_CHECKING

from ..state import Command
from .base import ArgSpec, CommandResult, command

if TYPE_CHECKING:
    from ..simulator import GarageSimulator


class GarageCommandsMixin:
    """Mixin providing the control panel buttons."""

    simulator: "GarageSimulator"

    def _ignored(self, cmd: Command) -> CommandResult:
        """Result for a button that is currently disabled.

        Pressing a disabled button is not an error; it just does nothing.
        """
        reason = self.simulator.controller.rejection_reason(cmd)
        return CommandResult(
            True,
            f"{cmd.value.capitalize()} ignored ({reason})",
            {"applied": False},
        )

    @command("open", ["o"], "Open the door", category="door")
    def open(self) -> CommandResult:
        """Open the door."""
        if not self.simulator.controller.is_open_enabled():
            return self._ignored(Command.OPEN)
        self.simulator.open()
        return CommandResult(True, "Opening door", {"applied": True})

    @command("close", ["c"], "Close the door", category="door")
    def close(self) -> CommandResult:
        """Close the door (a parked vehicle leaves first)."""
        if not self.simulator.controller.is_close_enabled():
            return self._ignored(Command.CLOSE)
        self.simulator.close()
        return CommandResult(True, "Closing door", {"applied": True})

    @command("stop", ["s", "halt"], "Stop door and vehicle motion", category="door")
    def stop(self) -> CommandResult:
        """Freeze the door and abort a vehicle entry."""
        self.simulator.stop()
        position = self.simulator.controller.door_position()
        return CommandResult(True, f"Stopped (door at {position:.0%})", {"applied": True})

    @command("reset", ["x"], "Reset door and vehicle", category="door")
    def reset(self) -> CommandResult:
        """Restore the initial state."""
        self.simulator.reset()
        return CommandResult(True, "Reset", {"applied": True})

    @command(
        "resize",
        ["size"],
        "Set the viewport size",
        category="simulation",
        args=[
            ArgSpec("width", "float", description="Viewport width"),
            ArgSpec("height", "float", description="Viewport height"),
        ],
    )
    def resize(self, width: float, height: float) -> CommandResult:
        """Forward a viewport size into the core."""
        self.simulator.resize(width, height)
        viewport = self.simulator.controller.viewport
        return CommandResult(True, f"Viewport: {viewport.width:g}x{viewport.height:g}")

    @command(
        "step",
        ["t", "tick"],
        "Advance the simulation by a number of ticks",
        category="simulation",
        args=[
            ArgSpec(
                "ticks",
                "int",
                required=False,
                default=1,
                min_value=1,
                description="Number of ticks",
            )
        ],
    )
    def step(self, ticks: int = 1) -> CommandResult:
        """Advance manually, stopping early once everything settles."""
        ran = self.simulator.step(ticks)
        position = self.simulator.controller.door_position()
        return CommandResult(True, f"Ran {ran} tick(s), door at {position:.1%}")

    @command(
        "wait",
        ["w"],
        "Wait until door and vehicle stop moving",
        category="simulation",
        args=[
            ArgSpec(
                "timeout",
                "float",
                required=False,
                default=30.0,
                min_value=0,
                description="Timeout in seconds",
            )
        ],
    )
    async def wait(self, timeout: float = 30.0) -> CommandResult:
        """Block until the simulation settles."""
        if self.simulator.controller.in_motion and not self.simulator.ticking:
            return CommandResult(False, "Simulation is not ticking; use 'step'")
        try:
            await self.simulator.wait_until_settled(timeout)
        except asyncio.TimeoutError:
            return CommandResult(False, f"Still moving after {timeout:g}s")
        return CommandResult(True, "Settled")
