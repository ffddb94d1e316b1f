# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Info and status commands."""

from typing import TYPE_CHECKING

from ..const import BOTTOM_SENSOR_NAME, TOP_SENSOR_NAME
from ..state import GarageSnapshot, VehicleState
from .base import CommandInfo, CommandResult, command, get_command_registry

if TYPE_CHECKING:
    from ..simulator import GarageSimulator

# Display order for help categories
_CATEGORY_ORDER = ["door", "simulation", "info", "scripts", "control"]


def _on_off(value: bool) -> str:
    return "ON" if value else "OFF"


def format_status(snapshot: GarageSnapshot) -> str:
    """Render a snapshot as the text status panel."""
    s = snapshot
    buttons = [
        name
        for name, enabled in (
            ("open", s.open_enabled),
            ("close", s.close_enabled),
            ("stop", s.stop_enabled),
            ("reset", s.reset_enabled),
        )
        if enabled
    ]
    motion = []
    if s.door_animating:
        motion.append("door")
    if s.vehicle_state is VehicleState.ENTERING:
        motion.append("vehicle")

    lines = [
        "Current State:",
        f"  Door: {s.door_state.value}",
        f"  Position: {round(s.door_position * 100)}%",
        f"  Height: {round((1 - s.door_position) * 100)}%",
        f"  Vehicle: {s.vehicle_state.value} (x={s.vehicle_position:g})",
        f"  Moving: {', '.join(motion) if motion else 'none'}",
        f"  {TOP_SENSOR_NAME} (top): {_on_off(s.sensors.top)}",
        f"  {BOTTOM_SENSOR_NAME} (bottom): {_on_off(s.sensors.bottom)}",
        f"  Viewport: {s.viewport_width:g}x{s.viewport_height:g}",
        f"  Buttons enabled: {', '.join(buttons)}",
    ]
    return "\n".join(lines)


class InfoCommandsMixin:
    """Mixin providing info and status commands."""

    simulator: "GarageSimulator"
    _interactive_mode: bool

    @command(
        "status", ["state", "info", "v"], "Show current simulator state", category="info"
    )
    def status(self) -> CommandResult:
        """Show current simulator state."""
        snapshot = self.simulator.snapshot()
        return CommandResult(True, format_status(snapshot), snapshot.to_dict())

    @command("sensors", ["ls"], "Show limit sensor readings", category="info")
    def sensors(self) -> CommandResult:
        """Show LS1/LS2 readings."""
        sensors = self.simulator.controller.sensors()
        return CommandResult(
            True,
            f"{TOP_SENSOR_NAME}: {_on_off(sensors.top)}, "
            f"{BOTTOM_SENSOR_NAME}: {_on_off(sensors.bottom)}",
            {"top": sensors.top, "bottom": sensors.bottom},
        )

    @command("help", ["?"], "Show available commands", category="info")
    def help(self) -> CommandResult:
        """Show help for all commands."""
        return CommandResult(True, self.get_help())

    def get_help(self) -> str:
        """Build help text grouped by category."""
        by_category: dict[str, list[CommandInfo]] = {}
        seen = set()
        for info in get_command_registry().values():
            if info.name in seen:
                continue
            seen.add(info.name)
            if info.interactive_only and not self._interactive_mode:
                continue
            by_category.setdefault(info.category, []).append(info)

        categories = sorted(
            by_category,
            key=lambda c: _CATEGORY_ORDER.index(c) if c in _CATEGORY_ORDER else len(_CATEGORY_ORDER),
        )

        lines = ["Commands:"]
        for category in categories:
            lines.append(f"  {category.capitalize()}:")
            for info in sorted(by_category[category], key=lambda i: i.name):
                aliases = f" ({', '.join(info.aliases)})" if info.aliases else ""
                usage = f" {info.usage}" if info.usage else ""
                lines.append(f"    {info.name}{aliases}{usage} - {info.description}")
        return "\n".join(lines)
