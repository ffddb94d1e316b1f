# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command handler that combines all command mixins."""

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Optional

from .base import CommandInfo, CommandResult, get_command_registry, parse_arg
from .control import ControlCommandsMixin
from .garage import GarageCommandsMixin
from .info import InfoCommandsMixin
from .scripts import ScriptsCommandsMixin

if TYPE_CHECKING:
    from ..scripting import ScriptRunner
    from ..simulator import GarageSimulator

logger = logging.getLogger(__name__)


class CommandHandler(
    GarageCommandsMixin,
    InfoCommandsMixin,
    ScriptsCommandsMixin,
    ControlCommandsMixin,
):
    """Handles text commands for the simulator.

    Commands can be invoked:
    - Via execute() with a command string
    - Directly as methods (e.g., handler.open(), handler.resize(800, 400))
    """

    def __init__(
        self,
        simulator: "GarageSimulator",
        script_runner: "ScriptRunner",
        stop_callback: Callable[[], None],
    ):
        """Initialize the command handler.

        Args:
            simulator: The garage simulator instance
            script_runner: The script runner instance
            stop_callback: Function to call to stop the simulator
        """
        self.simulator = simulator
        self.script_runner = script_runner
        self.stop_callback = stop_callback
        self._interactive_mode = False

    def set_interactive_mode(self, enabled: bool):
        """Set whether the handler is operating in interactive mode.

        When interactive mode is disabled, commands marked with
        interactive_only=True are reported as unknown.
        """
        self._interactive_mode = enabled

    async def execute(self, command_str: str) -> CommandResult:
        """Execute a command string and return the result.

        Args:
            command_str: The command string to execute (e.g., "open", "resize 800 400")

        Returns:
            CommandResult with success status and message
        """
        parts = command_str.split()
        if not parts:
            return CommandResult(False, "Empty command")

        cmd = parts[0].lower()
        info = get_command_registry().get(cmd)
        if info is None or (info.interactive_only and not self._interactive_mode):
            return CommandResult(
                False, f"Unknown command: {cmd}. Type 'help' for commands."
            )

        handler = getattr(self, info.handler.__name__)
        remaining = parts[1:]

        if remaining and remaining[0].lower() in ("help", "?"):
            return CommandResult(True, self._get_arg_help(info))

        parsed_args, error = self._parse_args(remaining, info)
        if error:
            return error

        try:
            result = handler(*parsed_args)
            if asyncio.iscoroutine(result):
                result = await result
        except Exception as e:
            logger.debug(f"Command '{command_str}' failed: {e}")
            return CommandResult(False, f"Error: {e}")

        return result

    def _parse_args(
        self, parts: list[str], info: CommandInfo
    ) -> tuple[list, Optional[CommandResult]]:
        """Parse argument parts according to the command's ArgSpecs.

        Returns:
            (parsed_args, error) - error is None on success
        """
        parsed = []
        usage = f"Usage: {info.name} {info.usage or ''}".rstrip()

        for i, spec in enumerate(info.args):
            if i < len(parts):
                value, error = parse_arg(parts[i], spec)
                if error:
                    return [], CommandResult(False, f"{error}\n{usage}")
                parsed.append(value)
            elif spec.required:
                return [], CommandResult(
                    False, f"Missing required argument: {spec.name}\n{usage}"
                )
            else:
                parsed.append(spec.default)

        if len(parts) > len(info.args):
            extra = " ".join(parts[len(info.args):])
            return [], CommandResult(False, f"Unexpected arguments: {extra}\n{usage}")

        return parsed, None

    def _get_arg_help(self, info: CommandInfo) -> str:
        """Generate help text for a single command."""
        aliases = f" (aliases: {', '.join(info.aliases)})" if info.aliases else ""
        lines = [f"{info.name} {info.usage or ''}".rstrip() + aliases, "", info.description]
        if info.args:
            lines.append("")
            lines.append("Arguments:")
            for arg in info.args:
                required = "required" if arg.required else "optional"
                desc = arg.description or f"{arg.arg_type} value"
                default = (
                    f" (default: {arg.default})"
                    if arg.default is not None and not arg.required
                    else ""
                )
                lines.append(f"  {arg.name}: {desc} [{required}]{default}")
        return "\n".join(lines)
