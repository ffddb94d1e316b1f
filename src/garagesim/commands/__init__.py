# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Text command handling for the garage door simulator.

This module provides a command dispatcher used by:
- Interactive keyboard input
- Direct Python API calls

The command handler is split into category-specific mixins:
- GarageCommandsMixin: Control panel buttons and manual stepping
- InfoCommandsMixin: Status, sensors and help
- ScriptsCommandsMixin: Script listing and running
- ControlCommandsMixin: Simulator control (shutdown, debug)
"""

from .base import (
    ArgSpec,
    CommandInfo,
    CommandResult,
    command,
    get_command_registry,
    parse_arg,
)
from .handler import CommandHandler

__all__ = [
    "ArgSpec",
    "CommandHandler",
    "CommandInfo",
    "CommandResult",
    "command",
    "get_command_registry",
    "parse_arg",
]
