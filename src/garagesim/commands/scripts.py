# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Script running commands."""

from pathlib import Path
from typing import TYPE_CHECKING

from .base import ArgSpec, CommandResult, command

if TYPE_CHECKING:
    from ..scripting import Script, ScriptRunner


class ScriptsCommandsMixin:
    """Mixin providing script running commands."""

    script_runner: "ScriptRunner"

    def load_script(self, script_ref: str) -> "Script":
        """Load a script - auto-detect if it's a file path or built-in name."""
        from ..scripting import Script, get_builtin_script

        path = Path(script_ref)
        if path.exists():
            return Script.from_file(path)
        return get_builtin_script(script_ref)

    @command("list", ["scripts"], "List built-in scripts", category="scripts")
    def list_scripts(self) -> CommandResult:
        """List available built-in scripts."""
        from ..scripting import list_builtin_scripts

        scripts = list_builtin_scripts()
        lines = ["Built-in scripts:"]
        for name, desc in scripts:
            lines.append(f"  {name}: {desc}")
        return CommandResult(True, "\n".join(lines), {"scripts": scripts})

    @command(
        "run",
        ["r", "file"],
        "Run a script",
        category="scripts",
        args=[ArgSpec("script", "string", description="Script name or file path")],
    )
    async def run(self, script_ref: str) -> CommandResult:
        """Run a script (built-in name or file path)."""
        script = self.load_script(script_ref)
        success = await self.script_runner.run(script)
        status = "PASSED" if success else "FAILED"
        return CommandResult(success, f"Script {status}: {script.name}")
