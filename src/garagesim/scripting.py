# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Scenario scripts for the garage door simulator.

Scripts are a list of steps run in order against a live GarageSimulator.
They can be written as YAML:

    name: "Enter Garage"
    description: "Open the door and park"
    steps:
      - open
      - action: wait_for
        condition: vehicle_inside
        timeout: 30
      - action: assert
        condition: door_state
        value: OPEN

or built from simple command lines:

    Script.from_simple_commands(["open", "settle", "assert vehicle_inside"])

Supported actions:
    open, close, stop, reset     Press a control panel button
    resize <width> <height>      Change the viewport size
    wait <seconds>               Sleep
    wait_for <condition> [value] [timeout]
                                 Wait until a condition holds
    settle [timeout]             Wait until nothing is moving
    step [ticks]                 Advance the simulation manually
    assert <condition> [value]   Fail the script unless a condition holds
    log <message>                Write a message to the log

Conditions are snapshot fields (door_state, door_position, door_animating,
vehicle_state, vehicle_position, top_sensor, bottom_sensor, in_motion,
open_enabled, close_enabled, viewport_width, viewport_height) or one of the
shortcuts door_open, door_shut, vehicle_outside, vehicle_entering,
vehicle_inside, settled and moving. Numeric values may carry a comparison
prefix such as ">=0.3".
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import math
import operator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Union

import yaml

from .commands.base import parse_bool
from .const import DOOR_POSITION_OPEN, DOOR_POSITION_SHUT
from .state import DoorState, GarageSnapshot, VehicleState

if TYPE_CHECKING:
    from .simulator import GarageSimulator

logger = logging.getLogger(__name__)

BUILTIN_SCRIPTS_DIR = Path(__file__).parent / "scripts"

DEFAULT_WAIT_TIMEOUT = 30.0

# Snapshot fields usable in conditions, keyed by condition name
_FIELD_CONDITIONS = {
    "door_state": "door_state",
    "door_position": "door_position",
    "door_animating": "door_animating",
    "animating": "door_animating",
    "vehicle_state": "vehicle_state",
    "vehicle_position": "vehicle_position",
    "top_sensor": "top_sensor",
    "bottom_sensor": "bottom_sensor",
    "in_motion": "in_motion",
    "open_enabled": "open_enabled",
    "close_enabled": "close_enabled",
    "viewport_width": "viewport_width",
    "viewport_height": "viewport_height",
}

# Shortcut conditions that take no value
_SHORTCUT_CONDITIONS: dict[str, Callable[[GarageSnapshot], bool]] = {
    "door_open": lambda s: (
        s.door_state is DoorState.OPEN
        and not s.door_animating
        and s.door_position == DOOR_POSITION_OPEN
    ),
    "door_shut": lambda s: (
        s.door_state is DoorState.SHUT
        and not s.door_animating
        and s.door_position == DOOR_POSITION_SHUT
    ),
    "vehicle_outside": lambda s: s.vehicle_state is VehicleState.OUTSIDE,
    "vehicle_entering": lambda s: s.vehicle_state is VehicleState.ENTERING,
    "vehicle_inside": lambda s: s.vehicle_state is VehicleState.INSIDE,
    "settled": lambda s: not s.in_motion,
    "moving": lambda s: s.in_motion,
}

_COMPARISONS = [
    (">=", operator.ge),
    ("<=", operator.le),
    ("!=", operator.ne),
    (">", operator.gt),
    ("<", operator.lt),
    ("=", operator.eq),
]


class ScriptError(Exception):
    """Raised for malformed scripts or steps that cannot run."""


class AssertionFailed(ScriptError):
    """Raised when an assert or wait_for condition does not hold."""


@dataclass
class ScriptStep:
    """A single script step."""

    action: str
    params: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if not self.params:
            return self.action
        args = " ".join(f"{k}={v}" for k, v in self.params.items())
        return f"{self.action} {args}"


@dataclass
class Script:
    """A named sequence of steps."""

    name: str
    description: str = ""
    steps: list[ScriptStep] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, content: str) -> "Script":
        """Parse a script from YAML text."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ScriptError(f"Invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ScriptError("Script must be a YAML dictionary")

        raw_steps = data.get("steps") or []
        if not isinstance(raw_steps, list):
            raise ScriptError("Script 'steps' must be a list")

        steps = []
        for i, raw in enumerate(raw_steps, 1):
            if isinstance(raw, str):
                steps.append(ScriptStep(action=raw.strip()))
            elif isinstance(raw, dict):
                params = dict(raw)
                action = params.pop("action", None)
                if not action:
                    raise ScriptError(f"Step {i} is missing 'action'")
                steps.append(ScriptStep(action=str(action), params=params))
            else:
                raise ScriptError(f"Step {i} has invalid step format: {raw!r}")

        return cls(
            name=str(data.get("name", "Unnamed Script")),
            description=str(data.get("description", "")),
            steps=steps,
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Script":
        """Load a script from a YAML file."""
        path = Path(path)
        try:
            content = path.read_text()
        except OSError as e:
            raise ScriptError(f"Cannot read script {path}: {e}") from e
        script = cls.from_yaml(content)
        if script.name == "Unnamed Script":
            script.name = path.stem
        return script

    @classmethod
    def from_simple_commands(
        cls, commands: list[str], name: str = "Commands"
    ) -> "Script":
        """Build a script from one-line commands such as "wait 2".

        Blank lines and lines starting with '#' are skipped.
        """
        steps = []
        for line in commands:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            steps.append(_parse_simple_command(line))
        return cls(name=name, steps=steps)


def _parse_simple_command(line: str) -> ScriptStep:
    """Turn "action arg..." into a ScriptStep."""
    parts = line.split()
    action = parts[0].lower()
    args = parts[1:]

    try:
        if action in ("open", "close", "stop", "reset") and not args:
            return ScriptStep(action)

        if action in ("settle", "step"):
            if not args:
                return ScriptStep(action)
            key = "ticks" if action == "step" else "timeout"
            value = int(args[0]) if action == "step" else float(args[0])
            return ScriptStep(action, {key: value})

        if action == "resize" and len(args) == 2:
            return ScriptStep(action, {"width": float(args[0]), "height": float(args[1])})

        if action == "wait" and args:
            return ScriptStep(action, {"seconds": float(args[0])})

        if action == "wait_for" and args:
            params: dict[str, Any] = {"condition": args[0]}
            rest = args[1:]
            if args[0] in _SHORTCUT_CONDITIONS and len(rest) == 1:
                params["timeout"] = float(rest[0])
            else:
                if rest:
                    params["value"] = rest[0]
                if len(rest) > 1:
                    params["timeout"] = float(rest[1])
            return ScriptStep(action, params)

        if action == "assert" and args:
            params = {"condition": args[0]}
            if len(args) > 1:
                params["value"] = " ".join(args[1:])
            return ScriptStep(action, params)

        if action == "log":
            return ScriptStep(action, {"message": " ".join(args)})
    except ValueError as e:
        raise ScriptError(f"Invalid arguments in '{line}': {e}") from e

    return ScriptStep(action, {"args": args} if args else {})


def condition_value(snapshot: GarageSnapshot, condition: str) -> Any:
    """Current value of a named condition."""
    if not isinstance(condition, str):
        raise ScriptError(f"Invalid condition: {condition!r}")
    shortcut = _SHORTCUT_CONDITIONS.get(condition)
    if shortcut is not None:
        return shortcut(snapshot)
    key = _FIELD_CONDITIONS.get(condition)
    if key is None:
        raise ScriptError(f"Unknown condition: {condition}")
    return snapshot.to_dict()[key]


def check_condition(
    snapshot: GarageSnapshot, condition: str, expected: Any = None
) -> bool:
    """Evaluate a condition against a snapshot.

    With no expected value the condition must be truthy. Booleans accept
    on/off style values; numbers accept an optional comparison prefix.
    """
    actual = condition_value(snapshot, condition)
    if expected is None:
        return bool(actual)

    if isinstance(actual, bool):
        if isinstance(expected, bool):
            return actual == expected
        parsed = parse_bool(str(expected))
        if parsed is None:
            raise ScriptError(f"Invalid value for {condition}: {expected!r}")
        return actual == parsed

    if isinstance(actual, (int, float)):
        return _compare_number(condition, float(actual), expected)

    return str(actual).upper() == str(expected).upper()


def _compare_number(condition: str, actual: float, expected: Any) -> bool:
    op = operator.eq
    text = str(expected).strip()
    for prefix, candidate in _COMPARISONS:
        if text.startswith(prefix):
            op = candidate
            text = text[len(prefix):].strip()
            break
    try:
        target = float(text)
    except ValueError:
        raise ScriptError(f"Invalid value for {condition}: {expected!r}") from None

    if op is operator.eq:
        return math.isclose(actual, target, abs_tol=1e-9)
    if op is operator.ne:
        return not math.isclose(actual, target, abs_tol=1e-9)
    return op(actual, target)


def _number(action: str, name: str, value: Any, convert: Callable[[Any], Any] = float):
    """Convert a step parameter, raising ScriptError if it is not a number."""
    try:
        return convert(value)
    except (TypeError, ValueError):
        raise ScriptError(f"Invalid {name} for {action}: {value!r}") from None


def get_builtin_script(name: str) -> Script:
    """Load a built-in script by name."""
    path = BUILTIN_SCRIPTS_DIR / f"{name}.yaml"
    if not path.is_file():
        raise ScriptError(f"Unknown built-in script: {name}")
    return Script.from_file(path)


def list_builtin_scripts() -> list[tuple[str, str]]:
    """List built-in scripts as (name, description) pairs."""
    scripts = []
    for path in sorted(BUILTIN_SCRIPTS_DIR.glob("*.yaml")):
        script = Script.from_file(path)
        scripts.append((path.stem, script.description))
    return scripts


class ScriptRunner:
    """Runs scripts against a simulator."""

    def __init__(self, simulator: "GarageSimulator"):
        self.simulator = simulator
        self._stop_event = asyncio.Event()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self):
        """Stop the running script before its next step."""
        self._stop_event.set()

    async def run(self, script: Script, verbose: bool = True) -> bool:
        """Run a script.

        Returns:
            True if every step succeeded, False otherwise.
        """
        self._stop_event.clear()
        self._running = True
        total = len(script.steps)
        if verbose:
            logger.info(f"Running script: {script.name} ({total} steps)")

        try:
            for i, step in enumerate(script.steps, 1):
                if self._stop_event.is_set():
                    logger.warning(f"Script stopped before step {i}: {script.name}")
                    return False
                if verbose:
                    logger.info(f"  [{i}/{total}] {step}")
                try:
                    await self._execute_step(step)
                except AssertionFailed as e:
                    logger.error(f"Assertion failed at step {i} ({step}): {e}")
                    return False
                except ScriptError as e:
                    logger.error(f"Script error at step {i} ({step}): {e}")
                    return False
        finally:
            self._running = False

        if self._stop_event.is_set():
            logger.warning(f"Script stopped: {script.name}")
            return False
        return True

    async def _execute_step(self, step: ScriptStep):
        handler = getattr(self, f"_action_{step.action}", None)
        if handler is None:
            raise ScriptError(f"Unknown action: {step.action}")
        try:
            inspect.signature(handler).bind(**step.params)
        except TypeError as e:
            raise ScriptError(f"Invalid parameters for {step.action}: {e}") from None
        await handler(**step.params)

    async def _sleep(self, seconds: float):
        """Sleep, waking early if the script is stopped."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

    # =========================================================================
    # Actions
    # =========================================================================

    async def _action_open(self):
        self.simulator.open()

    async def _action_close(self):
        self.simulator.close()

    async def _action_stop(self):
        self.simulator.stop()

    async def _action_reset(self):
        self.simulator.reset()

    async def _action_resize(self, width: float, height: float):
        self.simulator.resize(
            _number("resize", "width", width), _number("resize", "height", height)
        )

    async def _action_wait(self, seconds: float = 1.0):
        await self._sleep(_number("wait", "seconds", seconds))

    async def _action_step(self, ticks: int = 1):
        self.simulator.step(_number("step", "ticks", ticks, int))

    async def _action_log(self, message: str = ""):
        logger.info(f"[script] {message}")

    async def _action_assert(self, condition: str, value: Any = None):
        snapshot = self.simulator.snapshot()
        if not check_condition(snapshot, condition, value):
            actual = condition_value(snapshot, condition)
            expected = "true" if value is None else value
            raise AssertionFailed(f"{condition}: expected {expected}, got {actual}")

    async def _action_wait_for(
        self, condition: str, value: Any = None, timeout: float = DEFAULT_WAIT_TIMEOUT
    ):
        interval = self.simulator.controller.config.tick_interval
        loop = asyncio.get_running_loop()
        deadline = loop.time() + _number("wait_for", "timeout", timeout)
        while not check_condition(self.simulator.snapshot(), condition, value):
            if self._stop_event.is_set():
                return
            if loop.time() >= deadline:
                raise AssertionFailed(f"Timed out after {timeout}s waiting for {condition}")
            await asyncio.sleep(interval)

    async def _action_settle(self, timeout: float = DEFAULT_WAIT_TIMEOUT):
        if self.simulator.controller.in_motion and not self.simulator.ticking:
            raise ScriptError("Simulation is not ticking; use 'step'")
        try:
            await self.simulator.wait_until_settled(_number("settle", "timeout", timeout))
        except asyncio.TimeoutError:
            raise AssertionFailed(f"Still moving after {timeout}s") from None
