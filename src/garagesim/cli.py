# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""CLI for the garage door simulator.

This module provides the interactive command-line interface for running
and controlling the simulation.
"""

import asyncio
import logging
import os
import sys
from typing import Optional

from prompt_toolkit.patch_stdout import patch_stdout

from .commands import CommandHandler
from .prompt_common import HISTORY_FILE, InteractiveSession
from .scripting import ScriptRunner, list_builtin_scripts
from .simulator import GarageSimulator
from .state import GarageSnapshot, MotionConfig, Viewport

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _stdin_available() -> bool:
    try:
        if sys.stdin and sys.stdin.fileno() >= 0:
            os.fstat(sys.stdin.fileno())
            return True
    except (OSError, ValueError, AttributeError):
        pass
    return False


async def run_simulator(
    width: float = 800.0,
    height: float = 400.0,
    tick_ms: Optional[float] = None,
    scripts: Optional[list[str]] = None,
    oneshot: bool = False,
    run_for: Optional[float] = None,
    history_file: Optional[str] = None,
    manual: bool = False,
) -> Optional[bool]:
    """Run the garage door simulator.

    Args:
        width: Initial viewport width
        height: Initial viewport height
        tick_ms: Tick interval in milliseconds (default: ~60Hz)
        scripts: Scripts to run (file paths or built-in names, auto-detected).
                 Implies non-interactive mode.
        oneshot: If True, exit after scripts complete (even if run_for is set)
        run_for: Maximum run time in seconds (oneshot can exit earlier)
        history_file: Prompt history file, "none" to disable
        manual: If True, never tick in real time; advance with 'step'

    Returns:
        Script result (True if all passed, False if any failed, None if no scripts)
    """
    config = MotionConfig()
    if tick_ms is not None:
        config.tick_interval = tick_ms / 1000

    simulator = GarageSimulator(config=config, viewport=Viewport(width, height))
    if manual:
        logger.info("Manual mode: use 'step' to advance the simulation")
    else:
        await simulator.start()

    script_runner = ScriptRunner(simulator)
    stop_event = asyncio.Event()
    script_result: list[Optional[bool]] = [None]

    cmd_handler = CommandHandler(
        simulator=simulator,
        script_runner=script_runner,
        stop_callback=stop_event.set,
    )

    interactive = not scripts
    if interactive:
        cmd_handler.set_interactive_mode(True)
        print("=" * 65)
        print(cmd_handler.get_help())
        print("=" * 65)
        print()

    background: list[asyncio.Task] = []

    if scripts:

        async def run_startup_scripts():
            all_success = True
            try:
                for script_ref in scripts:
                    try:
                        script = cmd_handler.load_script(script_ref)
                    except Exception as e:
                        print(f"Error loading script '{script_ref}': {e}")
                        all_success = False
                        continue
                    print(f"\n>>> Running script: {script.name}")
                    try:
                        success = await script_runner.run(script)
                    except Exception as e:
                        logger.error(f"Script '{script.name}' raised: {e}")
                        success = False
                    print(f">>> Script {'PASSED' if success else 'FAILED'}: {script.name}")
                    all_success = all_success and success
            except asyncio.CancelledError:
                pass
            finally:
                script_result[0] = all_success
                if oneshot:
                    print(f"\n>>> All scripts {'PASSED' if all_success else 'FAILED'}")
                    stop_event.set()

        background.append(asyncio.create_task(run_startup_scripts()))

    input_task: Optional[asyncio.Task] = None
    stdout_ctx = None

    if interactive:
        if _stdin_available():
            session = InteractiveSession.create(
                history_file=history_file,
                is_moving=lambda: simulator.controller.in_motion,
            )

            last_moving = [simulator.controller.in_motion]

            def on_frame(snapshot: GarageSnapshot):
                if snapshot.in_motion != last_moving[0]:
                    last_moving[0] = snapshot.in_motion
                    session.invalidate()

            simulator.add_frame_listener(on_frame)

            async def interactive_input_loop():
                try:
                    async for line in session.input_loop(stop_check=stop_event.is_set):
                        result = await cmd_handler.execute(line)
                        if result.message:
                            print(session.format_output(result.message))
                        if stop_event.is_set():
                            break
                except asyncio.CancelledError:
                    pass
                finally:
                    stop_event.set()

            # Log output is routed through prompt_toolkit for the rest of the run
            stdout_ctx = patch_stdout()
            stdout_ctx.__enter__()

            root_logger = logging.getLogger()
            for handler in root_logger.handlers[:]:
                if isinstance(handler, logging.StreamHandler):
                    root_logger.removeHandler(handler)
            new_handler = logging.StreamHandler(sys.stderr)
            new_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root_logger.addHandler(new_handler)

            input_task = asyncio.create_task(interactive_input_loop())
        else:
            logger.warning("stdin not available, running without interactive input")

    if run_for:

        async def timeout_shutdown():
            await asyncio.sleep(run_for)
            logger.info(f"Run time ({run_for}s) elapsed, shutting down")
            stop_event.set()

        background.append(asyncio.create_task(timeout_shutdown()))

    try:
        await stop_event.wait()
    except asyncio.CancelledError:
        pass
    finally:
        script_runner.stop()
        tasks = background + ([input_task] if input_task else [])
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        if stdout_ctx:
            stdout_ctx.__exit__(None, None, None)
        await simulator.shutdown()

    return script_result[0]


def main():
    """CLI entry point for the simulator."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Garage Door Simulator - door, limit sensors and a vehicle that parks"
    )
    parser.add_argument(
        "--width",
        type=float,
        default=800.0,
        help="Viewport width (default: 800)"
    )
    parser.add_argument(
        "--height",
        type=float,
        default=400.0,
        help="Viewport height (default: 400)"
    )
    parser.add_argument(
        "--tick-ms",
        type=float,
        metavar="MS",
        help="Tick interval in milliseconds (default: 16)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--script", "-s",
        action="append",
        dest="scripts",
        metavar="SCRIPT",
        help="Run a script (built-in name or file path, auto-detected). "
             "Can be specified multiple times to run scripts in sequence. "
             "Implies non-interactive mode."
    )
    parser.add_argument(
        "--oneshot",
        action="store_true",
        help="Exit after scripts complete (useful for CI/CD). Takes precedence over --run-for."
    )
    parser.add_argument(
        "--run-for", "-r",
        type=float,
        metavar="SECONDS",
        help="Maximum run time in seconds (--oneshot can exit earlier)"
    )
    parser.add_argument(
        "--list-scripts", "-l",
        action="store_true",
        help="List available built-in scripts and exit"
    )
    parser.add_argument(
        "--history",
        metavar="FILE",
        default=str(HISTORY_FILE),
        help=f"History file path, or 'none' to disable (default: {HISTORY_FILE})"
    )
    parser.add_argument(
        "--manual", "-m",
        action="store_true",
        help="Do not tick in real time; advance the simulation with 'step'"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format=LOG_FORMAT,
    )

    if args.list_scripts:
        print("Available built-in scripts:")
        for name, desc in list_builtin_scripts():
            print(f"  {name}: {desc}")
        return

    if args.oneshot and not args.scripts:
        parser.error("--oneshot requires at least one --script")
    if args.tick_ms is not None and args.tick_ms <= 0:
        parser.error("--tick-ms must be positive")
    if args.manual and args.scripts:
        parser.error("--manual and --script are mutually exclusive")

    try:
        result = asyncio.run(run_simulator(
            width=args.width,
            height=args.height,
            tick_ms=args.tick_ms,
            scripts=args.scripts,
            oneshot=args.oneshot,
            run_for=args.run_for,
            history_file=args.history,
            manual=args.manual,
        ))

        # Exit with appropriate code for CI/CD
        if args.oneshot and result is not None:
            sys.exit(0 if result else 1)

    except KeyboardInterrupt:
        print("\nSimulator stopped.")


if __name__ == "__main__":
    main()
