# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""prompt_toolkit components for the interactive simulator console.

This module provides syntax highlighting, tab completion, styling, and
the InteractiveSession class used by cli.py.
"""

from pathlib import Path
from typing import Any, Callable, Optional, Union

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.styles import Style

# Importing the handler loads every command mixin, which fills the registry
from .commands.handler import CommandHandler  # noqa: F401
from .commands.base import CommandInfo, get_command_registry

HISTORY_FILE = Path.home() / ".garagesim_history"

GARAGE_STYLE = Style.from_dict(
    {
        "command": "#00aa00 bold",
        "alias": "#00aa00",
        "option": "#ff8800",
        "number": "#aa00aa",
        # Prompt - something moving (white) vs settled (gray)
        "prompt.moving": "#ffffff bold",
        "prompt.idle": "#888888",
    }
)

# Populated from the command registry on first use
_COMMANDS: set[str] = set()
_ALIASES: set[str] = set()
_OPTIONS: set[str] = set()


def init_command_sets():
    """Initialize command sets for syntax highlighting from the command registry."""
    if _COMMANDS:
        return
    for info in get_command_registry().values():
        _COMMANDS.add(info.name)
        _ALIASES.update(info.aliases)
        for arg in info.args:
            if arg.arg_type == "bool_toggle":
                _OPTIONS.update(["on", "off"])


def _is_number(word: str) -> bool:
    return word.replace(".", "", 1).lstrip("-").isdigit()


class GarageLexer(Lexer):
    """Syntax highlighter for simulator commands."""

    def lex_document(self, document):
        init_command_sets()

        def get_line_tokens(line_number):
            line = document.lines[line_number]
            tokens = []
            pos = 0

            for i, word in enumerate(line.split()):
                start = line.find(word, pos)
                if start > pos:
                    tokens.append(("", line[pos:start]))

                lowered = word.lower()
                if i == 0 and lowered in _COMMANDS:
                    tokens.append(("class:command", word))
                elif i == 0 and lowered in _ALIASES:
                    tokens.append(("class:alias", word))
                elif i > 0 and _is_number(word):
                    tokens.append(("class:number", word))
                elif i > 0 and lowered in _OPTIONS:
                    tokens.append(("class:option", word))
                else:
                    tokens.append(("", word))

                pos = start + len(word)

            if pos < len(line):
                tokens.append(("", line[pos:]))
            return tokens

        return get_line_tokens


class GarageCompleter(Completer):
    """Tab completion for simulator commands."""

    def _get_commands(self) -> list[tuple[str, str]]:
        """Get all unique command names with descriptions."""
        seen = set()
        commands = []
        for info in get_command_registry().values():
            if info.name in seen:
                continue
            seen.add(info.name)
            commands.append((info.name, info.description))
            for alias in info.aliases:
                if alias not in seen:
                    seen.add(alias)
                    commands.append((alias, f"Alias for {info.name}"))
        return sorted(commands, key=lambda x: x[0])

    def _get_arg_options(self, info: CommandInfo) -> list[tuple[str, str]]:
        if not info.args:
            return []
        arg = info.args[0]
        if arg.arg_type == "bool_toggle":
            return [("on", "Enable"), ("off", "Disable"), ("help", "Show help")]
        return [("help", "Show help for this command")]

    def _get_script_completions(self) -> list[tuple[str, str]]:
        """Built-in script names for the run command."""
        from .scripting import list_builtin_scripts

        return list_builtin_scripts()

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        words = text.split()

        if not text or text.endswith(" "):
            word_before = ""
            completed_words = words
        else:
            word_before = words[-1] if words else ""
            completed_words = words[:-1]

        if not completed_words:
            candidates = self._get_commands()
        elif len(completed_words) > 1:
            return
        else:
            info = get_command_registry().get(completed_words[0].lower())
            if info is None:
                return
            if info.name == "run":
                candidates = self._get_script_completions()
            else:
                candidates = self._get_arg_options(info)

        for name, desc in candidates:
            if name.startswith(word_before.lower()):
                yield Completion(
                    name,
                    start_position=-len(word_before),
                    display_meta=desc,
                )


def make_history(history_file: Optional[Union[str, Path]] = None) -> History:
    """Create prompt history: a file path, or in-memory for None/"none"."""
    if history_file is None or str(history_file).lower() == "none":
        return InMemoryHistory()
    path = Path(history_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return FileHistory(str(path))


class InteractiveSession:
    """Manages an interactive prompt session with history.

    Usage:
        session = InteractiveSession.create(
            history_file="/path/to/history",
            is_moving=lambda: simulator.controller.in_motion,
        )

        async for line in session.input_loop(stop_check=stop_event.is_set):
            result = await handler.execute(line)
            if result.message:
                print(session.format_output(result.message))
    """

    def __init__(
        self,
        history_file: Optional[Union[str, Path]] = None,
        get_prompt: Optional[Callable[[], Any]] = None,
        prompt_text: str = "garage> ",
    ):
        """Initialize the interactive session.

        Args:
            history_file: Path to history file, "none" to disable, or None for in-memory.
            get_prompt: Optional callable returning prompt (can return FormattedText).
                       If None, uses prompt_text.
            prompt_text: Simple string prompt (used if get_prompt is None).
        """
        self._prompt_text = prompt_text
        self._get_prompt = get_prompt
        self._history = make_history(history_file)
        self._session = PromptSession(
            history=self._history,
            completer=GarageCompleter(),
            complete_while_typing=False,
            lexer=GarageLexer(),
            style=GARAGE_STYLE,
            auto_suggest=AutoSuggestFromHistory(),
            enable_history_search=True,
        )

    @classmethod
    def create(
        cls,
        history_file: Optional[Union[str, Path]] = None,
        is_moving: Optional[Callable[[], bool]] = None,
    ) -> "InteractiveSession":
        """Create a session whose prompt colour tracks whether anything is moving."""
        prompt_text = "garage> "

        get_prompt = None
        if is_moving is not None:

            def get_prompt():
                style = "class:prompt.moving" if is_moving() else "class:prompt.idle"
                return FormattedText([(style, prompt_text)])

        return cls(history_file=history_file, get_prompt=get_prompt, prompt_text=prompt_text)

    @property
    def history(self) -> History:
        return self._history

    def invalidate(self):
        """Redraw the prompt (e.g. after the motion state changes)."""
        self._session.app.invalidate()

    def format_output(self, message: str) -> str:
        return f">>> {message}"

    async def prompt_async(self) -> Optional[str]:
        """Get input from the user asynchronously.

        Returns:
            The input line stripped, or None on EOF.
        """
        try:
            prompt = self._get_prompt or self._prompt_text
            line = await self._session.prompt_async(prompt)
            return line.strip() if line else ""
        except EOFError:
            return None
        except KeyboardInterrupt:
            return ""

    async def input_loop(self, stop_check: Optional[Callable[[], bool]] = None):
        """Async generator yielding non-empty input lines until EOF or stop_check()."""
        while True:
            if stop_check and stop_check():
                break
            line = await self.prompt_async()
            if line is None:
                break
            if line:
                yield line
