"""Key-driven interactive session.

The REPL has two input modes. In chat mode keystrokes build a message that
is sent to the model on Enter; Escape switches to command mode, where
keystrokes build a ``:command`` that runs on Enter.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from prompt_toolkit.key_binding.key_processor import KeyPress
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .core import Config, Message, Role, Session, SessionStore
from .core.client import ClaudeClientWrapper
from .core.session import utcnow
from .utils import ASSISTANT_LABEL, Ansi, Spinner, Terminal, console as default_console, role_label
from .utils.formatting import render_response, response_text
from .utils.terminal import is_backspace, is_escape, is_submit, typed_character

logger = logging.getLogger(__name__)

HELP_TEXT = """
Available Commands:
  :help            Show this help message
  :q, :quit        Exit the session
  :list [filter]   List chat history
  :save <name>     Save current session
  :load <name>     Load a saved session
  :model <name>    Switch Claude model
  :clear           Clear current session

In chat mode:
  <Esc>            Enter command mode
  <Enter>          Send message"""


class Mode(Enum):
    CHAT = "chat"
    COMMAND = "command"


class CommandKind(Enum):
    QUIT = "quit"
    HELP = "help"
    LIST = "list"
    SAVE = "save"
    LOAD = "load"
    MODEL = "model"
    CLEAR = "clear"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    # Name for save/load/model, filter for list, report text for unknown.
    argument: Optional[str] = None


_NO_ARGUMENT = {
    ":q": CommandKind.QUIT,
    ":quit": CommandKind.QUIT,
    ":help": CommandKind.HELP,
    ":clear": CommandKind.CLEAR,
}

_REQUIRED_ARGUMENT = {
    ":save": (CommandKind.SAVE, ":save requires a name"),
    ":load": (CommandKind.LOAD, ":load requires a name"),
    ":model": (CommandKind.MODEL, ":model requires a model name"),
}


def parse_command(text: str) -> Command:
    """Parse a command line such as ``:save notes`` into a :class:`Command`."""
    line = text.strip()
    parts = line.split()
    if not parts:
        return Command(CommandKind.UNKNOWN, "")

    token = parts[0]
    if token in _NO_ARGUMENT:
        return Command(_NO_ARGUMENT[token])
    if token == ":list":
        return Command(CommandKind.LIST, parts[1] if len(parts) > 1 else None)
    if token in _REQUIRED_ARGUMENT:
        kind, usage = _REQUIRED_ARGUMENT[token]
        if len(parts) > 1:
            return Command(kind, parts[1])
        return Command(CommandKind.UNKNOWN, usage)
    return Command(CommandKind.UNKNOWN, line)


class ReplSession:
    """State machine behind the interactive prompt."""

    def __init__(
        self,
        client: ClaudeClientWrapper,
        config: Config,
        *,
        store: Optional[SessionStore] = None,
        terminal: Optional[Terminal] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.client = client
        self.config = config
        self.store = store or SessionStore(config.config_dir)
        self.terminal = terminal or Terminal()
        self.console = console or default_console

        self.mode = Mode.CHAT
        self.input_buffer = ""
        self.command_buffer = ""
        self.history: List[Message] = []
        self.current_model = config.default_model

    @property
    def active_buffer(self) -> str:
        return self.input_buffer if self.mode is Mode.CHAT else self.command_buffer

    # ---------------- Output helpers ----------------

    def _echo(self, text: str) -> None:
        # Keystroke echo bypasses rich so control characters reach the terminal.
        self.console.file.write(text)
        self.console.file.flush()

    def show_prompt(self) -> None:
        self._echo("chat> " if self.mode is Mode.CHAT else ":")

    def show_help(self) -> None:
        self.console.print(HELP_TEXT, markup=False, highlight=False)

    def show_history(self, filter_text: Optional[str] = None) -> None:
        if not self.history:
            self.console.print("\nNo messages in current session")
            return

        self.console.print(Ansi.style("\nChat History:", Ansi.BOLD, Ansi.FG_MAGENTA))
        for idx, msg in enumerate(self.history, start=1):
            if filter_text is not None and filter_text not in msg.content:
                continue
            self.console.print(f"\n\\[{idx}] {role_label(msg.role.value)}: {escape(msg.content)}")

    # ---------------- Interaction loop ----------------

    def run(self) -> None:
        """Run until ``:q`` or the end of input; raw mode is always undone."""
        self.console.print(Panel.fit("Claude CLI", style="bold magenta"))
        self.console.print(
            Ansi.style(
                "Press <Esc> and type :help for commands, :q to quit.", Ansi.FG_YELLOW
            ),
            Ansi.style(f"Current model: {self.current_model}.", Ansi.FG_YELLOW),
            "",
            sep="\n",
        )
        logger.info("REPL started with model %s", self.current_model)

        with self.terminal.raw_mode():
            self.show_prompt()
            for key_press in self.terminal.keys():
                if self.handle_key(key_press):
                    break

        self.console.print("\nGoodbye!")
        logger.info("REPL finished")

    def handle_key(self, key_press: KeyPress) -> bool:
        """Apply one key press. Return True when the loop should stop."""
        if self.mode is Mode.CHAT:
            self._handle_chat_key(key_press)
            return False
        return self._handle_command_key(key_press)

    def _handle_chat_key(self, key_press: KeyPress) -> None:
        char = typed_character(key_press)
        if is_escape(key_press):
            self.mode = Mode.COMMAND
            self.command_buffer = ""
            self._echo("\n")
            self.show_prompt()
        elif is_submit(key_press):
            if self.input_buffer.strip():
                self._echo("\n")
                self.submit_chat()
                self.show_prompt()
        elif char is not None:
            self.input_buffer += char
            self._echo(char)
        elif is_backspace(key_press):
            if self.input_buffer:
                self.input_buffer = self.input_buffer[:-1]
                self._echo("\b \b")

    def _handle_command_key(self, key_press: KeyPress) -> bool:
        char = typed_character(key_press)
        if is_submit(key_press):
            self._echo("\n")
            if self.execute_command():
                return True
            self.mode = Mode.CHAT
            self.input_buffer = ""
            self.command_buffer = ""
            self.show_prompt()
        elif is_escape(key_press):
            self.mode = Mode.CHAT
            self.command_buffer = ""
            self._echo("\n")
            self.show_prompt()
        elif char is not None:
            self.command_buffer += char
            self._echo(char)
        elif is_backspace(key_press):
            if self.command_buffer:
                self.command_buffer = self.command_buffer[:-1]
                self._echo("\b \b")
        return False

    # ---------------- Chat ----------------

    def submit_chat(self) -> None:
        """Send the input buffer to the model and record the exchange.

        Transport errors propagate; the buffer and history are left as they
        were.
        """
        text = self.input_buffer
        sent_at = utcnow()
        with Spinner(prefix=f"{ASSISTANT_LABEL}> ", console=self.console):
            raw = self.client.chat(text, self.current_model)

        self.history.append(Message(Role.USER, text, sent_at))
        self.history.append(Message(Role.ASSISTANT, response_text(raw), sent_at))

        self.console.print()
        self.console.print(render_response(raw, self.config.output_format), markup=False)
        self.console.print()
        self.input_buffer = ""

    # ---------------- Commands ----------------

    def execute_command(self) -> bool:
        """Run the command buffer. Return True for quit."""
        command = parse_command(self.command_buffer)
        logger.debug("command %s %r", command.kind.value, command.argument)

        if command.kind is CommandKind.QUIT:
            return True
        if command.kind is CommandKind.HELP:
            self.show_help()
        elif command.kind is CommandKind.LIST:
            self.show_history(command.argument)
        elif command.kind is CommandKind.SAVE:
            self.save_session(command.argument)
        elif command.kind is CommandKind.LOAD:
            self.load_session(command.argument)
        elif command.kind is CommandKind.MODEL:
            self.current_model = command.argument
            self.console.print(f"Switched to model: {escape(self.current_model)}")
        elif command.kind is CommandKind.CLEAR:
            self.history.clear()
            self.console.print("History cleared")
        else:
            self.console.print(
                Ansi.style(f"Unknown command: {escape(command.argument or '')}", Ansi.FG_RED)
            )
        return False

    def save_session(self, name: str) -> None:
        now = utcnow()
        session = Session(
            id=name,
            model=self.current_model,
            messages=list(self.history),
            created_at=now,
            updated_at=now,
        )
        self.store.save(session)
        self.console.print(f"Session saved as: {escape(name)}")

    def load_session(self, name: str) -> None:
        session = self.store.load(name)
        self.history = list(session.messages)
        self.current_model = session.model
        self.console.print(f"Loaded session: {escape(name)}")
        self.show_history()
