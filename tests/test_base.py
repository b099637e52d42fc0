import io
import tempfile
import unittest
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import Mock

from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys
from rich.console import Console

from claude_cli import ClaudeClientWrapper, ReplSession
from claude_cli.core.config import resolve_config

ENTER = KeyPress(Keys.ControlM)
ESCAPE = KeyPress(Keys.Escape)
BACKSPACE = KeyPress(Keys.ControlH)


def typed(text):
    """Key presses for typing *text* character by character."""
    return [KeyPress(ch) for ch in text]


def command(text):
    """Key presses that enter command mode, type *text* and submit it."""
    return [ESCAPE] + typed(text) + [ENTER]


class FakeTerminal:
    """Replays a fixed list of key presses and records raw-mode use."""

    def __init__(self, key_presses=()):
        self.key_presses = list(key_presses)
        self.raw_entered = 0
        self.in_raw_mode = False

    @contextmanager
    def raw_mode(self):
        self.raw_entered += 1
        self.in_raw_mode = True
        try:
            yield
        finally:
            self.in_raw_mode = False

    def keys(self):
        yield from self.key_presses


class BaseChatCLITest(unittest.TestCase):
    def setUp(self):
        # Keep sessions and logs inside a throwaway config directory
        self.tmp = tempfile.TemporaryDirectory()
        self.config_dir = Path(self.tmp.name)
        self.config = resolve_config(
            {"config_dir": str(self.config_dir)}, {"CLAUDE_API_KEY": "test-key"}
        )

        # Stub transport
        self.mock_client = Mock(spec=ClaudeClientWrapper)
        self.mock_client.chat.return_value = "hello"

        # Capture everything the REPL prints
        self.output = io.StringIO()
        self.console = Console(file=self.output, width=120, force_terminal=False, color_system=None)

        self.terminal = FakeTerminal()
        self.repl = ReplSession(
            self.mock_client,
            self.config,
            terminal=self.terminal,
            console=self.console,
        )

    def tearDown(self):
        self.tmp.cleanup()

    def run_keys(self, key_presses):
        self.terminal.key_presses = list(key_presses)
        self.repl.run()
        return self.output.getvalue()

    def feed(self, key_presses):
        """Apply key presses directly, returning True if one of them quit."""
        for key_press in key_presses:
            if self.repl.handle_key(key_press):
                return True
        return False
