import unittest

from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.keys import Keys

from claude_cli import ReplSession
from claude_cli.utils.terminal import Terminal, is_backspace, is_escape, is_submit, typed_character

from .test_base import BaseChatCLITest


def read_all(text):
    """Send *text* through a pipe, close it, and collect the decoded key presses."""
    with create_pipe_input() as pipe:
        pipe.send_text(text)
        pipe.close()
        terminal = Terminal(pipe)
        with terminal.raw_mode():
            return list(terminal.keys())


class TestTerminal(unittest.TestCase):
    def test_decodes_keys(self):
        key_presses = read_all("hi\x7f\r\x1b:q\r")

        self.assertEqual(
            [kp.key for kp in key_presses],
            ["h", "i", Keys.ControlH, Keys.ControlM, Keys.Escape, ":", "q", Keys.ControlM],
        )
        self.assertEqual([typed_character(kp) for kp in key_presses[:2]], ["h", "i"])
        self.assertTrue(is_backspace(key_presses[2]))
        self.assertTrue(is_submit(key_presses[3]))
        self.assertTrue(is_escape(key_presses[4]))

    def test_line_feed_submits(self):
        key_presses = read_all("a\n")
        self.assertEqual(key_presses[-1].key, Keys.ControlJ)
        self.assertTrue(is_submit(key_presses[-1]))

    def test_trailing_escape_is_flushed(self):
        key_presses = read_all("\x1b")
        self.assertEqual([kp.key for kp in key_presses], [Keys.Escape])

    def test_end_of_input_stops_iteration(self):
        self.assertEqual(read_all(""), [])


class TestReplOverPipe(BaseChatCLITest):
    def test_repl_quits_from_piped_keys(self):
        with create_pipe_input() as pipe:
            pipe.send_text("hi\x7f\r\x1b:q\r")
            pipe.close()
            repl = ReplSession(
                self.mock_client, self.config, terminal=Terminal(pipe), console=self.console
            )
            repl.run()

        self.mock_client.chat.assert_called_once_with("h", self.config.default_model)
        self.assertEqual(len(repl.history), 2)
        self.assertIn("Goodbye!", self.output.getvalue())

    def test_repl_stops_at_end_of_input(self):
        with create_pipe_input() as pipe:
            pipe.send_text("unsent")
            pipe.close()
            repl = ReplSession(
                self.mock_client, self.config, terminal=Terminal(pipe), console=self.console
            )
            repl.run()

        self.mock_client.chat.assert_not_called()
        self.assertEqual(repl.input_buffer, "unsent")
        self.assertIn("Goodbye!", self.output.getvalue())
