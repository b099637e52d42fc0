"""Raw-mode keyboard input built on prompt_toolkit's VT100 parser."""

from __future__ import annotations

import logging
import select
from contextlib import contextmanager
from typing import Iterator, Optional

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys

logger = logging.getLogger(__name__)

# A raw terminal sends CR for Enter; piped input arrives with LF.
SUBMIT_KEYS = frozenset({Keys.ControlM, Keys.ControlJ})
# Both BS and DEL are decoded as c-h.
BACKSPACE_KEYS = frozenset({Keys.ControlH})


def is_submit(key_press: KeyPress) -> bool:
    return key_press.key in SUBMIT_KEYS


def is_escape(key_press: KeyPress) -> bool:
    return key_press.key == Keys.Escape


def is_backspace(key_press: KeyPress) -> bool:
    return key_press.key in BACKSPACE_KEYS


def typed_character(key_press: KeyPress) -> Optional[str]:
    """Return the printable character *key_press* types, if any."""
    key = key_press.key
    # Keys members are str subclasses too, so exclude them first.
    if isinstance(key, Keys) or not isinstance(key, str):
        return None
    if len(key) == 1 and key.isprintable():
        return key
    return None


class Terminal:
    """Key source reading the process's stdin one key press at a time."""

    def __init__(self, input: Optional[Input] = None) -> None:
        self._input = input

    @property
    def input(self) -> Input:
        if self._input is None:
            self._input = create_input()
        return self._input

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Put the terminal in raw mode; the previous mode is always restored."""
        logger.debug("entering raw mode")
        try:
            with self.input.raw_mode():
                yield
        finally:
            logger.debug("left raw mode")

    def keys(self) -> Iterator[KeyPress]:
        """Yield key presses until stdin is closed."""
        inp = self.input
        while not inp.closed:
            select.select([inp.fileno()], [], [])
            # flush_keys() releases a lone Escape the parser is holding back.
            yield from inp.read_keys()
            yield from inp.flush_keys()
