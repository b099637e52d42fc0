"""Spinner shown next to the reply label while a request is in flight."""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from yaspin import yaspin  # type: ignore

from .ansi import console as default_console


class Spinner:
    """Print *prefix* and spin after it until :meth:`stop` is called.

    The spinner itself is only drawn when the console is a terminal, so piped
    output and tests receive just the prefix.
    """

    def __init__(self, prefix: str = "", console: Optional[Console] = None):
        self._prefix = prefix
        self._console = console or default_console
        self._started = False
        self._spinner = yaspin(text="", side="right") if self._console.is_terminal else None

    def start(self) -> None:
        if self._started:
            return
        self._console.print(self._prefix, end="")
        self._console.file.flush()
        if self._spinner is not None:
            self._spinner.start()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        if self._spinner is not None:
            # yaspin clears the whole line when it stops
            self._spinner.stop()
            self._console.file.write("\r")
            self._console.print(self._prefix, end="")
            self._console.file.flush()
        self._started = False

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
