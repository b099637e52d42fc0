"""Console and markup helpers built on :mod:`rich`.

Styling is skipped entirely when ``NO_COLOR`` is set.
"""

import os
from rich.console import Console


console = Console()


class Ansi:
    """Style names used for prompts, labels and notices."""

    BOLD = "bold"
    DIM = "dim"

    FG_GREEN = "green"
    FG_CYAN = "cyan"
    FG_MAGENTA = "magenta"
    FG_YELLOW = "yellow"
    FG_RED = "red"

    @staticmethod
    def style(text: str, *codes: str) -> str:
        """Return *text* wrapped in rich markup unless ``NO_COLOR`` is set."""
        if os.getenv("NO_COLOR") is not None:
            return text
        return f"[{' '.join(codes)}]{text}[/]"


USER_LABEL = Ansi.style("user", Ansi.FG_CYAN, Ansi.BOLD)
ASSISTANT_LABEL = Ansi.style("assistant", Ansi.FG_GREEN, Ansi.BOLD)
ERROR_LABEL = Ansi.style("error", Ansi.FG_RED, Ansi.BOLD)

_ROLE_LABELS = {"user": USER_LABEL, "assistant": ASSISTANT_LABEL}


def role_label(role: str) -> str:
    return _ROLE_LABELS.get(role, role)
