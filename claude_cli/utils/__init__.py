from .ansi import (
    Ansi,
    USER_LABEL,
    ASSISTANT_LABEL,
    ERROR_LABEL,
    console,
    role_label,
)
from .spinner import Spinner
from .terminal import Terminal

__all__ = [
    "Ansi",
    "USER_LABEL",
    "ASSISTANT_LABEL",
    "ERROR_LABEL",
    "console",
    "role_label",
    "Spinner",
    "Terminal",
]
