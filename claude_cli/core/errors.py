"""Exception hierarchy shared by the CLI components."""

from __future__ import annotations

from typing import Optional


class ChatCliError(Exception):
    """Base class for every error raised by claude_cli."""


class ConfigError(ChatCliError):
    """A configuration (or MCP registry) file could not be read or parsed."""


class SessionError(ChatCliError):
    """A saved session file exists but is not a valid session."""


class ApiError(ChatCliError):
    """The chat endpoint returned a failure or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
