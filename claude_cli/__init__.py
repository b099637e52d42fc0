"""Terminal client for Anthropic's Claude models.

Features
--------
1. Single-shot mode: `claude "What is 2+2?"` prints one reply in the configured
   output format (text, json, csv or markdown).
2. Interactive mode: `claude` with no message starts a key-driven REPL. Type to
   chat, press <Esc> to enter command mode.
3. Named sessions: `:save NAME` / `:load NAME` persist the transcript and model
   under `<config_dir>/sessions/`.
4. Configuration in JSON (`config.json`) or Lua (`config.lua`), with
   `CLAUDE_API_KEY` and `CLAUDE_MODEL` as fallbacks; inspect it with
   `claude-config --show`.

Commands (press <Esc> first):

    :help                       – show the command summary
    :q, :quit                   – leave the REPL
    :list [FILTER]              – print the conversation, optionally filtered
    :save NAME                  – save the conversation as session NAME
    :load NAME                  – replace the conversation with session NAME
    :model NAME                 – switch model
    :clear                      – forget the conversation
"""
# Re-export useful symbols for convenience
from .core import Config, Message, OutputFormat, LogLevel, Role, Session, SessionStore
from .core.client import ClaudeClientWrapper
from .repl import ReplSession, parse_command
from .cli import main, run_cli

__all__ = [
    "Config",
    "Message",
    "OutputFormat",
    "LogLevel",
    "Role",
    "Session",
    "SessionStore",
    "ClaudeClientWrapper",
    "ReplSession",
    "parse_command",
    "main",
    "run_cli",
]
