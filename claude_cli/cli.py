"""Command-line entry points: ``claude`` and ``claude-config``."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from rich.markup import escape

from .core import ChatCliError, Config, LogLevel, OutputFormat, load_config, save_config
from .core.client import ClaudeClientWrapper, create_client
from .core.config import find_config_file
from .core.mcp import McpConfig, McpServer
from .repl import ReplSession
from .utils import Ansi, ERROR_LABEL, console
from .utils.formatting import render_response
from .utils.logs import log_to_syslog, setup_logging

logger = logging.getLogger(__name__)

_FORMAT_CHOICES = {fmt.name.lower(): fmt for fmt in OutputFormat}
_LEVEL_CHOICES = {level.name.lower(): level for level in LogLevel}


def _fail(exc: BaseException) -> int:
    console.print(f"\\[{ERROR_LABEL}] {escape(str(exc))}", highlight=False)
    logger.error("%s", exc)
    log_to_syslog(f"claude-cli: {exc}", LogLevel.ERROR)
    return 1


# ---------------------------------------------------------------------------
# claude
# ---------------------------------------------------------------------------

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="claude",
        description="Chat with Claude models from the terminal. "
        "Without a message an interactive session is started.",
    )
    parser.add_argument("--model", "-m", help="Model name to use (overrides the configured default)")
    parser.add_argument(
        "--format", "-f", choices=sorted(_FORMAT_CHOICES), help="Output format for replies"
    )
    parser.add_argument("--config", "-c", type=Path, help="Config file (.json or .lua)")
    parser.add_argument(
        "--list-models", action="store_true", help="List the models the API offers and exit"
    )
    parser.add_argument("message", nargs="*", help="Message to send; omit to start the REPL")
    return parser.parse_args(argv)


def main(
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    client: Optional[ClaudeClientWrapper] = None,
) -> int:
    args = _parse_args(argv)
    environ = dict(os.environ) if environ is None else environ

    try:
        config = load_config(args.config, environ)
        setup_logging(config.log_dir, config.log_level)
        if args.model:
            config.default_model = args.model
        if args.format:
            config.output_format = _FORMAT_CHOICES[args.format]

        if client is None:
            if not config.api_key:
                console.print(
                    f"\\[{ERROR_LABEL}] no API key configured. "
                    "Set CLAUDE_API_KEY or add api_key to the config file."
                )
                return 1
            client = ClaudeClientWrapper(create_client(config.api_key))

        if args.list_models:
            for model in client.list_models():
                console.print(model, markup=False, highlight=False)
            return 0

        if args.message:
            message = " ".join(args.message)
            raw = client.chat(message, config.default_model)
            console.print(render_response(raw, config.output_format), markup=False)
            return 0

        ReplSession(client, config).run()
        return 0
    except (ChatCliError, OSError) as exc:
        return _fail(exc)


def run_cli() -> None:  # pragma: no cover
    sys.exit(main())


# ---------------------------------------------------------------------------
# claude-config
# ---------------------------------------------------------------------------

def _parse_config_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="claude-config", description="Inspect and edit the claude-cli configuration."
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--show", "-s", action="store_true", help="Show current configuration")
    group.add_argument("--reset", "-r", action="store_true", help="Reset configuration to defaults")
    group.add_argument("--mcp-list", action="store_true", help="List registered MCP servers")
    group.add_argument("--mcp-add", type=Path, metavar="FILE", help="Register an MCP server from a JSON file")
    group.add_argument("--mcp-remove", metavar="NAME", help="Remove a registered MCP server")
    parser.add_argument("--model", help="Set the default model")
    parser.add_argument("--format", choices=sorted(_FORMAT_CHOICES), help="Set the output format")
    parser.add_argument("--log-level", choices=list(_LEVEL_CHOICES), help="Set the log level")
    return parser.parse_args(argv)


def config_main(
    argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None
) -> int:
    args = _parse_config_args(argv)
    environ = dict(os.environ) if environ is None else environ
    path = find_config_file(environ)
    # Edits are always written back as JSON.
    save_path = path if path.suffix == ".json" else None

    try:
        if args.reset:
            config = Config.default(environ)
            save_config(config, save_path)
            console.print("Configuration reset to defaults")
            return 0

        config = load_config(path, environ)

        if args.model or args.format or args.log_level:
            if args.model:
                config.default_model = args.model
            if args.format:
                config.output_format = _FORMAT_CHOICES[args.format]
            if args.log_level:
                config.log_level = _LEVEL_CHOICES[args.log_level]
            written = save_config(config, save_path)
            console.print(f"Configuration saved to {written}", markup=False)
            if not args.show:
                return 0

        if args.show:
            console.print("Current configuration:")
            console.print_json(data=config.to_dict())
            return 0

        if args.mcp_list or args.mcp_add or args.mcp_remove:
            return _mcp_command(args, McpConfig.load(config.config_dir))

        console.print("Use --help to see available options")
        return 0
    except (ChatCliError, OSError) as exc:
        return _fail(exc)


def _mcp_command(args: argparse.Namespace, registry: McpConfig) -> int:
    if args.mcp_add:
        try:
            server = McpServer.from_dict(json.loads(args.mcp_add.read_text(encoding="utf-8")))
        except (ValueError, KeyError, TypeError) as exc:
            console.print(f"\\[{ERROR_LABEL}] invalid MCP server definition: {escape(str(exc))}")
            return 1
        registry.add_server(server)
        console.print(f"Registered MCP server {server.name}", markup=False)
    elif args.mcp_remove:
        registry.remove_server(args.mcp_remove)
        console.print(f"Removed MCP server {args.mcp_remove}", markup=False)
    else:
        if not registry.servers:
            console.print("(no MCP servers registered)")
        for server in registry.servers:
            state = Ansi.style("enabled", Ansi.FG_GREEN) if server.enabled else Ansi.style("disabled", Ansi.DIM)
            console.print(f"  {server.name}  {server.url}  ({state})")
    return 0


def run_config_cli() -> None:  # pragma: no cover
    sys.exit(config_main())


if __name__ == "__main__":  # pragma: no cover
    run_cli()
