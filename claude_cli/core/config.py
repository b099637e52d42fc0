"""Configuration record and its JSON / Lua file loaders.

Every loader reduces its file to a plain dict of the fields it found and
passes it to :func:`resolve_config`, which applies the one precedence chain
used everywhere: file value, then environment variable, then built-in
default. The environment is always passed in explicitly.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import lupa
from platformdirs import user_config_dir

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "claude-cli"
FALLBACK_MODEL = "claude-3-sonnet"
CONFIG_FILENAME = "config.json"
LUA_CONFIG_FILENAME = "config.lua"

ENV_API_KEY = "CLAUDE_API_KEY"
ENV_MODEL = "CLAUDE_MODEL"
ENV_CONFIG_PATH = "CLAUDE_CONFIG_PATH"


class OutputFormat(Enum):
    TEXT = "Text"
    JSON = "Json"
    CSV = "Csv"
    MARKDOWN = "Markdown"


class LogLevel(IntEnum):
    """Severity levels, numbered like syslog priorities."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7

    @property
    def variant(self) -> str:
        return self.name.capitalize()


def default_config_dir() -> Path:
    return Path(user_config_dir(APP_NAME, appauthor=False))


@dataclass
class Config:
    api_key: str
    default_model: str
    output_format: OutputFormat
    log_level: LogLevel
    config_dir: Path
    history_file: Path
    log_dir: Path

    @classmethod
    def default(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        return resolve_config({}, environ)

    @property
    def path(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api_key": self.api_key,
            "default_model": self.default_model,
            "output_format": self.output_format.value,
            "log_level": self.log_level.variant,
            "config_dir": str(self.config_dir),
            "history_file": str(self.history_file),
            "log_dir": str(self.log_dir),
        }


def resolve_config(
    values: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None
) -> Config:
    """Build a :class:`Config` from partial file *values* and *environ*."""
    environ = environ or {}
    config_dir = Path(values.get("config_dir") or default_config_dir())
    return Config(
        api_key=values.get("api_key") or environ.get(ENV_API_KEY, ""),
        default_model=values.get("default_model") or environ.get(ENV_MODEL) or FALLBACK_MODEL,
        output_format=values.get("output_format") or OutputFormat.TEXT,
        log_level=values.get("log_level", LogLevel.INFO),
        config_dir=config_dir,
        history_file=Path(values.get("history_file") or config_dir / "history.json"),
        log_dir=Path(values.get("log_dir") or config_dir / "logs"),
    )


# ---------------------------------------------------------------------------
# JSON loader
# ---------------------------------------------------------------------------

_PATH_FIELDS = ("config_dir", "history_file", "log_dir")
_STRING_FIELDS = ("api_key", "default_model") + _PATH_FIELDS


def _variant(enum_cls, name: str, value: Any):
    # JSON files name enum members by their capitalised variant ("Text", "Info").
    if isinstance(value, str):
        for member in enum_cls:
            if member.name.capitalize() == value:
                return member
    choices = "|".join(m.name.capitalize() for m in enum_cls)
    raise ConfigError(f"invalid {name} {value!r} (expected one of {choices})")


def parse_json_config(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ConfigError(f"config file is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("config file must contain a JSON object")

    values: Dict[str, Any] = {}
    for key in _STRING_FIELDS:
        if data.get(key) is not None:
            if not isinstance(data[key], str):
                raise ConfigError(f"config field {key!r} must be a string")
            values[key] = data[key]
    if data.get("output_format") is not None:
        values["output_format"] = _variant(OutputFormat, "output_format", data["output_format"])
    if data.get("log_level") is not None:
        values["log_level"] = _variant(LogLevel, "log_level", data["log_level"])
    return values


def _read_config_text(path: Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"config file {path} is not valid UTF-8: {exc}") from exc


def load_json_config(path: Path, environ: Optional[Mapping[str, str]] = None) -> Config:
    return resolve_config(parse_json_config(_read_config_text(path)), environ)


# ---------------------------------------------------------------------------
# Lua loader
# ---------------------------------------------------------------------------

_LUA_OUTPUT_FORMATS = {
    "text": OutputFormat.TEXT,
    "json": OutputFormat.JSON,
    "csv": OutputFormat.CSV,
    "markdown": OutputFormat.MARKDOWN,
}
_LUA_LOG_LEVELS = {level.name.lower(): level for level in LogLevel}


def parse_lua_config(chunk: str) -> Dict[str, Any]:
    """Run *chunk* and read the global ``claude_config`` table."""
    lua = lupa.LuaRuntime(unpack_returned_tuples=True)
    try:
        lua.execute(chunk)
    except lupa.LuaError as exc:
        raise ConfigError(f"Lua config failed to run: {exc}") from exc

    table = lua.globals()["claude_config"]
    if table is None or lupa.lua_type(table) != "table":
        raise ConfigError("Lua config does not define a claude_config table")

    values: Dict[str, Any] = {}
    for key in _STRING_FIELDS:
        value = table[key]
        if isinstance(value, str):
            values[key] = value
    # Unrecognized (or absent) enum strings fall back to the defaults.
    output_format = table["output_format"]
    if isinstance(output_format, str) and output_format in _LUA_OUTPUT_FORMATS:
        values["output_format"] = _LUA_OUTPUT_FORMATS[output_format]
    log_level = table["log_level"]
    if isinstance(log_level, str) and log_level in _LUA_LOG_LEVELS:
        values["log_level"] = _LUA_LOG_LEVELS[log_level]
    return values


def load_lua_config(path: Path, environ: Optional[Mapping[str, str]] = None) -> Config:
    return resolve_config(parse_lua_config(_read_config_text(path)), environ)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

LOADERS: Dict[str, Callable[..., Config]] = {
    ".json": load_json_config,
    ".lua": load_lua_config,
}


def find_config_file(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the config file to read when none was given explicitly."""
    environ = environ or {}
    if environ.get(ENV_CONFIG_PATH):
        return Path(environ[ENV_CONFIG_PATH])
    config_dir = default_config_dir()
    json_path = config_dir / CONFIG_FILENAME
    lua_path = config_dir / LUA_CONFIG_FILENAME
    if not json_path.exists() and lua_path.exists():
        return lua_path
    return json_path


def load_config(
    path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None
) -> Config:
    """Load the configuration, falling back to defaults if the file is absent."""
    path = Path(path) if path is not None else find_config_file(environ)
    if not path.exists():
        logger.debug("no config file at %s, using defaults", path)
        return Config.default(environ)

    loader = LOADERS.get(path.suffix.lower())
    if loader is None:
        raise ConfigError(f"unsupported config file type: {path.name}")
    logger.debug("loading config from %s", path)
    return loader(path, environ)


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """Write *config* as pretty-printed JSON and return the file written."""
    path = Path(path) if path is not None else config.path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
    logger.info("saved config to %s", path)
    return path
