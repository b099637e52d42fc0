from .config import Config, LogLevel, OutputFormat, load_config, save_config
from .errors import ApiError, ChatCliError, ConfigError, SessionError
from .session import Message, Role, Session, SessionStore

__all__ = [
    "Config",
    "LogLevel",
    "OutputFormat",
    "load_config",
    "save_config",
    "ApiError",
    "ChatCliError",
    "ConfigError",
    "SessionError",
    "Message",
    "Role",
    "Session",
    "SessionStore",
]
