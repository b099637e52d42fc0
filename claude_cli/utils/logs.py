"""Log file and syslog setup."""

from __future__ import annotations

import logging
import syslog
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from ..core.config import LogLevel

LOGGER_NAME = "claude_cli"
LOG_FILENAME = "claude.log"
SYSLOG_IDENT = "claude-cli"

LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] (%(thread)d) %(filename)s:%(lineno)d %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS = {
    LogLevel.EMERGENCY: logging.CRITICAL,
    LogLevel.ALERT: logging.CRITICAL,
    LogLevel.CRITICAL: logging.CRITICAL,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.NOTICE: logging.INFO,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


def logging_level(level: LogLevel) -> int:
    return _LEVELS[level]


def setup_logging(log_dir: Path, level: LogLevel) -> logging.Handler:
    """Send the package's log records to a daily rotated file in *log_dir*.

    Seven days of files are kept. The handler is returned so callers (and
    tests) can detach it again.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = TimedRotatingFileHandler(
        log_dir / LOG_FILENAME, when="midnight", backupCount=7, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging_level(level))
    logger.addHandler(handler)
    return handler


def log_to_syslog(message: str, level: LogLevel) -> None:
    # LogLevel values are the syslog priorities.
    syslog.openlog(SYSLOG_IDENT, syslog.LOG_PID, syslog.LOG_USER)
    try:
        syslog.syslog(int(level), message)
    finally:
        syslog.closelog()
