"""Top-level package for LogDock."""
from __future__ import annotations

__all__ = [
    'init',
    'get_logger',
    'create_logger',
    # user id for the current request / task
    'set_user_id',
    'reset_user_id',
    'current_user_id',
    # Classes
    'LogDockLogger',
    'LogDockConfig',
    'LogDockHandler',
    'LogEntry',
    'LogLevel',
    'CallerInfo',
    # Errors
    'LogDockError',
    'LogDockConfigError',
    'LogDockTransportError',
    'log', 'debug', 'info', 'warn', 'warning', 'error',
]

from logging import NullHandler
from typing import Any

from ._client import (LogDockLogger, create_logger, get_logger,
                      get_logger_or_none, init)
from ._errors import LogDockConfigError, LogDockError, LogDockTransportError
from ._integrations import LogDockHandler
from ._log import LOG
from ._models import CallerInfo, LogDockConfig, LogEntry, LogLevel
from ._runtime import current_user_id, reset_user_id, set_user_id


# Set up logging to ``/dev/null`` like a library is supposed to.
# http://docs.python.org/3.3/howto/logging.html#configuring-logging-for-a-library
LOG.addHandler(NullHandler())


def version():
    from importlib.metadata import version
    __version__ = version('logdock')
    return __version__


# The functions below call `LogDockLogger._log` directly so that the call
# stack has the same depth as with the logger's own methods. Like those
# methods they never raise: a missing environment config is reported to the
# ``logdock`` logger and the entry is dropped.

def debug(message: str, user_id: str | None = None,
          metadata: dict[str, Any] | None = None) -> None:
    """
    Log a message with level 'DEBUG' on the package-wide logger,
    configured from ``LOGDOCK_*`` environment variables.
    """
    logger = get_logger_or_none()
    if logger is not None:
        logger._log(LogLevel.DEBUG, message, user_id, metadata)


def info(message: str, user_id: str | None = None,
         metadata: dict[str, Any] | None = None) -> None:
    """
    Log a message with level 'INFO' on the package-wide logger,
    configured from ``LOGDOCK_*`` environment variables.
    """
    logger = get_logger_or_none()
    if logger is not None:
        logger._log(LogLevel.INFO, message, user_id, metadata)


def warn(message: str, user_id: str | None = None,
         metadata: dict[str, Any] | None = None) -> None:
    """
    Log a message with level 'WARN' on the package-wide logger,
    configured from ``LOGDOCK_*`` environment variables.
    """
    logger = get_logger_or_none()
    if logger is not None:
        logger._log(LogLevel.WARN, message, user_id, metadata)


warning = warn


def error(message: str, user_id: str | None = None,
          metadata: dict[str, Any] | None = None) -> None:
    """
    Log a message with level 'ERROR' on the package-wide logger,
    configured from ``LOGDOCK_*`` environment variables.
    """
    logger = get_logger_or_none()
    if logger is not None:
        logger._log(LogLevel.ERROR, message, user_id, metadata)


def log(level: LogLevel | str, message: str, user_id: str | None = None,
        metadata: dict[str, Any] | None = None) -> None:
    """
    Log a message with an explicit ``level`` on the package-wide logger.
    """
    logger = get_logger_or_none()
    if logger is not None:
        logger._log(level, message, user_id, metadata)
