"""Logging setup shared by the library and the ``netpath`` command.

Every module logs through ``get_logger(__name__)``; records flow up to one
``netpath`` logger that owns the only handler. The handler writes to stderr
because stdout carries query results and exports.

The starting level is INFO unless ``NETPATH_LOG_LEVEL`` names another level
(``DEBUG``, ``WARNING``, ...). The CLI's ``-v``/``--quiet`` flags override it
through ``configure_cli_logging``.
"""

import logging
import os
import sys
from typing import Optional

ROOT_LOGGER_NAME = "netpath"
LOG_LEVEL_ENV = "NETPATH_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def level_from_name(name: Optional[str], default: int = logging.INFO) -> int:
    """Map a level name such as ``"debug"`` to its numeric value.

    Unknown or empty names give ``default``.
    """
    if not name:
        return default
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else default


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Install the single ``netpath`` handler; later calls are no-ops.

    Args:
        level: Starting level. Defaults to ``NETPATH_LOG_LEVEL`` or INFO.
        format_string: Record format (default: time, logger, level, message).
        handler: Handler to install (default: stream handler on stderr).
    """
    global _configured

    if _configured:
        return

    if level is None:
        level = level_from_name(os.getenv(LOG_LEVEL_ENV))

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root.addHandler(handler)

    # pytest's caplog listens on the process root logger
    root.propagate = True

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a netpath module; level and output come from ``netpath``."""
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Apply ``level`` to the ``netpath`` logger and its handler."""
    setup_root_logger()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def configure_cli_logging(verbose: bool = False, quiet: bool = False) -> int:
    """Set the level for a CLI run and return it.

    ``verbose`` selects DEBUG and wins over ``quiet`` (WARNING). With neither
    flag the level is taken from ``NETPATH_LOG_LEVEL``, falling back to INFO.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = level_from_name(os.getenv(LOG_LEVEL_ENV))
    set_global_log_level(level)
    return level


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the installed handler so the next call reconfigures (tests)."""
    global _configured
    _configured = False

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


setup_root_logger()
