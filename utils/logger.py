"""
utils/logger.py
---------------
Centralized logging configuration.
All modules should use `get_logger(__name__)` to obtain a logger instance.
Statement tracing goes through `get_sql_logger()` and is silent unless
SQL_ECHO is enabled.
"""

import logging
import re
import sys

from config import LOG_LEVEL, SQL_ECHO

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
SQL_LOGGER_NAME = "northwind.sql"
_initialized = False

_WHITESPACE = re.compile(r"\s+")


def _init_logging() -> None:
    """Configure the root logger and the SQL trace logger once."""
    global _initialized
    if _initialized:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root.addHandler(handler)
    logging.getLogger(SQL_LOGGER_NAME).setLevel(logging.DEBUG if SQL_ECHO else logging.WARNING)
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A configured logging.Logger.
    """
    _init_logging()
    return logging.getLogger(name)


def get_sql_logger() -> logging.Logger:
    """Logger used to trace executed statements (DEBUG only when SQL_ECHO is set)."""
    _init_logging()
    return logging.getLogger(SQL_LOGGER_NAME)


def one_line(sql: str) -> str:
    """Collapse a multi-line statement to one line for log output."""
    return _WHITESPACE.sub(" ", sql).strip()
