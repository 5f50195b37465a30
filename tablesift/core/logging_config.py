"""
Logging setup for TableSift.

Library modules only ever call get_logger(__name__); handlers are attached
once, by the embedding application or the CLI, through setup_logging().
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from tablesift.core.constants import LOG_FORMAT, LOG_DATE_FORMAT

ROOT_LOGGER_NAME = "tablesift"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(
    level: Union[str, int] = "WARNING",
    log_file: Optional[str] = None,
    fmt: str = LOG_FORMAT
) -> logging.Logger:
    """
    Configure the package logger.

    Replaces any handlers previously installed by this function so repeated
    calls (tests, notebooks) do not duplicate output.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or logging constant
        log_file: Optional file path; parent directories are created
        fmt: Log record format

    Returns:
        The configured 'tablesift' logger
    """
    if isinstance(level, str):
        numeric_level = _LEVELS.get(level.upper())
        if numeric_level is None:
            raise ValueError(f"Invalid log level: {level}")
    else:
        numeric_level = level

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(numeric_level)

    for handler in list(root.handlers):
        if getattr(handler, "_tablesift_handler", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(fmt, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console._tablesift_handler = True
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler._tablesift_handler = True
        root.addHandler(file_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger for a module (use with __name__)."""
    return logging.getLogger(name)
