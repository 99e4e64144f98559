"""Logging setup for the ltxtree command line.

Library modules only create loggers with ``logging.getLogger(__name__)``;
handlers are installed here, once, by the entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that report every probe or node at DEBUG
NOISY_LIBRARIES = ("chardet", "pylatexenc")


def resolve_level(log_level: int | str) -> int:
    """Return the numeric level for a level or level name; unknown names mean INFO."""
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install the root handlers used while parsing from the command line.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "INFO")
    log_file : str, optional
        Also append every message to this file
    trace_mode : bool, default False
        Prefix messages with a timestamp and the logger name, and leave the
        chardet and pylatexenc loggers at the requested level

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    level = resolve_level(log_level)
    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(PLAIN_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if file_error is not None:
        root_logger.warning("Could not create log file %s: %s", log_file, file_error)
    elif log_file:
        root_logger.info("Logging to file: %s", log_file)

    if not trace_mode:
        for name in NOISY_LIBRARIES:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return root_logger
