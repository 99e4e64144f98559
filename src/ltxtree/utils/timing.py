#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/utils/timing.py
"""Timing helpers for DEBUG-level diagnostics."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log the duration of a block at DEBUG level.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use for DEBUG messages
    operation : str
        Description of the timed operation (e.g., "Parsing main.tex")

    Examples
    --------
        >>> logger = logging.getLogger(__name__)
        >>> with debug_timer(logger, "Parsing main.tex"):
        ...     result = parse_file("main.tex")
        ... # Logs: "Parsing main.tex completed in 0.12s" at DEBUG level

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.2f}s")
    else:
        yield
