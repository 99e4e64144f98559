#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/progress.py
"""Progress callback system for the parse pipeline.

The pipeline reports one event per pass boundary so embedders can drive a
progress bar. Events are purely observational: they never change the tree.

Examples
--------
Basic progress tracking:

    >>> from ltxtree import parse_latex
    >>> from ltxtree.progress import ProgressEvent
    >>>
    >>> def my_progress_handler(event: ProgressEvent):
    ...     print(f"{event.event_type}: {event.message} ({event.current}/{event.total})")
    >>>
    >>> result = parse_latex(r"$x^2$", progress_callback=my_progress_handler)

Reacting to specific passes:

    >>> def pass_handler(event: ProgressEvent):
    ...     if event.event_type == "item_done" and event.metadata.get("pass") == "scripts":
    ...         print("scripts grouped")

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal

EventType = Literal["started", "item_done", "finished", "error"]


@dataclass
class ProgressEvent:
    """Progress event emitted while a document is parsed.

    Parameters
    ----------
    event_type : EventType
        Type of progress event:

        - "started": the pipeline has begun, ``total`` is the number of steps
        - "item_done": one step finished, ``current`` is its 1-based index and
          ``metadata["pass"]`` names it
        - "finished": every step completed, ``current == total``
        - "error": a step raised; ``metadata["error"]`` holds the message

    message : str
        Human-readable description of the event
    current : int, default 0
        Current step index
    total : int, default 0
        Total number of steps (14 for the full pipeline)
    metadata : dict, default empty
        Additional event-specific information

    Examples
    --------
    >>> event = ProgressEvent("item_done", "Scripts grouped", current=7, total=14,
    ...                       metadata={"item_type": "pass", "pass": "scripts"})
    >>> str(event)
    '[ITEM_DONE] Scripts grouped (7/14)'

    """

    event_type: EventType
    message: str
    current: int = 0
    total: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return human-readable string representation.

        Returns
        -------
        str
            Formatted event description

        """
        progress = f"({self.current}/{self.total})" if self.total > 0 else ""
        return f"[{self.event_type.upper()}] {self.message} {progress}".strip()


# Type alias for progress callback functions
ProgressCallback = Callable[[ProgressEvent], None]
"""Type alias for progress callback functions.

A progress callback is any callable that accepts a ProgressEvent and returns None.
Exceptions raised by a callback are logged and do not interrupt the pipeline.
"""
