#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/metadata.py
"""Metadata describing one rewrite pass.

Every pass is a plain function taking the root node and the conversion
context. :class:`PassMetadata` gives it a stable name for progress events,
the CLI ``--list-passes`` output and :func:`ltxtree.transforms.get_pass`.

Examples
--------
    >>> from ltxtree.transforms.scripts import build_scripts
    >>> metadata = PassMetadata(
    ...     name="scripts",
    ...     description="Group superscripts and subscripts with their base",
    ...     function=build_scripts,
    ... )

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from ltxtree.ast.nodes import Expression
    from ltxtree.context import ConversionContext

PassFunction = Callable[["Expression", "ConversionContext"], None]


@dataclass(frozen=True)
class PassMetadata:
    """Metadata for a rewrite pass.

    Parameters
    ----------
    name : str
        Unique identifier used in progress events
    description : str
        Human-readable description of what the pass does
    function : callable
        ``function(root, context)`` mutating the tree in place
    writes : tuple of str, default empty
        Context tables the pass fills in

    """

    name: str
    description: str
    function: PassFunction
    writes: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate metadata after initialization."""
        if not self.name:
            raise ValueError("Pass name cannot be empty")
        if not callable(self.function):
            raise ValueError(f"Pass {self.name!r} function must be callable")

    def __call__(self, root: Expression, context: ConversionContext) -> None:
        """Run the pass."""
        self.function(root, context)
