#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/utils/resources.py
r"""Resolution of files referenced from a document.

Imports (``\input``, ``\include``), the bibliography and
``\includegraphics`` targets are all given relative to the directory of the
file that mentions them. A missing suffix is completed with the default for
the resource kind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ltxtree.ast.nodes import Expression
from ltxtree.ast.utils import flatten_text
from ltxtree.constants import GRAPHICS_COMMAND

if TYPE_CHECKING:
    from ltxtree.context import ConversionContext

logger = logging.getLogger(__name__)

DEFAULT_GRAPHICS_SUFFIX = ".eps"


def resolve_resource(name: str, base_dir: str | Path, default_suffix: str = "") -> Path:
    """Return the path of a referenced file.

    Parameters
    ----------
    name : str
        File name as written in the source
    base_dir : str or Path
        Directory of the referencing file
    default_suffix : str, default ""
        Suffix appended when ``name`` has none

    Examples
    --------
    >>> resolve_resource("chapter1", "/book", ".tex")
    PosixPath('/book/chapter1.tex')

    """
    path = Path(name.strip())
    if default_suffix and not path.suffix:
        path = path.with_name(path.name + default_suffix)
    if path.is_absolute():
        return path
    return Path(base_dir) / path


@dataclass(frozen=True)
class GraphicsReference:
    """An ``\\includegraphics`` target and whether it exists on disk."""

    node: Expression
    path: Path
    exists: bool


def find_graphics(root: Expression, context: ConversionContext) -> list[GraphicsReference]:
    r"""Resolve every ``\includegraphics`` in the tree.

    Missing files are a recoverable condition: they are logged at warning
    level and reported with ``exists=False`` so a renderer can skip them.

    Parameters
    ----------
    root : Expression
        Tree to search
    context : ConversionContext
        Supplies the source directory

    Returns
    -------
    list of GraphicsReference
        One entry per command with a file argument, in document order

    """
    references: list[GraphicsReference] = []
    for node in root.walk():
        if not node.is_command(GRAPHICS_COMMAND) or not node.children:
            continue
        name = flatten_text(node.children[0])
        if not name:
            continue
        path = resolve_resource(name, context.source_dir, DEFAULT_GRAPHICS_SUFFIX)
        exists = path.is_file()
        if not exists:
            logger.warning("Graphics file not found, skipping: %s", path)
        references.append(GraphicsReference(node=node, path=path, exists=exists))
    return references
