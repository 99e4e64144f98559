#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/registry.py
"""Ordered registry of the rewrite passes.

The passes depend on each other's output, so the order below is fixed:
imports must be spliced before macros expand, environments must be
encapsulated before tables, lists and paragraphs are built, and numbering
must precede label resolution.

Examples
--------
    >>> from ltxtree.transforms import get_pass, list_passes
    >>> list_passes()[:3]
    ['imports', 'macros', 'hoisting']
    >>> get_pass("scripts").description
    'Group superscripts and subscripts with their base'

"""

from __future__ import annotations

import logging

from ltxtree.transforms.algorithms import number_algorithm_lines
from ltxtree.transforms.bibliography import attach_bibliography
from ltxtree.transforms.imports import include_imports
from ltxtree.transforms.lists import build_lists
from ltxtree.transforms.macros import expand_macros
from ltxtree.transforms.metadata import PassMetadata
from ltxtree.transforms.numbering import number_blocks, resolve_labels
from ltxtree.transforms.paragraphs import build_paragraphs
from ltxtree.transforms.scripts import build_scripts, simplify_baseless_scripts
from ltxtree.transforms.structure import build_tables, encapsulate_environments, hoist_metadata_commands

logger = logging.getLogger(__name__)

PASSES: tuple[PassMetadata, ...] = (
    PassMetadata(
        name="imports",
        description="Splice \\input and \\include files into the tree",
        function=include_imports,
    ),
    PassMetadata(
        name="macros",
        description="Register custom commands and expand their invocations",
        function=expand_macros,
        writes=("macros",),
    ),
    PassMetadata(
        name="hoisting",
        description="Move author, title and date before the document body",
        function=hoist_metadata_commands,
    ),
    PassMetadata(
        name="encapsulation",
        description="Fold begin/end pairs into environment blocks",
        function=encapsulate_environments,
    ),
    PassMetadata(
        name="tables",
        description="Split tabular bodies into rows and cells",
        function=build_tables,
    ),
    PassMetadata(
        name="scripts",
        description="Group superscripts and subscripts with their base",
        function=build_scripts,
    ),
    PassMetadata(
        name="lists",
        description="Attach list content to its items",
        function=build_lists,
    ),
    PassMetadata(
        name="paragraphs",
        description="Partition the document body into paragraphs",
        function=build_paragraphs,
    ),
    PassMetadata(
        name="baseless_scripts",
        description="Lift scripts that open inline math out of the span",
        function=simplify_baseless_scripts,
    ),
    PassMetadata(
        name="numbering",
        description="Number named blocks and collect section headings",
        function=number_blocks,
        writes=("counters", "section_contents"),
    ),
    PassMetadata(
        name="labels",
        description="Record label targets in the reference table",
        function=resolve_labels,
        writes=("references",),
    ),
    PassMetadata(
        name="algorithms",
        description="Number and indent algorithm lines",
        function=number_algorithm_lines,
    ),
    PassMetadata(
        name="bibliography",
        description="Parse the attached bibliography file",
        function=attach_bibliography,
        writes=("bibliography",),
    ),
)

_BY_NAME = {metadata.name: metadata for metadata in PASSES}


def get_pass(name: str) -> PassMetadata:
    """Return the metadata of the pass called ``name``.

    Raises
    ------
    KeyError
        If no pass has that name

    """
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown pass {name!r}; available: {', '.join(_BY_NAME)}") from None


def list_passes() -> list[str]:
    """Return the pass names in execution order."""
    return [metadata.name for metadata in PASSES]
