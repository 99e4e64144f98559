#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/lists.py
r"""List grouping for ``itemize``, ``enumerate`` and ``description``.

Each ``\item`` takes the run of nodes up to the next ``\item`` as its single
children group. Brace groups written directly after ``\item`` stay in front
of that run as ``{}`` blocks, and an ``[label]`` stays as the item's options.
Content before the first item is left where it is.
"""

from __future__ import annotations

import logging

from ltxtree.ast.families import LIST_BLOCK_NAMES
from ltxtree.ast.nodes import Expression, ExpressionType, NodeArena
from ltxtree.constants import BLOCK_BRACES, ITEM_COMMAND
from ltxtree.context import ConversionContext

logger = logging.getLogger(__name__)


def build_lists(root: Expression, context: ConversionContext) -> None:
    """Attach the content of every list block to its items."""
    blocks = [node for node in root.walk() if node.is_block(*LIST_BLOCK_NAMES) and node.children]
    for block in blocks:
        _group_items(block, context.arena)


def _group_items(block: Expression, arena: NodeArena) -> None:
    group_index = len(block.children) - 1
    group = block.children[group_index]
    positions = [index for index, node in enumerate(group) if node.is_command(ITEM_COMMAND)]

    for position in reversed(positions):
        item = group[position]
        end = next(
            (index for index in range(position + 1, len(group)) if group[index].is_command(ITEM_COMMAND)),
            len(group),
        )
        run = block.pop_range(group_index, position + 1, end)

        leading = []
        while item.children:
            brace = arena.create(BLOCK_BRACES, ExpressionType.BLOCK, math_mode=item.math_mode, line=item.line)
            brace.add_group(item.remove_group(0))
            leading.append(brace)
        item.add_group(leading + run)

    logger.debug("Grouped %d item(s) of %s", len(positions), block.name)
