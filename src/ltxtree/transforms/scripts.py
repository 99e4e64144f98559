#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/scripts.py
r"""Superscript and subscript grouping.

The builder leaves ``x^2`` as two siblings, ``x`` and a ``^`` block. The
grouping pass folds a script and the node before it into a container block
named after the scripts in source order:

============  ======================  =========================
name          source                  members
============  ======================  =========================
``script^``   ``x^a``                 base, ``^``
``script_``   ``x_a``                 base, ``_``
``script^_``  ``x^a_b``               base, ``^``, ``_``
``script_^``  ``x_a^b``               base, ``_``, ``^``
============  ======================  =========================

A ``\limits`` between the base and its scripts is absorbed. A script with no
node before it stays as it is; :func:`simplify_baseless_scripts` lifts such a
script out of a leading position in inline math.
"""

from __future__ import annotations

import logging

from ltxtree.ast.nodes import Expression, ExpressionType, NodeArena
from ltxtree.constants import LIMITS_COMMAND
from ltxtree.context import ConversionContext

logger = logging.getLogger(__name__)

SCRIPT_CONTAINER_NAMES = frozenset({"script^", "script_", "script^_", "script_^"})


def build_scripts(root: Expression, context: ConversionContext) -> None:
    """Group every script block with its base.

    Running the pass again on a grouped tree changes nothing.
    """
    _group_subtree(root, context.arena)


def _group_subtree(node: Expression, arena: NodeArena) -> None:
    if node.is_block(*SCRIPT_CONTAINER_NAMES):
        for member in node.group(0):
            _group_subtree(member, arena)
        return

    for group_index in range(len(node.children)):
        for child in list(node.children[group_index]):
            _group_subtree(child, arena)
        _group_siblings(node, group_index, arena)


def _group_siblings(parent: Expression, group_index: int, arena: NodeArena) -> None:
    group = parent.children[group_index]
    index = 1
    while index < len(group):
        script = group[index]
        if not script.is_script or group[index - 1].is_script:
            index += 1
            continue

        if group[index - 1].is_command(LIMITS_COMMAND):
            arena.release(parent.pop(group_index, index - 1))
            index -= 1
            if index == 0 or group[index - 1].is_script:
                index += 1
                continue

        stop = index + 1
        name = "script" + script.name
        if stop < len(group) and group[stop].is_script and group[stop].name != script.name:
            name += group[stop].name
            stop += 1

        base = group[index - 1]
        container = arena.create(
            name,
            ExpressionType.BLOCK,
            math_mode=script.math_mode,
            space_before=base.space_before,
            line=base.line,
        )
        members = parent.pop_range(group_index, index - 1, stop)
        container.add_group(members)
        for member in members:
            member.math_mode = container.math_mode
        parent.insert(group_index, index - 1, [container])


def simplify_baseless_scripts(root: Expression, context: ConversionContext) -> None:
    """Lift scripts that open an inline math span in front of the span.

    ``$^{th}$`` after a word is a text superscript: the script leaves the math
    span, its contents switch to text mode, and the script itself takes the
    span's mode.
    """
    lifted = 0
    for node in list(root.walk()):
        if node.kind is not ExpressionType.INLINE_MATH or node.parent is None:
            continue
        while node.children and node.children[0] and node.children[0][0].is_script:
            script = node.pop(0, 0)
            script.set_math_mode(False, recursive=True)
            script.math_mode = node.math_mode
            node.parent.insert(node.group_index, node.index_in_group, [script])
            lifted += 1
    if lifted:
        logger.debug("Lifted %d baseless script(s) out of inline math", lifted)
