#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/paragraphs.py
r"""Paragraph grouping.

Children are partitioned at breakers: nodes outside math that are heading
commands (any name containing ``section`` or ``paragraph``, including the
``\paragraph`` marker the reader emits for a blank line), display math,
verbatim text or named environment blocks.

- a heading command becomes a Block in place whose groups are its title
  (when it had one) and the run of nodes up to the next breaker
- after any other breaker, the following run is wrapped in a new
  ``paragraph`` Block
- in the document body, the run before the first breaker is wrapped in a
  ``paragraph`` Block too

Groups are processed bottom-up, so nested bodies are already partitioned
when their parent is.
"""

from __future__ import annotations

import logging

from ltxtree.ast.nodes import Expression, ExpressionType, NodeArena
from ltxtree.constants import INLINE_BLOCK_NAMES, PARAGRAPH
from ltxtree.context import ConversionContext

logger = logging.getLogger(__name__)

_HEADING_MARKERS = ("section", PARAGRAPH)


def _is_heading(node: Expression) -> bool:
    return node.kind is ExpressionType.COMMAND and any(marker in node.name for marker in _HEADING_MARKERS)


def is_paragraph_breaker(node: Expression) -> bool:
    """Return True when ``node`` ends the paragraph before it."""
    if node.math_mode:
        return False
    if node.kind is ExpressionType.COMMAND:
        return _is_heading(node)
    if node.kind in (ExpressionType.BLOCK_MATH, ExpressionType.VERBATIM):
        return True
    return node.kind is ExpressionType.BLOCK and node.name not in INLINE_BLOCK_NAMES


def build_paragraphs(root: Expression, context: ConversionContext) -> None:
    """Partition the document body, or the whole root without one, into paragraphs."""
    document = root.find_document()
    if document is not None and document.children:
        target, group_index = document, len(document.children) - 1
    elif root.children:
        target, group_index = root, 0
    else:
        return
    _partition(target, group_index, context.arena, top_level=True)


def _partition(parent: Expression, group_index: int, arena: NodeArena, top_level: bool) -> None:
    for child in list(parent.children[group_index]):
        for child_group in range(len(child.children)):
            _partition(child, child_group, arena, top_level=False)

    group = parent.children[group_index]
    index = 0
    if top_level:
        first = _next_breaker(group, 0)
        if first > 0:
            parent.insert(group_index, 0, [_wrap(parent.pop_range(group_index, 0, first), arena)])
            index = 1

    while index < len(group):
        node = group[index]
        if not is_paragraph_breaker(node):
            index += 1
            continue

        run = parent.pop_range(group_index, index + 1, _next_breaker(group, index + 1))
        if _is_heading(node):
            for _ in range(len(node.children) - 1):
                for extra in node.remove_group(1):
                    arena.release(extra)
            node.kind = ExpressionType.BLOCK
            node.add_group(run)
        elif run:
            parent.insert(group_index, index + 1, [_wrap(run, arena)])
            index += 1
        index += 1


def _next_breaker(group: list[Expression], start: int) -> int:
    for index in range(start, len(group)):
        if is_paragraph_breaker(group[index]):
            return index
    return len(group)


def _wrap(run: list[Expression], arena: NodeArena) -> Expression:
    paragraph = arena.create(PARAGRAPH, ExpressionType.BLOCK, line=run[0].line, space_before=run[0].space_before)
    paragraph.add_group(run)
    return paragraph
