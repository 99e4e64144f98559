#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/algorithms.py
r"""Line numbering for ``algorithmic`` and ``algorithmicx`` blocks.

Every line command of the body is tagged ``[line, indentation]``. Openers
(``\If``, ``\For``, ``\Procedure`` ...) indent the lines after them by two,
closers (``\EndIf``, ``\EndFor`` ...) undo that before their own line, and
``\Else``/``\ElsIf`` sit one level out. ``\Statex`` continues the previous
line without a number of its own.

Examples
--------
::

    \State x      -> [1, 0]
    \If{x}        -> [2, 0]
    \State y      -> [3, 2]
    \EndIf        -> [4, 0]

"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ltxtree.ast.nodes import Expression, ExpressionType
from ltxtree.constants import (
    ALGORITHM_BLOCK_NAMES,
    ALGORITHM_CLOSERS,
    ALGORITHM_CONTINUATIONS,
    ALGORITHM_INDENT_STEP,
    ALGORITHM_OPENERS,
    ALGORITHM_STATEMENT,
    PARAGRAPH,
)
from ltxtree.context import ConversionContext

logger = logging.getLogger(__name__)

_CONTINUED_STATEMENT = ALGORITHM_STATEMENT + "x"


def number_algorithm_lines(root: Expression, context: ConversionContext) -> None:
    """Tag the line commands of every algorithm block."""
    for node in root.walk():
        if node.is_block(*ALGORITHM_BLOCK_NAMES) and node.children:
            lines = _number_lines(node)
            logger.debug("Numbered %d algorithm line(s)", lines)


def _line_commands(group: list[Expression]) -> Iterator[Expression]:
    for node in group:
        if node.kind is ExpressionType.COMMAND:
            yield node
        elif node.is_block(PARAGRAPH):
            # blank lines in the body were turned into paragraph blocks
            for inner in node.children:
                yield from _line_commands(inner)


def _number_lines(block: Expression) -> int:
    counter = 0
    indentation = 0
    for node in _line_commands(block.children[-1]):
        name = node.name
        if name in ALGORITHM_OPENERS:
            counter += 1
            node.tag = [counter, indentation]
            indentation += ALGORITHM_INDENT_STEP
        elif name in ALGORITHM_CLOSERS:
            counter += 1
            indentation = max(0, indentation - ALGORITHM_INDENT_STEP)
            node.tag = [counter, indentation]
        elif name in ALGORITHM_CONTINUATIONS:
            counter += 1
            node.tag = [counter, max(0, indentation - ALGORITHM_INDENT_STEP)]
        elif name == ALGORITHM_STATEMENT:
            counter += 1
            node.tag = [counter, indentation]
        elif name == _CONTINUED_STATEMENT:
            node.tag = [counter, indentation]
    return counter
