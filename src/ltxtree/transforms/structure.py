#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/structure.py
r"""Passes that give the flat command stream its environment structure.

- :func:`hoist_metadata_commands` moves ``\author``, ``\title`` and ``\date``
  found after ``\begin{document}`` in front of it
- :func:`encapsulate_environments` folds every ``\begin{X} ... \end{X}`` pair
  into a single Block named ``X`` whose last children group is the body
- :func:`build_tables` re-segments the body of tabular-like blocks into rows
  and cells
"""

from __future__ import annotations

import logging

from ltxtree.ast.nodes import Expression, ExpressionType
from ltxtree.ast.utils import flatten_text
from ltxtree.constants import (
    CELL_SEPARATOR,
    DEFINE_COMMANDS,
    DOCUMENT_ENVIRONMENT,
    HOISTED_COMMANDS,
    HORIZONTAL_RULE,
    MATH_ENVIRONMENTS,
    ROW_SEPARATOR,
    TABLE_BLOCK_NAMES,
)
from ltxtree.context import ConversionContext
from ltxtree.exceptions import TransformError

logger = logging.getLogger(__name__)


def _environment_name(node: Expression) -> str:
    return flatten_text(node.children[0]) if node.children else ""


def hoist_metadata_commands(root: Expression, context: ConversionContext) -> None:
    """Move document metadata commands in front of ``\\begin{document}``.

    Only the top level of the root is considered; the moved commands keep
    their relative order.
    """
    if not root.children:
        return
    group = root.children[0]
    start = next(
        (
            index
            for index, node in enumerate(group)
            if node.is_command("begin") and _environment_name(node) == DOCUMENT_ENVIRONMENT
        ),
        None,
    )
    if start is None:
        return

    hoisted = [node for node in group[start + 1 :] if node.is_command(*HOISTED_COMMANDS)]
    for node in hoisted:
        node.detach()
    root.insert(0, start, hoisted)
    if hoisted:
        logger.debug("Hoisted %d metadata command(s) before the document body", len(hoisted))


# =============================================================================
# Environments
# =============================================================================


def encapsulate_environments(root: Expression, context: ConversionContext) -> None:
    r"""Replace every ``\begin{X}``/``\end{X}`` pair with a Block named ``X``.

    The begin command turns into the block in place: its name argument is
    dropped, any further argument groups and its options are kept, and the
    nodes between the pair become its last group. Nested environments of the
    same name are matched by depth. Definitions of custom commands are left
    untouched since their bodies may open environments they never close.

    Raises
    ------
    TransformError
        On an ``\end`` without a matching ``\begin``, a ``\begin`` without a
        matching ``\end``, or a ``\begin`` without an environment name

    """
    _encapsulate_children(root, context)


def _encapsulate_children(node: Expression, context: ConversionContext) -> None:
    for group_index in range(len(node.children)):
        _encapsulate_group(node, group_index, context)


def _find_matching_end(group: list[Expression], start: int, name: str) -> int | None:
    depth = 0
    for index in range(start + 1, len(group)):
        node = group[index]
        if node.is_command("begin") and _environment_name(node) == name:
            depth += 1
        elif node.is_command("end") and _environment_name(node) == name:
            if depth == 0:
                return index
            depth -= 1
    return None


def _encapsulate_group(parent: Expression, group_index: int, context: ConversionContext) -> None:
    group = parent.children[group_index]
    index = 0
    while index < len(group):
        node = group[index]
        if node.is_command(*DEFINE_COMMANDS):
            index += 1
            continue

        if node.is_command("end"):
            raise TransformError(
                f"\\end{{{_environment_name(node)}}} on line {node.line} has no matching \\begin",
                transform_name="encapsulation",
            )

        if node.is_command("begin"):
            name = _environment_name(node)
            if not name:
                raise TransformError(
                    f"\\begin without an environment name on line {node.line}", transform_name="encapsulation"
                )
            end = _find_matching_end(group, index, name)
            if end is None:
                raise TransformError(
                    f"\\begin{{{name}}} on line {node.line} has no matching \\end", transform_name="encapsulation"
                )

            body = parent.pop_range(group_index, index + 1, end)
            context.arena.release(parent.pop(group_index, index + 1))
            for name_node in node.remove_group(0):
                context.arena.release(name_node)
            node.kind = ExpressionType.BLOCK
            node.name = name
            node.raw_values = node.raw_values[1:]
            node.add_group(body)

        _encapsulate_children(node, context)
        index += 1


# =============================================================================
# Tables
# =============================================================================


def build_tables(root: Expression, context: ConversionContext) -> None:
    r"""Split the body of array-like blocks into a grid of rows and cells.

    Rows end at ``\\`` and cells at ``&``. ``\hline`` and comments are
    dropped, empty cells are kept and a trailing empty row is dropped. Rows
    and cells are anonymous Blocks, in math mode when the table is.
    """
    tables = [node for node in root.walk() if node.is_block(*TABLE_BLOCK_NAMES) and node.children]
    for table in tables:
        _split_table(table, context)
    logger.debug("Built %d table(s)", len(tables))


def _split_table(table: Expression, context: ConversionContext) -> None:
    arena = context.arena
    group_index = len(table.children) - 1
    math_mode = table.math_mode or table.name in MATH_ENVIRONMENTS

    rows: list[list[list[Expression]]] = [[[]]]
    for node in table.children[group_index]:
        if node.is_command(ROW_SEPARATOR):
            rows.append([[]])
        elif node.kind is ExpressionType.PLAIN_TEXT and node.name.strip() == CELL_SEPARATOR:
            rows[-1].append([])
        elif node.is_command(HORIZONTAL_RULE) or node.kind is ExpressionType.COMMENT:
            pass
        else:
            rows[-1][-1].append(node)
            continue
        arena.release(node)

    if len(rows[-1]) == 1 and not rows[-1][0]:
        rows.pop()

    row_nodes = []
    for cells in rows:
        row = arena.create("", ExpressionType.BLOCK, math_mode=math_mode, line=_first_line(cells, table))
        cell_nodes = []
        for contents in cells:
            cell = arena.create("", ExpressionType.BLOCK, math_mode=math_mode, line=_first_line([contents], table))
            cell.add_group(contents)
            cell_nodes.append(cell)
        row.add_group(cell_nodes)
        row_nodes.append(row)
    table.set_group(group_index, row_nodes)


def _first_line(cells: list[list[Expression]], table: Expression) -> int | None:
    for contents in cells:
        if contents:
            return contents[0].line
    return table.line
