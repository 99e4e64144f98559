#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/ast/utils.py
"""Utility functions for working with the expression tree.

This module provides traversal, text extraction, position-invariant
checking and the per-node diagnostics used when a command does not have the
argument shape it expects.
"""

from __future__ import annotations

import html
from collections.abc import Callable, Iterator

from ltxtree.ast.families import expected_argument_count
from ltxtree.ast.nodes import OPTIONS_GROUP, Expression, ExpressionType
from ltxtree.exceptions import ArgumentShapeError


def iter_nodes(
    root: Expression,
    predicate: Callable[[Expression], bool] | None = None,
) -> Iterator[Expression]:
    """Yield nodes of a subtree in pre-order, optionally filtered.

    Parameters
    ----------
    root : Expression
        Subtree root (yielded first when it matches)
    predicate : callable, optional
        Only nodes for which it returns True are yielded

    """
    for node in root.walk():
        if predicate is None or predicate(node):
            yield node


def find_all(root: Expression, kind: ExpressionType, *names: str) -> list[Expression]:
    """Return every node of ``kind`` (and optionally one of ``names``) under ``root``."""
    return list(iter_nodes(root, lambda node: node.kind is kind and (not names or node.name in names)))


def flatten_text(nodes: Expression | list[Expression]) -> str:
    """Concatenate the PlainText payloads found under ``nodes`` in tree order.

    Parameters
    ----------
    nodes : Expression or list of Expression
        A node or a children group

    Returns
    -------
    str
        Joined text with surrounding whitespace removed

    Examples
    --------
    >>> flatten_text(label_command.children[0])
    'eq:main'

    """
    if isinstance(nodes, Expression):
        nodes = [nodes]

    parts: list[str] = []
    for top in nodes:
        for node in top.walk():
            if node.kind is ExpressionType.PLAIN_TEXT:
                parts.append(node.name)
    return "".join(parts).strip()


def check_positions(root: Expression) -> list[str]:
    """Collect violations of the parent/group/index bookkeeping under ``root``.

    Returns
    -------
    list of str
        One message per misplaced node; empty when the subtree is consistent

    """
    problems: list[str] = []
    for node in root.walk():
        for group_index, group in enumerate(node.children):
            for index, child in enumerate(group):
                if child.parent is not node:
                    problems.append(f"{child!r} under {node!r} has parent {child.parent!r}")
                if child.group_index != group_index or child.index_in_group != index:
                    problems.append(
                        f"{child!r} sits at ({group_index}, {index}) but records "
                        f"({child.group_index}, {child.index_in_group})"
                    )
        if node.options is not None and node.options.as_expressions:
            for option_node in node.options.as_expressions:
                if option_node.parent is not node or option_node.group_index != OPTIONS_GROUP:
                    problems.append(f"option node {option_node!r} of {node!r} is not attached")
    return problems


def require_argument_groups(node: Expression, expected: int | None = None) -> list[list[Expression]]:
    """Return the first ``expected`` children groups of a command.

    Parameters
    ----------
    node : Expression
        Command node
    expected : int, optional
        Required group count; looked up in the arity table when omitted

    Raises
    ------
    ArgumentShapeError
        If the node carries fewer groups than required

    """
    if expected is None:
        expected = expected_argument_count(node.name) or 0
    if len(node.children) < expected:
        raise ArgumentShapeError(node.name, expected, len(node.children))
    return node.children[:expected]


def describe_argument_shape(error: ArgumentShapeError) -> str:
    """Return the inline diagnostic comment for a malformed command."""
    return f"<!-- Unexpected format in command \\{html.escape(error.command)} -->"


def unknown_construct_marker(name: str) -> str:
    """Return the inert marker rendered in place of an unrecognized construct."""
    return f"<!-- Unknown construct \\{html.escape(name)} -->"


def find_last_command(nodes: list[Expression]) -> Expression | None:
    """Return the last command in ``nodes``, searching backwards into blocks."""
    for node in reversed(nodes):
        if node.kind is ExpressionType.COMMAND:
            return node
        if node.kind is ExpressionType.BLOCK:
            for group in reversed(node.children):
                found = find_last_command(group)
                if found is not None:
                    return found
    return None


def count_kinds(root: Expression) -> dict[str, int]:
    """Count nodes per kind under ``root``."""
    counts: dict[str, int] = {}
    for node in root.walk():
        counts[node.kind.value] = counts.get(node.kind.value, 0) + 1
    return counts
