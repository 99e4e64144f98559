#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/ast/__init__.py
"""Expression tree module.

The module consists of several components:

- nodes: the single node type, its kinds, option blocks and the node arena
- families: enum + table per command family and the command arity table
- utils: traversal, text flattening, invariant checking and diagnostics
- serialization: dict / JSON output and LaTeX-like source reconstruction

Examples
--------
    >>> from ltxtree.ast import NodeArena, ExpressionType
    >>> arena = NodeArena()
    >>> node = arena.create("x", ExpressionType.PLAIN_TEXT, math_mode=True)
    >>> node.parent is None
    True

"""

from ltxtree.ast.families import (
    ACCENT_TABLE,
    COMMAND_ARITY,
    LIST_BLOCK_NAMES,
    Accent,
    AccentSpec,
    ListKind,
    TextSize,
    TextStyle,
    expected_argument_count,
    is_known_command,
)
from ltxtree.ast.nodes import OPTIONS_GROUP, Expression, ExpressionOptions, ExpressionType, NodeArena
from ltxtree.ast.serialization import context_to_dict, tree_to_dict, tree_to_json, tree_to_latex
from ltxtree.ast.utils import (
    check_positions,
    count_kinds,
    describe_argument_shape,
    find_all,
    find_last_command,
    flatten_text,
    iter_nodes,
    require_argument_groups,
    unknown_construct_marker,
)

__all__ = [
    # Nodes
    "OPTIONS_GROUP",
    "Expression",
    "ExpressionOptions",
    "ExpressionType",
    "NodeArena",
    # Families
    "ACCENT_TABLE",
    "COMMAND_ARITY",
    "LIST_BLOCK_NAMES",
    "Accent",
    "AccentSpec",
    "ListKind",
    "TextSize",
    "TextStyle",
    "expected_argument_count",
    "is_known_command",
    # Utilities
    "check_positions",
    "count_kinds",
    "describe_argument_shape",
    "find_all",
    "find_last_command",
    "flatten_text",
    "iter_nodes",
    "require_argument_groups",
    "unknown_construct_marker",
    # Serialization
    "context_to_dict",
    "tree_to_dict",
    "tree_to_json",
    "tree_to_latex",
]
