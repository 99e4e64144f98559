#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/ast/serialization.py
r"""Serialization of expression trees.

Two output shapes are supported:

- a plain ``dict``/JSON form that keeps every node field, for tooling and
  snapshot tests
- a LaTeX-like source reconstruction, used for section titles and for
  eyeballing what a pass did to a subtree

Examples
--------
Serialize a parsed document to JSON:

    >>> from ltxtree import parse_latex
    >>> from ltxtree.ast.serialization import tree_to_json
    >>> result = parse_latex(r"$x^2$")
    >>> json_str = tree_to_json(result.root, indent=2)

Reconstruct source text for a group:

    >>> tree_to_latex(section_command.children[0])
    'Introduction'

"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from ltxtree.ast.nodes import Expression, ExpressionType
from ltxtree.constants import (
    BLOCK_BRACES,
    INVISIBLE_TIMES,
    ITEM_COMMAND,
    PARAGRAPH,
    SCRIPT_NAMES,
    SEGMENTED_TEXT,
)

if TYPE_CHECKING:
    from ltxtree.context import ConversionContext

SCHEMA_VERSION = 1


def tree_to_dict(node: Expression) -> dict[str, Any]:
    """Convert a node and its subtree to a dictionary.

    Parameters
    ----------
    node : Expression
        Subtree root

    Returns
    -------
    dict
        Nested mapping with ``kind``, ``name``, ``math_mode``, ``space_before``,
        ``line``, ``tag``, ``options`` and ``children`` keys

    """
    result: dict[str, Any] = {
        "kind": node.kind.value,
        "name": node.name,
        "math_mode": node.math_mode,
        "space_before": node.space_before,
        "line": node.line,
        "tag": node.tag,
        "options": None,
        "children": [[tree_to_dict(child) for child in group] for group in node.children],
    }
    if node.options is not None:
        result["options"] = {
            "raw": node.options.raw,
            "key_value": node.options.as_key_value,
            "expressions": (
                [tree_to_dict(option) for option in node.options.as_expressions]
                if node.options.as_expressions is not None
                else None
            ),
        }
    return result


def context_to_dict(context: ConversionContext) -> dict[str, Any]:
    """Convert the side tables of a finished conversion to a dictionary."""
    return {
        "counters": dict(context.counters),
        "references": {
            label: {"kind": reference.kind, "number": reference.number}
            for label, reference in context.references.items()
        },
        "section_contents": {
            section_type.value: [_section_to_dict(entry) for entry in entries]
            for section_type, entries in context.section_contents.items()
        },
        "bibliography": sorted(context.bibliography),
        "macros": sorted(context.macros),
    }


def _section_to_dict(entry: Any) -> dict[str, Any]:
    return {
        "title": entry.title,
        "number": entry.number,
        "subsections": [_section_to_dict(child) for child in entry.subsections],
    }


def tree_to_json(node: Expression, indent: int | None = None, context: ConversionContext | None = None) -> str:
    """Serialize a tree (and optionally its context tables) to JSON.

    Parameters
    ----------
    node : Expression
        Subtree root
    indent : int or None, default None
        Indentation for pretty printing (None for compact output)
    context : ConversionContext, optional
        When given, its counters, references, section contents and
        bibliography keys are included under ``"context"``

    Returns
    -------
    str
        JSON document with a ``schema_version`` field

    """
    payload: dict[str, Any] = {"schema_version": SCHEMA_VERSION, "tree": tree_to_dict(node)}
    if context is not None:
        payload["context"] = context_to_dict(context)
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def tree_to_latex(nodes: Expression | list[Expression]) -> str:
    """Reconstruct LaTeX-like source text for a node or a children group.

    The reconstruction is not byte-exact: whitespace is normalized, comments
    keep their own lines and synthetic nodes (implicit multiplication
    markers, table grid blocks) are rendered as the markup they came from.
    """
    if isinstance(nodes, Expression):
        return _render(nodes)
    return "".join(_render(node) for node in nodes)


def _space(node: Expression) -> str:
    return " " if node.space_before else ""


def _options(node: Expression) -> str:
    return f"[{node.options.raw}]" if node.options is not None else ""


def _render(node: Expression) -> str:
    kind = node.kind

    if kind is ExpressionType.ROOT:
        return tree_to_latex(node.group(0))

    if kind is ExpressionType.PLAIN_TEXT:
        return _space(node) + node.name

    if kind is ExpressionType.COMMENT:
        return f"%{node.name}\n"

    if kind is ExpressionType.VERBATIM:
        return f"\\begin{{verbatim}}{node.name}\\end{{verbatim}}"

    if kind is ExpressionType.INLINE_MATH:
        return f"{_space(node)}${tree_to_latex(node.group(0))}$"

    if kind is ExpressionType.BLOCK_MATH:
        return f"{_space(node)}$${tree_to_latex(node.group(0))}$$"

    if kind is ExpressionType.COMMAND:
        return _render_command(node)

    return _render_block(node)


def _render_command(node: Expression) -> str:
    if node.name == INVISIBLE_TIMES:
        return ""
    if node.name == ITEM_COMMAND and len(node.children) == 1:
        return f"\\item{_options(node)} {tree_to_latex(node.children[0]).strip()}"
    groups = "".join(f"{{{tree_to_latex(group)}}}" for group in node.children)
    return f"{_space(node)}\\{node.name}{_options(node)}{groups}"


def _render_block(node: Expression) -> str:
    name = node.name

    if name == BLOCK_BRACES:
        return _space(node) + "{" + tree_to_latex(node.group(0)) + "}"

    if name in SCRIPT_NAMES:
        return name + "{" + tree_to_latex(node.group(0)) + "}"

    if name == SEGMENTED_TEXT or name.startswith("script"):
        return _space(node) + "".join(tree_to_latex(group) for group in node.children)

    if name == "":
        # table row or cell
        cells = node.group(0)
        if cells and all(cell.is_block("") for cell in cells):
            return " & ".join(tree_to_latex(cell).strip() for cell in cells) + " \\\\\n"
        return tree_to_latex(cells)

    if PARAGRAPH in name:
        if len(node.children) > 1:
            title = tree_to_latex(node.children[0])
            return f"\\{name}{{{title}}}" + tree_to_latex(node.children[-1]) + "\n\n"
        return tree_to_latex(node.group(0)).strip() + "\n\n"

    arguments = "".join(f"{{{tree_to_latex(group)}}}" for group in node.children[:-1])
    body = tree_to_latex(node.children[-1]) if node.children else ""
    return f"\\begin{{{name}}}{_options(node)}{arguments}{body}\\end{{{name}}}"
