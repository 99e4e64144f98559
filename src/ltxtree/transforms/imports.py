#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/imports.py
r"""Splice ``\input`` and ``\include`` files into the tree.

Only the top level of the root is scanned. Each imported file is read with
the configured encoding, preformatted, lexed with its own builder (so lexing
errors name the imported file) and expanded recursively before its nodes
replace the import command. Paths resolve against the directory of the file
holding the command.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ltxtree.ast.nodes import Expression
from ltxtree.ast.utils import flatten_text
from ltxtree.constants import DEFAULT_IMPORT_SUFFIX, IMPORT_COMMANDS
from ltxtree.context import ConversionContext
from ltxtree.exceptions import MissingResourceError, TransformError
from ltxtree.parsers.builder import TreeBuilder
from ltxtree.parsers.reader import prepare_source
from ltxtree.utils.encoding import read_source
from ltxtree.utils.resources import resolve_resource

logger = logging.getLogger(__name__)


def include_imports(root: Expression, context: ConversionContext) -> None:
    r"""Replace every top-level import command with the imported nodes.

    Raises
    ------
    MissingResourceError
        If a file is missing and ``fail_on_missing_imports`` is set
    TransformError
        On a circular import or when ``max_import_depth`` is exceeded
    LexError
        If an imported file leaves a construct open

    """
    if not context.options.include_imports:
        logger.debug("Import expansion disabled")
        return
    if not root.children:
        return

    active: list[Path] = []
    if context.source_path is not None:
        active.append(context.source_path.resolve())
    _expand_group(root, context.source_dir, context, active)


def _drop(node: Expression, context: ConversionContext) -> None:
    node.detach()
    context.arena.release(node)


def _expand_group(root: Expression, base_dir: Path, context: ConversionContext, active: list[Path]) -> None:
    group = root.children[0]
    index = 0
    while index < len(group):
        node = group[index]
        if not node.is_command(*IMPORT_COMMANDS):
            index += 1
            continue

        name = flatten_text(node.children[0]) if node.children else ""
        if not name:
            logger.warning("\\%s without a file name on line %s ignored", node.name, node.line)
            _drop(node, context)
            continue

        nodes = _load(node, name, base_dir, context, active)
        if nodes is None:
            _drop(node, context)
            continue

        node.replace_with(nodes)
        context.arena.release(node)
        index += len(nodes)


def _load(
    node: Expression,
    name: str,
    base_dir: Path,
    context: ConversionContext,
    active: list[Path],
) -> list[Expression] | None:
    """Read, lex and expand one imported file; None when it is skipped."""
    path = resolve_resource(name, base_dir, DEFAULT_IMPORT_SUFFIX).resolve()
    if path in active:
        raise TransformError(f"Circular import of {path}", transform_name="imports")

    depth = len(active) - (1 if context.source_path is not None else 0)
    if depth >= context.options.max_import_depth:
        raise TransformError(
            f"Import of {path} exceeds the maximum depth of {context.options.max_import_depth}",
            transform_name="imports",
        )

    try:
        text = read_source(path, encoding=context.options.encoding, resource_kind="import")
    except MissingResourceError:
        if context.options.fail_on_missing_imports:
            raise
        logger.warning("Imported file not found, dropping \\%s: %s", node.name, path)
        return None

    logger.debug("Importing %s", path)
    imported = TreeBuilder(context, str(path)).build_root(prepare_source(text, context.options.preformat))
    active.append(path)
    try:
        _expand_group(imported, path.parent, context, active)
    finally:
        active.pop()

    nodes = imported.remove_group(0)
    context.arena.release(imported)
    return nodes
