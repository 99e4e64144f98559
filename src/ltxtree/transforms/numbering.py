#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/numbering.py
r"""Block numbering, table of contents and label resolution.

:func:`number_blocks` walks the document body in pre-order and gives every
named block the next value of the counter kept for its name, so the third
``figure`` gets tag 3. It also collects ``\section``/``\subsection``
headings into :attr:`ConversionContext.section_contents`.

:func:`resolve_labels` records every ``\label`` in the reference table under
the kind and number of the nearest enclosing numbered block. Labels outside
any such block refer to the document itself and are numbered in order.
"""

from __future__ import annotations

import logging

from pylatexenc.latex2text import LatexNodes2Text

from ltxtree.ast.nodes import Expression, ExpressionType
from ltxtree.ast.serialization import tree_to_latex
from ltxtree.ast.utils import flatten_text
from ltxtree.constants import (
    DOCUMENT_ENVIRONMENT,
    INLINE_BLOCK_NAMES,
    LABEL_COMMAND,
    PARAGRAPH,
    SECTION_COMMANDS,
    SUBSECTION_COMMANDS,
)
from ltxtree.context import ConversionContext, SectionContents, SectionType

logger = logging.getLogger(__name__)

_ANONYMOUS_BLOCKS = INLINE_BLOCK_NAMES | {PARAGRAPH}


def number_blocks(root: Expression, context: ConversionContext) -> None:
    """Tag every named block with its per-name counter value."""
    scope = root.find_document() or root
    numbered = 0
    for node in scope.walk():
        if node.kind is ExpressionType.BLOCK and node.name:
            node.tag = context.next_counter(node.name)
            numbered += 1
    # label numbering below the document level starts afresh
    context.counters[DOCUMENT_ENVIRONMENT] = 0
    collect_section_contents(scope, context)
    logger.debug("Numbered %d block(s)", numbered)


def heading_title(node: Expression) -> str:
    """Return the plain-text title of a heading command or block."""
    if not node.raw_values or not node.children:
        return ""
    converter = LatexNodes2Text()
    return converter.latex_to_text(tree_to_latex(node.children[0])).strip()


def collect_section_contents(scope: Expression, context: ConversionContext) -> None:
    """Fill the numbered and unnumbered table-of-contents lists."""
    numbered = context.section_contents[SectionType.NUMBERED]
    unnumbered = context.section_contents[SectionType.UNNUMBERED]
    section = 0
    subsection = 0

    for node in scope.walk():
        if node.kind not in (ExpressionType.COMMAND, ExpressionType.BLOCK):
            continue
        if node.name not in SECTION_COMMANDS and node.name not in SUBSECTION_COMMANDS:
            continue

        title = heading_title(node)
        starred = node.name.endswith("*")
        if node.name in SECTION_COMMANDS:
            if starred:
                context.current_section_type = SectionType.UNNUMBERED
                unnumbered.append(SectionContents(title=title))
            else:
                context.current_section_type = SectionType.NUMBERED
                section += 1
                subsection = 0
                numbered.append(SectionContents(title=title, number=str(section)))
            continue

        if starred:
            entry = SectionContents(title=title)
            (unnumbered[-1].subsections if unnumbered else unnumbered).append(entry)
        else:
            subsection += 1
            entry = SectionContents(title=title, number=f"{section}.{subsection}")
            (numbered[-1].subsections if numbered else numbered).append(entry)


def _label_target(label: Expression, context: ConversionContext) -> tuple[str, int]:
    for ancestor in label.ancestors():
        if ancestor.kind is ExpressionType.ROOT or ancestor.is_block(DOCUMENT_ENVIRONMENT):
            break
        if ancestor.kind is ExpressionType.BLOCK and ancestor.name not in _ANONYMOUS_BLOCKS:
            return ancestor.name, ancestor.tag if isinstance(ancestor.tag, int) else 0
    return DOCUMENT_ENVIRONMENT, context.next_counter(DOCUMENT_ENVIRONMENT)


def resolve_labels(root: Expression, context: ConversionContext) -> None:
    r"""Record every ``\label`` in the reference table.

    The flattened label text is also stored as the label node's tag. The
    first definition of a label wins; duplicates are logged and ignored.
    """
    for node in root.walk():
        if not node.is_command(LABEL_COMMAND):
            continue
        key = flatten_text(node.group(0))
        if not key:
            logger.warning("Empty \\label on line %s ignored", node.line)
            continue
        node.tag = key
        kind, number = _label_target(node, context)
        context.register_reference(key, kind, number)
    logger.debug("Resolved %d label(s)", len(context.references))
