#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/bibliography.py
r"""Attach the bibliography named by the first ``\bibliography`` command.

The argument may list several files separated by commas; records are
numbered across all of them in encounter order. Paths resolve against the
directory of the main source and get ``.bib`` when they have no suffix.
"""

from __future__ import annotations

import logging

from ltxtree.ast.nodes import Expression
from ltxtree.ast.utils import flatten_text
from ltxtree.constants import BIBLIOGRAPHY_COMMAND, DEFAULT_BIBLIOGRAPHY_SUFFIX
from ltxtree.context import ConversionContext
from ltxtree.exceptions import MissingResourceError
from ltxtree.parsers.builder import TreeBuilder
from ltxtree.utils.bibliography import BibliographyRecord, parse_bibliography
from ltxtree.utils.encoding import read_source
from ltxtree.utils.resources import resolve_resource

logger = logging.getLogger(__name__)


def attach_bibliography(root: Expression, context: ConversionContext) -> None:
    """Parse the referenced ``.bib`` files into ``context.bibliography``.

    Raises
    ------
    MissingResourceError
        If a file is missing and ``fail_on_missing_bibliography`` is set

    """
    if not context.options.resolve_bibliography:
        logger.debug("Bibliography resolution disabled")
        return

    command = next((node for node in root.walk() if node.is_command(BIBLIOGRAPHY_COMMAND) and node.children), None)
    if command is None:
        return

    records: dict[str, BibliographyRecord] = {}
    for name in flatten_text(command.group(0)).split(","):
        if not name.strip():
            continue
        path = resolve_resource(name, context.source_dir, DEFAULT_BIBLIOGRAPHY_SUFFIX)
        try:
            text = read_source(path, encoding=context.options.encoding, resource_kind="bibliography")
        except MissingResourceError:
            if context.options.fail_on_missing_bibliography:
                raise
            logger.warning("Bibliography file not found, skipping: %s", path)
            continue

        for key, record in parse_bibliography(text, TreeBuilder(context, str(path))).items():
            if key in records:
                logger.warning("Duplicate bibliography key %r in %s ignored", key, path)
                continue
            record.number = len(records) + 1
            records[key] = record

    context.bibliography = records
    logger.debug("Attached %d bibliography record(s)", len(records))
