#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/utils/bibliography.py
"""BibTeX reader for the bibliography attached to a document.

This module provides functions to:
1. Split a ``.bib`` text into ``@type{key, field = value, ...}`` records
2. Read field values written in braces, quotes or as bare words
3. Lex every field value into expression nodes so values can hold markup

Records are numbered in encounter order starting at 1; that number is the
citation label a renderer prints. ``@comment``, ``@string`` and
``@preamble`` blocks are skipped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ltxtree.ast.nodes import Expression

if TYPE_CHECKING:
    from ltxtree.parsers.builder import TreeBuilder

logger = logging.getLogger(__name__)

_ENTRY_TYPE_PATTERN = re.compile(r"@\s*([^\s{(]+)\s*")
_SKIPPED_ENTRY_TYPES = frozenset({"comment", "string", "preamble"})
_CLOSING = {"{": "}", "(": ")"}


@dataclass
class RawBibEntry:
    """One record as written in the file, before lexing."""

    entry_type: str
    key: str
    fields: dict[str, str] = field(default_factory=dict)


@dataclass
class BibliographyRecord:
    """A bibliography record with lexed field values.

    Parameters
    ----------
    entry_type : str
        Lower-cased BibTeX type (``article``, ``book``, ...)
    key : str
        Citation key
    number : int
        1-based citation number in encounter order
    fields : dict of str to Expression
        Root node per field; its first group holds the lexed value
    raw_fields : dict of str to str
        Field values as written

    """

    entry_type: str
    key: str
    number: int
    fields: dict[str, Expression] = field(default_factory=dict)
    raw_fields: dict[str, str] = field(default_factory=dict)

    def value(self, name: str) -> list[Expression]:
        """Return the lexed nodes of field ``name`` (empty when absent)."""
        holder = self.fields.get(name.lower())
        return holder.group(0) if holder is not None else []


def _find_balanced_end(text: str, start: int, opener: str, closer: str) -> int:
    """Return the index of the closer matching the opener at ``start``, or -1."""
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index
    return -1


def _read_value(body: str, index: int) -> tuple[str, int]:
    """Read one field value starting at ``index``; return it and the index after it."""
    char = body[index]
    if char == "{":
        end = _find_balanced_end(body, index, "{", "}")
        if end == -1:
            return body[index + 1 :].strip(), len(body)
        return body[index + 1 : end], end + 1
    if char == '"':
        end = index + 1
        while end < len(body) and not (body[end] == '"' and body[end - 1] != "\\"):
            end += 1
        return body[index + 1 : end], end + 1
    end = index
    while end < len(body) and body[end] not in ",}":
        end += 1
    return body[index:end].strip(), end


def parse_fields(body: str) -> dict[str, str]:
    """Parse the ``name = value`` list of one record.

    Examples
    --------
    >>> parse_fields('Title = {The {TeX}book}, year = 1984, note="x"')
    {'title': 'The {TeX}book', 'year': '1984', 'note': 'x'}

    """
    result: dict[str, str] = {}
    index = 0
    length = len(body)
    while index < length:
        while index < length and (body[index].isspace() or body[index] == ","):
            index += 1
        if index >= length:
            break
        equals = body.find("=", index)
        if equals == -1:
            break
        name = body[index:equals].strip().lower()
        index = equals + 1
        while index < length and body[index].isspace():
            index += 1
        if index >= length:
            break
        value, index = _read_value(body, index)
        if name:
            result[name] = value
    return result


def split_entries(text: str) -> list[RawBibEntry]:
    """Split BibTeX text into raw records, skipping comment-like blocks."""
    entries: list[RawBibEntry] = []
    position = 0
    while (at := text.find("@", position)) != -1:
        match = _ENTRY_TYPE_PATTERN.match(text, at)
        if match is None or match.end() >= len(text) or text[match.end()] not in _CLOSING:
            position = at + 1
            continue

        entry_type = match.group(1).lower()
        opener = text[match.end()]
        end = _find_balanced_end(text, match.end(), opener, _CLOSING[opener])
        if end == -1:
            logger.warning("Unterminated bibliography record @%s, ignoring the rest of the file", entry_type)
            break
        position = end + 1

        if entry_type in _SKIPPED_ENTRY_TYPES:
            continue

        body = text[match.end() + 1 : end]
        key, _, rest = body.partition(",")
        entries.append(RawBibEntry(entry_type=entry_type, key=key.strip(), fields=parse_fields(rest)))
    return entries


def parse_bibliography(text: str, builder: TreeBuilder) -> dict[str, BibliographyRecord]:
    """Parse BibTeX text into records keyed by citation key.

    Parameters
    ----------
    text : str
        Contents of the ``.bib`` file
    builder : TreeBuilder
        Builder used to lex field values

    Returns
    -------
    dict
        Records in encounter order; the first record with a given key wins

    """
    records: dict[str, BibliographyRecord] = {}
    for entry in split_entries(text):
        if entry.key in records:
            logger.warning("Duplicate bibliography key %r ignored", entry.key)
            continue
        record = BibliographyRecord(
            entry_type=entry.entry_type,
            key=entry.key,
            number=len(records) + 1,
            raw_fields=dict(entry.fields),
        )
        for name, value in entry.fields.items():
            record.fields[name] = builder.build_root(value)
        records[entry.key] = record
    logger.debug("Parsed %d bibliography records", len(records))
    return records
