#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/context.py
"""Per-conversion state shared by the tree builder and the rewrite passes.

A :class:`ConversionContext` is created for every document. It owns the node
arena and the side tables the passes fill in: block counters, the label
reference table, table-of-contents entries, the macro registry and the
attached bibliography. Nothing here is module-global, so independent
documents can be parsed concurrently, each with its own context.

Pass ownership of the tables:

- custom command expansion writes ``macros``
- numbering writes ``counters`` and ``section_contents``
- label resolution writes ``references``
- bibliography attachment writes ``bibliography``

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from ltxtree.ast.families import TextSize, TextStyle
from ltxtree.ast.nodes import NodeArena
from ltxtree.exceptions import UnresolvedReferenceError
from ltxtree.options.latex import LatexOptions

if TYPE_CHECKING:
    from ltxtree.transforms.macros import MacroDefinition
    from ltxtree.utils.bibliography import BibliographyRecord

logger = logging.getLogger(__name__)

_LOCALIZED_TITLES: dict[str, dict[str, str]] = {
    "en": {"contents": "Contents", "bibliography": "Bibliography"},
    "ru": {"contents": "Содержание", "bibliography": "Литература"},
}


@dataclass(frozen=True)
class LabeledReference:
    """Target of a ``\\label``: the kind of the enclosing block and its number."""

    kind: str
    number: int


class SectionType(Enum):
    """Whether a section heading takes part in numbering."""

    NUMBERED = "numbered"
    UNNUMBERED = "unnumbered"


@dataclass
class SectionContents:
    """One table-of-contents entry.

    Parameters
    ----------
    title : str
        Plain-text heading
    number : str
        Display number ("2", "2.1"); empty for unnumbered headings
    subsections : list of SectionContents
        Nested entries

    """

    title: str
    number: str = ""
    subsections: list[SectionContents] = field(default_factory=list)


class ConversionContext:
    """Mutable state for one conversion.

    Parameters
    ----------
    options : LatexOptions, optional
        Parse options; defaults are used when omitted
    source_path : str or Path, optional
        Path of the main source file, used to resolve relative imports and
        the bibliography
    output_path : str or Path, optional
        Where a renderer will write its result

    """

    def __init__(
        self,
        options: LatexOptions | None = None,
        source_path: str | Path | None = None,
        output_path: str | Path | None = None,
    ) -> None:
        """Initialize an empty context."""
        self.options = options or LatexOptions()
        self.source_path = Path(source_path) if source_path is not None else None
        self.output_path = Path(output_path) if output_path is not None else None
        self.reset()

    def reset(self) -> None:
        """Drop every table so the context can serve a new conversion."""
        self.arena = NodeArena()
        self.counters: dict[str, int] = {}
        self.references: dict[str, LabeledReference] = {}
        self.section_contents: dict[SectionType, list[SectionContents]] = {
            SectionType.NUMBERED: [],
            SectionType.UNNUMBERED: [],
        }
        self.current_section_type = SectionType.NUMBERED
        self.current_text_size = TextSize.NORMALSIZE
        self.current_text_style = TextStyle.NORMAL
        self.macros: dict[str, MacroDefinition] = {}
        self.bibliography: dict[str, BibliographyRecord] = {}

    @property
    def localization(self) -> str:
        """Localization code from the options."""
        return self.options.localization

    @property
    def source_dir(self) -> Path:
        """Directory used to resolve relative resource paths."""
        if self.source_path is None:
            return Path.cwd()
        return self.source_path.resolve().parent

    @property
    def contents_title(self) -> str:
        """Localized title of the table of contents."""
        return _LOCALIZED_TITLES.get(self.localization, _LOCALIZED_TITLES["en"])["contents"]

    @property
    def bibliography_title(self) -> str:
        """Localized title of the bibliography section."""
        return _LOCALIZED_TITLES.get(self.localization, _LOCALIZED_TITLES["en"])["bibliography"]

    def next_counter(self, name: str) -> int:
        """Increment and return the counter for ``name`` (first value is 1)."""
        value = self.counters.get(name, 0) + 1
        self.counters[name] = value
        return value

    def register_reference(self, label: str, kind: str, number: int) -> bool:
        """Record a label target; the first definition of a label wins.

        Returns
        -------
        bool
            True when the label was new

        """
        if label in self.references:
            logger.warning("Duplicate label %r ignored", label)
            return False
        self.references[label] = LabeledReference(kind=kind, number=number)
        return True

    def lookup_reference(self, label: str) -> LabeledReference:
        """Return the target of ``label``.

        Raises
        ------
        UnresolvedReferenceError
            If the label was never defined

        """
        try:
            return self.references[label]
        except KeyError:
            raise UnresolvedReferenceError(label) from None

    def resolve_citation(self, key: str) -> BibliographyRecord | None:
        """Return the bibliography record for a citation key, if attached."""
        record = self.bibliography.get(key)
        if record is None:
            logger.debug("Citation key %r not found in bibliography", key)
        return record

    def current_css_style(self) -> str:
        """Space separated CSS classes for the current text size and style."""
        classes = [self.current_text_size.css_class]
        classes.extend(self.current_text_style.css_classes())
        return " ".join(classes)
