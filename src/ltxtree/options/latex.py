"""Configuration options for LaTeX parsing.

This module defines options for reading LaTeX source into an expression
tree and running the rewrite passes over it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ltxtree.constants import (
    DEFAULT_LOCALIZATION,
    DEFAULT_MAX_IMPORT_DEPTH,
    DEFAULT_MAX_MACRO_EXPANSIONS,
    DEFAULT_TIMEOUT_SECONDS,
    SUPPORTED_LOCALIZATIONS,
)
from ltxtree.options.base import BaseParserOptions


@dataclass(frozen=True)
class LatexOptions(BaseParserOptions):
    r"""Configuration options for LaTeX-to-tree parsing.

    Parameters
    ----------
    preformat : bool, default True
        Apply the literal preformatting substitutions before lexing.
    include_imports : bool, default True
        Splice ``\input``/``\include`` files into the tree.
    fail_on_missing_imports : bool, default True
        Raise :class:`~ltxtree.exceptions.MissingResourceError` when an
        imported file is missing. When False the include command is dropped
        and a warning is logged.
    max_import_depth : int, default 16
        Maximum nesting of imported files.
    resolve_bibliography : bool, default True
        Parse the file named by the first ``\bibliography`` command.
    fail_on_missing_bibliography : bool, default False
        Raise when the bibliography file is missing instead of logging a warning.
    max_macro_expansions : int, default 10000
        Upper bound on custom command instantiations per document.
    localization : str, default "en"
        Localization code for generated titles ("en" or "ru").
    timeout : float, default 120.0
        Seconds allowed by :func:`ltxtree.api.parse_with_timeout`.

    Examples
    --------
    Skip imports and bibliography:
        >>> options = LatexOptions(include_imports=False, resolve_bibliography=False)

    Derive a strict variant:
        >>> strict = options.create_updated(fail_on_missing_bibliography=True)

    """

    preformat: bool = field(
        default=True,
        metadata={"help": "Apply whitespace guarding substitutions before lexing", "importance": "advanced"},
    )
    include_imports: bool = field(
        default=True,
        metadata={
            "help": "Splice \\input and \\include files into the tree",
            "cli_name": "no-imports",
            "importance": "core",
        },
    )
    fail_on_missing_imports: bool = field(
        default=True,
        metadata={"help": "Raise an error when an imported file is missing", "importance": "core"},
    )
    max_import_depth: int = field(
        default=DEFAULT_MAX_IMPORT_DEPTH,
        metadata={"help": "Maximum nesting of imported files", "type": int, "importance": "security"},
    )
    resolve_bibliography: bool = field(
        default=True,
        metadata={
            "help": "Parse the file named by \\bibliography",
            "cli_name": "no-bibliography",
            "importance": "core",
        },
    )
    fail_on_missing_bibliography: bool = field(
        default=False,
        metadata={"help": "Raise an error when the bibliography file is missing", "importance": "advanced"},
    )
    max_macro_expansions: int = field(
        default=DEFAULT_MAX_MACRO_EXPANSIONS,
        metadata={"help": "Maximum custom command instantiations", "type": int, "importance": "security"},
    )
    localization: str = field(
        default=DEFAULT_LOCALIZATION,
        metadata={
            "help": "Localization code for generated titles",
            "choices": sorted(SUPPORTED_LOCALIZATIONS),
            "importance": "advanced",
        },
    )
    timeout: float = field(
        default=DEFAULT_TIMEOUT_SECONDS,
        metadata={"help": "Seconds allowed for a timed conversion", "type": float, "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges and choices.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()

        if self.max_import_depth < 1:
            raise ValueError(f"max_import_depth must be at least 1, got {self.max_import_depth}")

        if self.max_macro_expansions < 1:
            raise ValueError(f"max_macro_expansions must be at least 1, got {self.max_macro_expansions}")

        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

        if self.localization not in SUPPORTED_LOCALIZATIONS:
            raise ValueError(
                f"localization must be one of {sorted(SUPPORTED_LOCALIZATIONS)}, got {self.localization!r}"
            )
