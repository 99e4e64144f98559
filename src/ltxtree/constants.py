#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/constants.py
"""Constants shared by the reader, the tree builder and the rewrite passes.

Environment and command name sets live here so that every pass agrees on
which constructs it owns. Defaults for :class:`ltxtree.options.LatexOptions`
are also declared here.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Pipeline
# =============================================================================

PASS_COUNT: Final[int] = 14

# Literal find/replace pairs applied to the whole source before lexing
PREFORMAT_RULES: Final[tuple[tuple[str, str], ...]] = (
    ("]\n", "] \n"),
    ("}\n", "} \n"),
    ("$\n", "$ \n"),
    ("\\\\", "\\\\ "),
)

# =============================================================================
# Reader
# =============================================================================

COMMAND_NAME_PATTERN: Final[str] = r"[a-zA-Z]+\*?"

TEXT_STOP_CHARS: Final[str] = "\\${%&"
MATH_STOP_CHARS: Final[str] = "\\${%&^_"

SCRIPT_NAMES: Final[frozenset[str]] = frozenset({"^", "_"})

VERBATIM_ENVIRONMENT: Final[str] = "verbatim"
VERBATIM_END: Final[str] = "\\end{verbatim}"

# Commands whose trailing brackets are delimiters, not option blocks
DELIMITER_COMMANDS: Final[frozenset[str]] = frozenset(
    {
        "left",
        "right",
        "middle",
        "big",
        "Big",
        "bigg",
        "Bigg",
        "bigl",
        "bigr",
        "Bigl",
        "Bigr",
        "biggl",
        "biggr",
        "Biggl",
        "Biggr",
    }
)

# =============================================================================
# Tree builder
# =============================================================================

BLOCK_BRACES: Final[str] = "{}"
SEGMENTED_TEXT: Final[str] = "PlainText"
INVISIBLE_TIMES: Final[str] = "InvisibleTimes"
PARAGRAPH: Final[str] = "paragraph"

# Environments whose body is tokenized in math mode
MATH_ENVIRONMENTS: Final[frozenset[str]] = frozenset(
    {"eqnarray", "eqnarray*", "equation", "equation*", "displaymath", "align", "align*"}
)

# Commands whose arguments are lexed as text even inside math
TEXT_ARGUMENT_COMMANDS: Final[frozenset[str]] = frozenset(
    {"begin", "end", "text", "mbox", "textrm", "textnormal", "label", "ref", "eqref", "hyperref"}
)

# =============================================================================
# Rewrite passes
# =============================================================================

IMPORT_COMMANDS: Final[frozenset[str]] = frozenset({"input", "include"})
DEFINE_COMMANDS: Final[frozenset[str]] = frozenset({"newcommand", "renewcommand", "providecommand"})
HOISTED_COMMANDS: Final[frozenset[str]] = frozenset({"author", "title", "date"})

DOCUMENT_ENVIRONMENT: Final[str] = "document"
TABLE_BLOCK_NAMES: Final[frozenset[str]] = frozenset({"array", "eqnarray", "eqnarray*", "tabular"})
ROW_SEPARATOR: Final[str] = "\\"
CELL_SEPARATOR: Final[str] = "&"
HORIZONTAL_RULE: Final[str] = "hline"

LIMITS_COMMAND: Final[str] = "limits"
ITEM_COMMAND: Final[str] = "item"
LABEL_COMMAND: Final[str] = "label"
BIBLIOGRAPHY_COMMAND: Final[str] = "bibliography"
GRAPHICS_COMMAND: Final[str] = "includegraphics"

# Named blocks that never act as paragraph breakers or label owners
INLINE_BLOCK_NAMES: Final[frozenset[str]] = frozenset(
    {"", BLOCK_BRACES, SEGMENTED_TEXT, "^", "_", "script^", "script_", "script^_", "script_^"}
)

ALGORITHM_BLOCK_NAMES: Final[frozenset[str]] = frozenset({"algorithmic", "algorithmicx"})
ALGORITHM_OPENERS: Final[frozenset[str]] = frozenset(
    {"Procedure", "Function", "Begin", "If", "For", "ForAll", "While", "Loop", "Repeat"}
)
ALGORITHM_CLOSERS: Final[frozenset[str]] = frozenset(
    {"EndProcedure", "EndFunction", "End", "EndIf", "EndFor", "EndWhile", "EndLoop", "Until"}
)
ALGORITHM_CONTINUATIONS: Final[frozenset[str]] = frozenset({"Else", "ElsIf"})
ALGORITHM_STATEMENT: Final[str] = "State"
ALGORITHM_INDENT_STEP: Final[int] = 2

SECTION_COMMANDS: Final[frozenset[str]] = frozenset({"section", "section*"})
SUBSECTION_COMMANDS: Final[frozenset[str]] = frozenset({"subsection", "subsection*"})

# =============================================================================
# Options defaults
# =============================================================================

DEFAULT_ENCODING: Final[str] = "utf-8"
DEFAULT_LOCALIZATION: Final[str] = "en"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 120.0
DEFAULT_MAX_IMPORT_DEPTH: Final[int] = 16
DEFAULT_MAX_MACRO_EXPANSIONS: Final[int] = 10000
DEFAULT_IMPORT_SUFFIX: Final[str] = ".tex"
DEFAULT_BIBLIOGRAPHY_SUFFIX: Final[str] = ".bib"

SUPPORTED_LOCALIZATIONS: Final[frozenset[str]] = frozenset({"en", "ru"})
