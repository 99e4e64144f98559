"""ltxtree - Parse LaTeX documents into a normalized expression tree.

ltxtree reads LaTeX source into a parent-linked tree of expression nodes and
rewrites it through a fixed sequence of passes: imported files are spliced
in, custom commands expanded, environments folded into blocks, tables split
into rows and cells, scripts grouped with their base, lists and paragraphs
built, and blocks, labels and algorithm lines numbered. The finished tree
and the populated :class:`ConversionContext` are what a renderer consumes.

Key Features
------------
- Line-oriented reader with math-mode aware tokenization
- Arena-backed nodes with integer parent handles
- Ordered rewrite passes with progress reporting
- Import inclusion, macro expansion and BibTeX attachment
- JSON serialization and a command line inspector

Requirements
------------
- Python 3.10+
- chardet, pylatexenc, rich

Examples
--------
Parse a string:

    >>> from ltxtree import parse_latex
    >>> result = parse_latex(r"\\begin{itemize}\\item A\\item B\\end{itemize}")
    >>> itemize = result.root.children[0][0]
    >>> [item.name for item in itemize.children[0]]
    ['item', 'item']

Parse a file and look up a label:

    >>> from ltxtree import parse_file
    >>> result = parse_file("paper.tex")
    >>> result.context.lookup_reference("eq:main")
    LabeledReference(kind='equation', number=1)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/ltxtree/__init__.py

from ltxtree.api import ParseResult, find_graphics, parse_file, parse_latex, parse_many, parse_with_timeout
from ltxtree.ast.nodes import Expression, ExpressionOptions, ExpressionType, NodeArena
from ltxtree.context import ConversionContext, LabeledReference, SectionContents, SectionType
from ltxtree.exceptions import (
    ArgumentShapeError,
    ConversionTimeoutError,
    InvalidOptionsError,
    LexError,
    LtxTreeError,
    MissingResourceError,
    ParsingError,
    ResourceError,
    TransformError,
    UnresolvedReferenceError,
    ValidationError,
)
from ltxtree.options.latex import LatexOptions
from ltxtree.progress import ProgressCallback, ProgressEvent

__version__ = "0.1.0"

__all__ = [
    "ArgumentShapeError",
    "ConversionContext",
    "ConversionTimeoutError",
    "Expression",
    "ExpressionOptions",
    "ExpressionType",
    "InvalidOptionsError",
    "LabeledReference",
    "LatexOptions",
    "LexError",
    "LtxTreeError",
    "MissingResourceError",
    "NodeArena",
    "ParseResult",
    "ParsingError",
    "ProgressCallback",
    "ProgressEvent",
    "ResourceError",
    "SectionContents",
    "SectionType",
    "TransformError",
    "UnresolvedReferenceError",
    "ValidationError",
    "__version__",
    "find_graphics",
    "parse_file",
    "parse_latex",
    "parse_many",
    "parse_with_timeout",
]
