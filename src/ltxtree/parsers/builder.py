#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/parsers/builder.py
r"""Expression tree builder.

:class:`TreeBuilder` drives a :class:`~ltxtree.parsers.reader.LatexReader`
and turns every token into an :class:`~ltxtree.ast.nodes.Expression`,
recursively lexing the raw contents of brace groups, math spans and option
blocks with nested readers.

Math mode is tracked along each sequence: it switches on after
``\begin{equation}`` (and the other math environments) and off after the
matching ``\end``. Inside math, multi-character plain text runs are
segmented into one node per symbol, with an ``InvisibleTimes`` marker between
a number and a following letter run or parenthesis.

Examples
--------
    >>> from ltxtree.context import ConversionContext
    >>> builder = TreeBuilder(ConversionContext())
    >>> root = builder.build_root(r"$2x(y)$")
    >>> math = root.children[0][0]
    >>> [node.name for node in math.children[0][0].children[0]]
    ['2', 'InvisibleTimes', 'x', 'InvisibleTimes', '(', 'y', ')']

"""

from __future__ import annotations

import logging

from ltxtree.ast.nodes import Expression, ExpressionOptions, ExpressionType
from ltxtree.ast.utils import flatten_text
from ltxtree.constants import (
    INVISIBLE_TIMES,
    MATH_ENVIRONMENTS,
    SCRIPT_NAMES,
    SEGMENTED_TEXT,
    TEXT_ARGUMENT_COMMANDS,
)
from ltxtree.context import ConversionContext
from ltxtree.parsers.reader import LatexReader, Token

logger = logging.getLogger(__name__)


def segment_math_text(text: str) -> list[str]:
    """Split a math text run into symbols.

    Letter runs and digit runs stay together, ``<=`` and ``>=`` form one
    symbol, ``#`` keeps the digit after it, and whitespace separates
    symbols without producing any.

    Examples
    --------
    >>> segment_math_text("2x(y)")
    ['2', 'InvisibleTimes', 'x', 'InvisibleTimes', '(', 'y', ')']
    >>> segment_math_text("a <= 10")
    ['a', '<=', '10']

    """
    symbols: list[str] = []
    buffer = ""
    for char in text:
        if char.isspace():
            if buffer:
                symbols.append(buffer)
            buffer = ""
            continue
        if buffer and _continues_symbol(buffer, char):
            buffer += char
            continue
        if buffer:
            symbols.append(buffer)
        buffer = char
    if buffer:
        symbols.append(buffer)

    result: list[str] = []
    for index, symbol in enumerate(symbols):
        if index > 0 and _implies_multiplication(symbols[index - 1], symbol):
            result.append(INVISIBLE_TIMES)
        result.append(symbol)
    return result


def _continues_symbol(buffer: str, char: str) -> bool:
    if char.isdigit():
        return buffer.isdigit() or buffer == "#"
    if char.isalpha():
        return buffer.isalpha()
    return char == "=" and buffer in ("<", ">")


def _implies_multiplication(previous: str, current: str) -> bool:
    if previous.isdigit() and current.isalpha():
        return True
    return current == "(" and (previous.isalpha() or previous.isdigit())


def _switch_math_mode(node: Expression, math_mode: bool) -> bool:
    """Return the math mode that applies after ``node`` in its sequence."""
    if not node.is_command("begin", "end") or not node.children:
        return math_mode
    environment = flatten_text(node.children[0])
    if environment not in MATH_ENVIRONMENTS:
        return math_mode
    return node.name == "begin"


class TreeBuilder:
    """Build expression trees for one conversion.

    Parameters
    ----------
    context : ConversionContext
        Conversion state; nodes are created in its arena
    source_path : str, optional
        File name used in lexing errors

    """

    def __init__(self, context: ConversionContext, source_path: str | None = None) -> None:
        """Initialize the builder."""
        self.context = context
        self.arena = context.arena
        self.source_path = source_path

    def build_root(self, text: str) -> Expression:
        """Lex a whole document and return its Root node.

        Parameters
        ----------
        text : str
            Source text with ``\\n`` line endings

        Returns
        -------
        Expression
            Root node with a single children group

        Raises
        ------
        LexError
            If a construct is left open at the end of the text

        """
        root = self.arena.create("", ExpressionType.ROOT)
        reader = LatexReader(text, stream=True, source_path=self.source_path)
        root.add_group(self._build_sequence(reader))
        logger.debug("Built %d top-level nodes from %s", len(root.children[0]), self.source_path or "<string>")
        return root

    def build_fragment(self, text: str, math_mode: bool, line: int = 1) -> list[Expression]:
        """Lex an argument value into a detached list of nodes."""
        reader = LatexReader(text, math_mode=math_mode, stream=False, first_line=line, source_path=self.source_path)
        return self._build_sequence(reader)

    def _build_sequence(self, reader: LatexReader) -> list[Expression]:
        nodes: list[Expression] = []
        for token in reader:
            node = self._build_node(token, reader.math_mode)
            nodes.append(node)
            reader.math_mode = _switch_math_mode(node, reader.math_mode)
        return nodes

    def _create(self, token: Token, kind: ExpressionType, name: str, math_mode: bool) -> Expression:
        return self.arena.create(
            name,
            kind,
            math_mode=math_mode,
            space_before=token.space_before,
            line=token.line,
            raw_values=tuple(token.values),
        )

    def _build_node(self, token: Token, math_mode: bool) -> Expression:
        kind = token.kind

        if kind is ExpressionType.COMMAND:
            return self._build_command(token, math_mode)

        if kind in (ExpressionType.INLINE_MATH, ExpressionType.BLOCK_MATH):
            node = self._create(token, kind, token.name, math_mode)
            node.add_group(self.build_fragment(token.values[0], True, token.line))
            node.add_group([self.arena.create(token.values[0], ExpressionType.PLAIN_TEXT, line=token.line)])
            return node

        if kind is ExpressionType.BLOCK:
            block_math = True if token.name in SCRIPT_NAMES else math_mode
            node = self._create(token, kind, token.name, block_math)
            node.add_group(self.build_fragment(token.values[0], block_math, token.line))
            return node

        if kind is ExpressionType.PLAIN_TEXT:
            if math_mode and len(token.name.strip()) > 1:
                return self._build_segmented_text(token)
            return self._create(token, kind, token.name, math_mode)

        # comments and verbatim text are never math
        return self._create(token, kind, token.name, False)

    def _build_command(self, token: Token, math_mode: bool) -> Expression:
        node = self._create(token, ExpressionType.COMMAND, token.name, math_mode)
        value_math = math_mode and token.name not in TEXT_ARGUMENT_COMMANDS
        for value in token.values:
            node.add_group(self.build_fragment(value, value_math, token.line))
        if token.options is not None:
            node.set_options(self.build_options(token.options, math_mode, token.line))
        return node

    def build_options(self, raw: str, math_mode: bool, line: int = 1) -> ExpressionOptions:
        """Parse the contents of a ``[...]`` block.

        Contents holding ``=`` or ``,`` become a key-value mapping (value None
        for items without ``=``); anything else is lexed into an expression
        list.
        """
        if "=" in raw or "," in raw:
            mapping: dict[str, str | None] = {}
            for item in raw.split(","):
                key, separator, value = item.partition("=")
                mapping[key.strip()] = value.strip() if separator else None
            return ExpressionOptions(raw=raw, as_key_value=mapping)
        return ExpressionOptions(raw=raw, as_expressions=self.build_fragment(raw, math_mode, line))

    def _build_segmented_text(self, token: Token) -> Expression:
        block = self._create(token, ExpressionType.BLOCK, SEGMENTED_TEXT, True)
        children = []
        for symbol in segment_math_text(token.name):
            kind = ExpressionType.COMMAND if symbol == INVISIBLE_TIMES else ExpressionType.PLAIN_TEXT
            children.append(self.arena.create(symbol, kind, math_mode=True, line=token.line))
        block.add_group(children)
        block.raw_values = (token.name,)
        return block


def build_root(text: str, context: ConversionContext, source_path: str | None = None) -> Expression:
    """Build the tree for ``text`` with a throwaway :class:`TreeBuilder`."""
    return TreeBuilder(context, source_path).build_root(text)
