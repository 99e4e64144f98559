#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/parsers/reader.py
r"""Tokenizer for LaTeX source text.

The :class:`LatexReader` turns source text into a flat sequence of
:class:`Token` objects by scanning one physical line at a time. It knows
nothing about tree structure: brace groups, math spans and command arguments
are returned as raw strings that the tree builder lexes again with a nested
reader.

Dispatch happens on the first non-blank character:

- ``\`` starts a command (``[a-zA-Z]+\*?`` or one symbol); ``\[`` opens
  display math up to ``\]``
- ``$`` / ``$$`` open inline / display math
- ``{`` opens a balanced brace group
- ``%`` is a comment running to the end of the line
- ``&`` is a table cell separator
- ``^`` / ``_`` in math mode take one script argument
- anything else is a plain text run up to the next stop character

A reader created for a whole document (``stream=True``) pulls further lines
when a construct is not closed on the current one and turns a blank line
inside a text run into a ``\paragraph`` token. Nested readers (argument
values) see a single line.

Examples
--------
    >>> [token.name for token in tokenize(r"\textbf{bold} text")]
    ['textbf', 'text']
    >>> tokenize(r"\textbf{bold}")[0].values
    ['bold']

"""

from __future__ import annotations

import logging
import re
from collections import deque
from dataclasses import dataclass, field

from ltxtree.ast.nodes import ExpressionType
from ltxtree.constants import (
    BLOCK_BRACES,
    CELL_SEPARATOR,
    COMMAND_NAME_PATTERN,
    DELIMITER_COMMANDS,
    MATH_STOP_CHARS,
    PARAGRAPH,
    PREFORMAT_RULES,
    SCRIPT_NAMES,
    TEXT_STOP_CHARS,
    VERBATIM_END,
    VERBATIM_ENVIRONMENT,
)
from ltxtree.exceptions import LexError

logger = logging.getLogger(__name__)

_COMMAND_NAME_RE = re.compile(COMMAND_NAME_PATTERN)
_DIGITS_RE = re.compile(r"\d+")
_LETTERS_RE = re.compile(r"[a-zA-Z]+")

# Trailing base of a math text run that a following script attaches to
_BASE_CHUNK_PATTERNS = (
    re.compile(r"#\d\s*\Z"),
    re.compile(r"[a-zA-Z]+\s*\Z"),
    re.compile(r"\d+\s*\Z"),
    re.compile(r"\S\s*\Z"),
)


@dataclass
class Token:
    """One lexical unit produced by the reader.

    Parameters
    ----------
    kind : ExpressionType
        Node kind the unit becomes
    name : str
        Command name, block name, delimiter, or literal payload
    values : list of str
        Raw contents of each brace group (commands, blocks, math spans)
    options : str or None
        Raw contents of the first ``[...]`` group of a command
    space_before : bool
        Whether whitespace or a line break was skipped before the unit
    line : int
        1-based line where the unit starts

    """

    kind: ExpressionType
    name: str
    values: list[str] = field(default_factory=list)
    options: str | None = None
    space_before: bool = False
    line: int = 1


def _is_escaped(text: str, index: int) -> bool:
    """Return True when the character at ``index`` follows an odd run of backslashes."""
    count = 0
    index -= 1
    while index >= 0 and text[index] == "\\":
        count += 1
        index -= 1
    return count % 2 == 1


def _stop_position(text: str, stop_chars: str) -> int:
    for index, char in enumerate(text):
        if char in stop_chars:
            return index
    return -1


def _smart_trim(text: str) -> str:
    """Collapse trailing whitespace to a single space."""
    trimmed = text.rstrip()
    if len(trimmed) != len(text):
        return trimmed + " "
    return text


class LatexReader:
    """Line-oriented tokenizer.

    Parameters
    ----------
    text : str
        Source text with ``\\n`` line endings
    math_mode : bool, default False
        Initial math mode; the tree builder flips :attr:`math_mode` when a
        math environment opens or closes
    stream : bool, default True
        True for a whole document, False for an argument value
    first_line : int, default 1
        Line number of the first line of ``text``
    source_path : str, optional
        File name reported in :class:`~ltxtree.exceptions.LexError`

    """

    def __init__(
        self,
        text: str,
        math_mode: bool = False,
        stream: bool = True,
        first_line: int = 1,
        source_path: str | None = None,
    ) -> None:
        """Initialize the reader at the start of ``text``."""
        self.math_mode = math_mode
        self.stream = stream
        self.first_line = first_line
        self.source_path = source_path
        if stream:
            self._lines = text.split("\n")
            # a final newline ends the last line, it does not open a blank one
            if len(self._lines) > 1 and text.endswith("\n"):
                self._lines.pop()
        else:
            self._lines = [text.replace("\n", " ")]
        self._row = 0
        self._buffer: str | None = self._lines[0]
        self._pending: deque[Token] = deque()
        self._verbatim = False

    # ------------------------------------------------------------------
    # Line handling
    # ------------------------------------------------------------------

    @property
    def line(self) -> int:
        """Current 1-based line number."""
        return self.first_line + self._row

    @property
    def in_verbatim(self) -> bool:
        """True while the reader is inside a verbatim environment."""
        return self._verbatim

    def _advance(self) -> str | None:
        """Move to the next physical line and return it, or None at the end."""
        if self._row + 1 >= len(self._lines):
            self._buffer = None
            return None
        self._row += 1
        self._buffer = self._lines[self._row]
        return self._buffer

    def _skip_space(self, comments: bool = False) -> bool:
        """Skip whitespace and blank lines; optionally skip comments too."""
        skipped = False
        while self._buffer is not None:
            stripped = self._buffer.lstrip()
            if len(stripped) != len(self._buffer):
                skipped = True
            if comments and stripped.startswith("%"):
                stripped = ""
            if stripped:
                self._buffer = stripped
                return skipped
            if self._advance() is None:
                return skipped
            skipped = True
        return skipped

    def _lex_error(self, construct: str, line: int) -> LexError:
        return LexError(construct, line, self.source_path)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def __iter__(self):
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    def next_token(self) -> Token | None:
        """Return the next lexical unit, or None at the end of input.

        Raises
        ------
        LexError
            If a brace group, math span, option block or verbatim
            environment is not closed before the end of input

        """
        if self._pending:
            return self._pending.popleft()

        if self._verbatim:
            return self._read_verbatim()

        space_before = self._skip_space()
        if self._buffer is None:
            return None

        line = self.line
        char = self._buffer[0]

        if char == "\\":
            token = self._read_command()
        elif char == "$":
            token = self._read_dollar_math()
        elif char == "%":
            token = Token(ExpressionType.COMMENT, self._buffer[1:])
            self._buffer = ""
        elif char == "{":
            token = Token(ExpressionType.BLOCK, BLOCK_BRACES, values=[self._read_balanced("{", "}")])
        elif char == CELL_SEPARATOR:
            token = Token(ExpressionType.PLAIN_TEXT, CELL_SEPARATOR)
            self._buffer = self._buffer[1:]
        elif char in SCRIPT_NAMES and self.math_mode:
            token = self._read_script()
        else:
            token = self._read_plain_text()

        token.space_before = space_before
        token.line = line
        return token

    # ------------------------------------------------------------------
    # Constructs
    # ------------------------------------------------------------------

    def _read_command(self) -> Token:
        assert self._buffer is not None
        rest = self._buffer[1:]
        match = _COMMAND_NAME_RE.match(rest)

        if match is None:
            if not rest:
                # line break control symbol at the end of a line
                self._buffer = ""
                return Token(ExpressionType.COMMAND, " ")
            if rest[0] == "[":
                value = self._read_balanced("\\[", "\\]", track_braces=True)
                return Token(ExpressionType.BLOCK_MATH, "\\[", values=[value])
            self._buffer = rest[1:]
            return Token(ExpressionType.COMMAND, rest[0])

        name = match.group()
        self._buffer = rest[len(name) :]
        if name in DELIMITER_COMMANDS:
            return Token(ExpressionType.COMMAND, name)
        options, values = self._read_arguments(name)
        return Token(ExpressionType.COMMAND, name, values=values, options=options)

    def _read_arguments(self, name: str) -> tuple[str | None, list[str]]:
        """Consume ``[...]`` and ``{...}`` groups following a command name.

        Only the first bracket group is kept as options. Whitespace and
        comments between groups are skipped; anything else ends the scan and
        is left in place for the next token.
        """
        options: str | None = None
        values: list[str] = []
        while True:
            saved = (self._buffer, self._row)
            self._skip_space(comments=True)
            if self._buffer is None or self._buffer[0] not in "[{":
                self._buffer, self._row = saved
                return options, values

            if self._buffer[0] == "[":
                raw = self._read_options()
                if options is None:
                    options = raw
                else:
                    logger.debug("Extra option block [%s] of \\%s ignored", raw, name)
                continue

            values.append(self._read_balanced("{", "}"))
            if name == "begin" and values == [VERBATIM_ENVIRONMENT]:
                self._verbatim = True
                return options, values

    def _read_options(self) -> str:
        assert self._buffer is not None
        start = self.line
        parts: list[str] = []
        text = self._buffer[1:]
        while (position := text.find("]")) == -1:
            parts.append(text)
            if not self.stream or self._advance() is None:
                raise self._lex_error("[", start)
            text = self._buffer or ""
        parts.append(text[:position])
        self._buffer = text[position + 1 :]
        return " ".join(part.strip() for part in parts if part.strip())

    def _read_balanced(self, opener: str, closer: str, track_braces: bool = False) -> str:
        """Read a delimited span starting at the current position.

        Nested ``opener``/``closer`` pairs are counted unless both are the same
        string. Escaped delimiters (an odd run of backslashes before them)
        never count. With ``track_braces`` the closer is only accepted
        outside brace groups. Lines are joined with a single space.
        """
        assert self._buffer is not None
        start = self.line
        text = self._buffer[len(opener) :]
        parts: list[str] = []
        depth = 1
        braces = 0

        while True:
            index = 0
            while index < len(text):
                if _is_escaped(text, index):
                    index += 1
                    continue
                if braces == 0 and text.startswith(closer, index):
                    depth -= 1
                    if depth == 0:
                        parts.append(text[:index])
                        self._buffer = text[index + len(closer) :]
                        return " ".join(parts)
                    index += len(closer)
                    continue
                if opener != closer and text.startswith(opener, index):
                    depth += 1
                    index += len(opener)
                    continue
                if track_braces:
                    if text[index] == "{":
                        braces += 1
                    elif text[index] == "}" and braces > 0:
                        braces -= 1
                index += 1

            parts.append(text)
            if not self.stream or self._advance() is None:
                raise self._lex_error(opener, start)
            text = self._buffer or ""

    def _read_dollar_math(self) -> Token:
        assert self._buffer is not None
        if self._buffer.startswith("$$"):
            value = self._read_balanced("$$", "$$", track_braces=True)
            return Token(ExpressionType.BLOCK_MATH, "$$", values=[value])
        value = self._read_balanced("$", "$", track_braces=True)
        return Token(ExpressionType.INLINE_MATH, "$", values=[value])

    def _read_script(self) -> Token:
        assert self._buffer is not None
        name = self._buffer[0]
        start = self.line
        self._buffer = self._buffer[1:]
        self._skip_space()
        if self._buffer is None:
            raise self._lex_error(name, start)

        char = self._buffer[0]
        if char == "{":
            value = self._read_balanced("{", "}")
        elif char == "\\":
            value = self._read_script_command()
        elif char == "#" and self._buffer[1:2].isdigit():
            # macro parameter placeholder
            value = self._buffer[:2]
            self._buffer = self._buffer[2:]
        else:
            pattern = _DIGITS_RE if char.isdigit() else _LETTERS_RE if char.isalpha() else None
            match = pattern.match(self._buffer) if pattern is not None else None
            value = match.group() if match is not None else char
            self._buffer = self._buffer[len(value) :]

        return Token(ExpressionType.BLOCK, name, values=[value])

    def _read_script_command(self) -> str:
        """Read a command used as a script argument and return it re-stringified."""
        assert self._buffer is not None
        match = _COMMAND_NAME_RE.match(self._buffer, 1)
        if match is None:
            value = self._buffer[:2]
            self._buffer = self._buffer[2:]
            return value

        name = match.group()
        self._buffer = self._buffer[match.end() :]
        if name in DELIMITER_COMMANDS:
            return "\\" + name
        options, values = self._read_arguments(name)
        value = "\\" + name
        if options is not None:
            value += f"[{options}]"
        return value + "".join(f"{{{item}}}" for item in values)

    def _read_plain_text(self) -> Token:
        assert self._buffer is not None
        stop_chars = MATH_STOP_CHARS if self.math_mode else TEXT_STOP_CHARS
        text = self._buffer
        collected = ""
        at_end = False
        position = _stop_position(text, stop_chars)

        while position == -1:
            if not self.stream:
                position = len(text)
                break
            following = self._advance()
            if following is None:
                collected += text
                text, position, at_end = "", 0, True
                break
            if not following.strip():
                collected += text + " "
                self._buffer = ""
                self._pending.append(Token(ExpressionType.COMMAND, PARAGRAPH, line=self.line))
                text, position = "", 0
                break
            collected += text + " "
            text = following.lstrip()
            position = _stop_position(text, stop_chars)

        name = collected + text[:position]
        rest = text[position:]

        if rest and rest[0] in SCRIPT_NAMES and self.math_mode:
            for pattern in _BASE_CHUNK_PATTERNS:
                match = pattern.search(name)
                if match is not None and match.group().strip():
                    if match.start() > 0:
                        rest = name[match.start() :] + rest
                        name = name[: match.start()]
                    break

        if at_end:
            name = name.rstrip()
        else:
            self._buffer = rest
        name = name.strip() if self.math_mode else _smart_trim(name)
        return Token(ExpressionType.PLAIN_TEXT, name)

    def _read_verbatim(self) -> Token:
        start = self.line
        text = self._buffer
        if text is not None and not text.strip():
            text = self._advance()

        parts: list[str] = []
        while text is not None:
            position = text.find(VERBATIM_END)
            if position != -1:
                parts.append(text[:position])
                self._buffer = text[position:]
                self._verbatim = False
                return Token(ExpressionType.VERBATIM, "\n".join(parts), line=start)
            parts.append(text)
            text = self._advance()

        raise self._lex_error(VERBATIM_ENVIRONMENT, start)


def tokenize(text: str, math_mode: bool = False, stream: bool = True) -> list[Token]:
    """Read all tokens of ``text`` with a fixed math mode.

    Convenience wrapper for inspection and tests; the tree builder drives a
    :class:`LatexReader` directly so it can switch math mode.
    """
    return list(LatexReader(text, math_mode=math_mode, stream=stream))


def prepare_source(text: str, preformat: bool = True) -> str:
    """Normalize line endings and apply the preformatting substitutions.

    Parameters
    ----------
    text : str
        Raw decoded source
    preformat : bool, default True
        Apply :data:`~ltxtree.constants.PREFORMAT_RULES` in order

    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if preformat:
        for old, new in PREFORMAT_RULES:
            text = text.replace(old, new)
    return text
