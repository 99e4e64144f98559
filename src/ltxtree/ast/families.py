#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/ast/families.py
r"""Static lookup tables for command families.

Each family (accents, text sizes, text styles, list kinds) is one enum with
a single table mapping every member to its rendering parameters. Renderers
switch on :class:`~ltxtree.ast.nodes.Expression` kind and name and consult
these tables; the rewrite passes use them to recognise family members.

The module also holds the command arity table: how many brace groups a known
command expects. Commands missing from every table are unknown constructs.

Examples
--------
    >>> Accent.from_command("widehat").spec.stretchy
    True
    >>> TextSize.from_command("Large").css_class
    'xlarge'
    >>> expected_argument_count("frac")
    2

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag

# =============================================================================
# Accents
# =============================================================================


@dataclass(frozen=True)
class AccentSpec:
    """Rendering parameters of one accent.

    Parameters
    ----------
    command : str
        Command name without the backslash
    entity : str
        Character reference placed over the base
    stretchy : bool
        Whether the accent stretches over the whole base
    math_mode : bool
        True for math accents, False for text accents such as ``\'``

    """

    command: str
    entity: str
    stretchy: bool
    math_mode: bool


class Accent(Enum):
    """Accent commands in math and text mode."""

    OVERLINE = "overline"
    HAT = "hat"
    WIDEHAT = "widehat"
    CHECK = "check"
    TILDE = "tilde"
    WIDETILDE = "widetilde"
    ACUTE = "acute"
    GRAVE = "grave"
    DOT = "dot"
    DDOT = "ddot"
    BREVE = "breve"
    BAR = "bar"
    VEC = "vec"
    TEXT_HAT = "^"
    TEXT_CHECK = "v"
    TEXT_TILDE = "~"
    TEXT_ACUTE = "'"
    TEXT_GRAVE = "`"
    TEXT_DOT = "."
    TEXT_DDOT = '"'
    TEXT_BREVE = "u"
    TEXT_BAR = "="

    @property
    def spec(self) -> AccentSpec:
        """Rendering parameters for this accent."""
        return ACCENT_TABLE[self]

    @classmethod
    def from_command(cls, name: str) -> Accent | None:
        """Return the accent for a command name, or None."""
        return _ACCENTS_BY_COMMAND.get(name)


ACCENT_TABLE: dict[Accent, AccentSpec] = {
    Accent.OVERLINE: AccentSpec("overline", "&#x00af;", True, True),
    Accent.HAT: AccentSpec("hat", "&#x005E;", False, True),
    Accent.WIDEHAT: AccentSpec("widehat", "&#x005E;", True, True),
    Accent.CHECK: AccentSpec("check", "&#x2228;", False, True),
    Accent.TILDE: AccentSpec("tilde", "~", False, True),
    Accent.WIDETILDE: AccentSpec("widetilde", "~", True, True),
    Accent.ACUTE: AccentSpec("acute", "&#x00B4;", False, True),
    Accent.GRAVE: AccentSpec("grave", "&#x0060;", False, True),
    Accent.DOT: AccentSpec("dot", "&#x00B7;", False, True),
    Accent.DDOT: AccentSpec("ddot", "&#x0308;", False, True),
    Accent.BREVE: AccentSpec("breve", "&#x0306;", False, True),
    Accent.BAR: AccentSpec("bar", "&#x0304;", False, True),
    Accent.VEC: AccentSpec("vec", "&#x20D7;", False, True),
    Accent.TEXT_HAT: AccentSpec("^", "&#x005E;", False, False),
    Accent.TEXT_CHECK: AccentSpec("v", "&#x2228;", False, False),
    Accent.TEXT_TILDE: AccentSpec("~", "~", False, False),
    Accent.TEXT_ACUTE: AccentSpec("'", "&#x00B4;", False, False),
    Accent.TEXT_GRAVE: AccentSpec("`", "&#x0060;", False, False),
    Accent.TEXT_DOT: AccentSpec(".", "&#x00B7;", False, False),
    Accent.TEXT_DDOT: AccentSpec('"', "&#x0308;", False, False),
    Accent.TEXT_BREVE: AccentSpec("u", "&#x0306;", False, False),
    Accent.TEXT_BAR: AccentSpec("=", "&#x0304;", False, False),
}

_ACCENTS_BY_COMMAND: dict[str, Accent] = {spec.command: accent for accent, spec in ACCENT_TABLE.items()}

# =============================================================================
# Text sizes
# =============================================================================


class TextSize(Enum):
    """Font size switches, smallest first."""

    TINY = "tiny"
    SCRIPTSIZE = "scriptsize"
    FOOTNOTESIZE = "footnotesize"
    SMALL = "small"
    NORMALSIZE = "normalsize"
    LARGE = "large"
    XLARGE = "Large"
    XXLARGE = "LARGE"
    HUGE = "huge"
    XHUGE = "Huge"

    @property
    def css_class(self) -> str:
        """CSS class name used for this size."""
        return TEXT_SIZE_CSS[self]

    @classmethod
    def from_command(cls, name: str) -> TextSize | None:
        """Return the size for a command name, or None."""
        try:
            return cls(name)
        except ValueError:
            return None


TEXT_SIZE_CSS: dict[TextSize, str] = {
    TextSize.TINY: "tiny",
    TextSize.SCRIPTSIZE: "scriptsize",
    TextSize.FOOTNOTESIZE: "footnotesize",
    TextSize.SMALL: "small",
    TextSize.NORMALSIZE: "normalsize",
    TextSize.LARGE: "large",
    TextSize.XLARGE: "xlarge",
    TextSize.XXLARGE: "xxlarge",
    TextSize.HUGE: "huge",
    TextSize.XHUGE: "xhuge",
}

# =============================================================================
# Text styles
# =============================================================================


class TextStyle(Flag):
    """Combinable text style flags."""

    NORMAL = 0
    BOLD = 1
    ITALIC = 2
    UNDERLINED = 4
    STRIKETHROUGH = 8

    @classmethod
    def from_command(cls, name: str) -> TextStyle | None:
        """Return the style applied by a command name, or None."""
        return TEXT_STYLE_COMMANDS.get(name)

    def css_classes(self) -> list[str]:
        """Return the CSS classes for every flag set in this value."""
        return [css for flag, css in TEXT_STYLE_CSS.items() if flag in self]


TEXT_STYLE_COMMANDS: dict[str, TextStyle] = {
    "textit": TextStyle.ITALIC,
    "emph": TextStyle.ITALIC,
    "textbf": TextStyle.BOLD,
    "underline": TextStyle.UNDERLINED,
    "sout": TextStyle.STRIKETHROUGH,
}

TEXT_STYLE_CSS: dict[TextStyle, str] = {
    TextStyle.BOLD: "text_bold",
    TextStyle.ITALIC: "text_italic",
    TextStyle.UNDERLINED: "text_underlined",
    TextStyle.STRIKETHROUGH: "text_strikethrough",
}

# =============================================================================
# List kinds
# =============================================================================


class ListKind(Enum):
    """List environments and the markup element each one maps to."""

    ITEMIZE = "itemize"
    ENUMERATE = "enumerate"
    DESCRIPTION = "description"

    @property
    def element(self) -> str:
        """Markup element name for the list."""
        return LIST_ELEMENTS[self]

    @classmethod
    def from_environment(cls, name: str) -> ListKind | None:
        """Return the list kind for an environment name, or None."""
        try:
            return cls(name)
        except ValueError:
            return None


LIST_ELEMENTS: dict[ListKind, str] = {
    ListKind.ITEMIZE: "ul",
    ListKind.ENUMERATE: "ol",
    ListKind.DESCRIPTION: "dl",
}

LIST_BLOCK_NAMES: frozenset[str] = frozenset(kind.value for kind in ListKind)

# =============================================================================
# Command arity
# =============================================================================

COMMAND_ARITY: dict[str, int] = {
    "section": 1,
    "section*": 1,
    "subsection": 1,
    "subsection*": 1,
    "sqrt": 1,
    "includegraphics": 1,
    "item": 1,
    "label": 1,
    "ref": 1,
    "eqref": 1,
    "hyperref": 1,
    "url": 1,
    "href": 2,
    "cite": 1,
    "mathcal": 1,
    "footnote": 1,
    "thanks": 1,
    "bibliography": 1,
    "input": 1,
    "include": 1,
    "newcommand": 2,
    "renewcommand": 2,
    "providecommand": 2,
    "begin": 1,
    "end": 1,
    "frac": 2,
    "dfrac": 2,
    "tfrac": 2,
    "Procedure": 1,
    "Function": 1,
    "IEEEauthorblockN": 1,
    "IEEEauthorblockA": 1,
    "State": 0,
    "Statex": 0,
    "EndProcedure": 0,
    "EndFunction": 0,
}
COMMAND_ARITY.update({accent.spec.command: 1 for accent in Accent})
COMMAND_ARITY.update({style_command: 1 for style_command in TEXT_STYLE_COMMANDS})
COMMAND_ARITY.update({size.value: 0 for size in TextSize})


def expected_argument_count(name: str) -> int | None:
    """Return the number of brace groups a known command expects.

    Parameters
    ----------
    name : str
        Command name without the backslash

    Returns
    -------
    int or None
        Expected group count, or None for commands missing from the table

    """
    return COMMAND_ARITY.get(name)


def is_known_command(name: str) -> bool:
    """Return True when ``name`` belongs to any command table."""
    return name in COMMAND_ARITY
