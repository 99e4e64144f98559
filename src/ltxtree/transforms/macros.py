#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/macros.py
r"""Custom command expansion.

A single walk discovers ``\newcommand``, ``\renewcommand`` and
``\providecommand`` definitions and expands later invocations in place, so a
macro is only known after its definition (no forward references).

An invocation is replaced by a copy of the body matching its mode. Inside
PlainText payloads every ``#k`` placeholder is spliced out and replaced by a
copy of the k-th argument group; a placeholder may occur several times in one
run. Argument groups beyond the declared arity follow the body as ``{}``
blocks. The expansion is then rescanned from the same position, so macros
used inside a body expand too.

A macro declared without parameters but invoked with brace groups, as in
``\newcommand{\vect}{\mathbf}`` followed by ``\vect{x}``, hands the groups to
the last command of its body:

- no command in the body: the groups follow the body as ``{}`` blocks
- the command is not followed by a script: the groups become its argument
  groups, and the invocation's options become its options when it has none
- the command is followed by one or two scripts: the group contents are
  inserted after those scripts

Examples
--------
    >>> from ltxtree import parse_latex
    >>> result = parse_latex(r"\newcommand{\foo}[1]{X#1Y}\foo{Z}")
    >>> sorted(result.context.macros)
    ['foo']

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ltxtree.ast.nodes import Expression, ExpressionOptions, ExpressionType
from ltxtree.ast.utils import find_last_command, require_argument_groups
from ltxtree.constants import BLOCK_BRACES, DEFINE_COMMANDS
from ltxtree.context import ConversionContext
from ltxtree.exceptions import ArgumentShapeError, TransformError
from ltxtree.parsers.builder import TreeBuilder

logger = logging.getLogger(__name__)

MAX_MACRO_ARITY = 9

_PLACEHOLDER_PATTERN = re.compile(r"#([1-9])")


@dataclass
class MacroDefinition:
    """A registered custom command.

    Parameters
    ----------
    name : str
        Command name without the backslash
    arity : int
        Number of ``#k`` parameters (0-9)
    text_body : list of Expression
        Detached template nodes used for invocations in text mode
    raw_body : str
        Body source, lexed in math mode on first use in math
    defined_by : str
        Define command that registered the macro
    line : int, optional
        Source line of the definition

    """

    name: str
    arity: int
    text_body: list[Expression]
    raw_body: str = ""
    defined_by: str = "newcommand"
    line: int | None = None
    math_body: list[Expression] | None = field(default=None, repr=False)

    def body_for(self, math_mode: bool, builder: TreeBuilder) -> list[Expression]:
        """Return the template matching the invocation's mode."""
        if not math_mode:
            return self.text_body
        if self.math_body is None:
            self.math_body = builder.build_fragment(self.raw_body, True, self.line or 1)
        return self.math_body


def expand_macros(root: Expression, context: ConversionContext) -> None:
    """Register macro definitions and expand their invocations in place.

    Raises
    ------
    TransformError
        If more than ``max_macro_expansions`` instantiations are needed, as
        with a self-recursive macro

    """
    expander = _MacroExpander(context)
    expander.expand_children(root)
    logger.debug("Registered %d macros, %d expansions", len(context.macros), expander.expansions)


def _parse_arity(node: Expression) -> int:
    if node.options is None:
        return 0
    raw = node.options.raw.strip()
    if not raw.isdigit():
        logger.warning("Ignoring non-numeric parameter count %r of \\%s on line %s", raw, node.name, node.line)
        return 0
    arity = int(raw)
    if arity > MAX_MACRO_ARITY:
        logger.warning("Parameter count %d of \\%s capped at %d", arity, node.name, MAX_MACRO_ARITY)
        return MAX_MACRO_ARITY
    return arity


class _MacroExpander:
    """Walk state for one document."""

    def __init__(self, context: ConversionContext) -> None:
        self.context = context
        self.arena = context.arena
        self.builder = TreeBuilder(context)
        self.limit = context.options.max_macro_expansions
        self.expansions = 0

    def expand_children(self, node: Expression) -> None:
        for group_index in range(len(node.children)):
            self.expand_group(node, group_index)

    def expand_group(self, parent: Expression, group_index: int) -> None:
        group = parent.children[group_index]
        index = 0
        while index < len(group):
            node = group[index]
            if node.is_command(*DEFINE_COMMANDS):
                self.define(node)
            elif node.kind is ExpressionType.COMMAND and node.name in self.context.macros:
                # rescan the expansion from the same position
                self.instantiate(node)
                continue
            else:
                self.expand_children(node)
            index += 1

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def _absorb_unbraced_name(self, node: Expression) -> None:
        r"""Rewrite ``\newcommand\foo[1]{...}`` into the braced form."""
        target = node.next_sibling()
        if target is None or target.kind is not ExpressionType.COMMAND or not target.children:
            return
        target.detach()
        body = target.remove_group(0)
        for _ in range(len(target.children)):
            for orphan in target.remove_group(0):
                self.arena.release(orphan)
        if target.options is not None and node.options is None:
            node.set_options(ExpressionOptions(raw=target.options.raw))
        target.set_options(None)
        raw_body = target.raw_values[0] if target.raw_values else ""
        target.raw_values = ()
        node.add_group([target])
        node.add_group(body)
        node.raw_values = ("\\" + target.name, raw_body)

    def define(self, node: Expression) -> None:
        if not node.children:
            self._absorb_unbraced_name(node)
        try:
            name_group, _ = require_argument_groups(node, 2)
        except ArgumentShapeError as exc:
            logger.warning("%s on line %s; definition ignored", exc.message, node.line)
            return

        name_node = next((child for child in name_group if child.kind is ExpressionType.COMMAND), None)
        if name_node is None:
            logger.warning("\\%s on line %s does not name a command; definition ignored", node.name, node.line)
            return
        name = name_node.name

        for group_index in range(1, len(node.children)):
            self.expand_group(node, group_index)

        macros = self.context.macros
        if name in macros:
            if node.name == "newcommand":
                logger.warning("Command \\%s is already defined; keeping the first definition", name)
                return
            if node.name == "providecommand":
                logger.debug("\\providecommand skipped for existing \\%s", name)
                return

        macros[name] = MacroDefinition(
            name=name,
            arity=_parse_arity(node),
            text_body=[child.deep_copy() for child in node.children[1]],
            raw_body=node.raw_values[1] if len(node.raw_values) > 1 else "",
            defined_by=node.name,
            line=node.line,
        )
        logger.debug("Defined \\%s with %d parameter(s)", name, macros[name].arity)

    # ------------------------------------------------------------------
    # Invocations
    # ------------------------------------------------------------------

    def instantiate(self, node: Expression) -> None:
        self.expansions += 1
        if self.expansions > self.limit:
            raise TransformError(
                f"Macro expansion limit of {self.limit} exceeded while expanding \\{node.name}",
                transform_name="macros",
            )

        definition = self.context.macros[node.name]
        arguments = [node.remove_group(0) for _ in range(len(node.children))]
        options = node.options
        node.set_options(None)

        body = [template.deep_copy() for template in definition.body_for(node.math_mode, self.builder)]
        for top in body:
            top.math_mode = node.math_mode
        if body:
            body[0].space_before = node.space_before

        expansion: list[Expression] = []
        for top in body:
            expansion.extend(self._substitute(top, arguments[: definition.arity]))
        for used in arguments[: definition.arity]:
            for argument_node in used:
                self.arena.release(argument_node)

        extra = arguments[definition.arity :]
        fallback = definition.arity == 0 and bool(extra)
        if not fallback:
            expansion.extend(self._brace_block(group, node) for group in extra)

        slot = (node.parent, node.group_index, node.index_in_group)
        node.replace_with(expansion)
        self.arena.release(node)

        if fallback:
            self._attach_extra_groups(expansion, extra, options, node, slot)
        elif options is not None:
            self._release_options(options)

    def _substitute(self, node: Expression, arguments: list[list[Expression]]) -> list[Expression]:
        """Return the nodes replacing ``node`` once placeholders are filled."""
        if node.kind is ExpressionType.PLAIN_TEXT:
            if not _PLACEHOLDER_PATTERN.search(node.name):
                return [node]
            pieces = self._split_placeholders(node, arguments)
            self.arena.release(node)
            return pieces

        for group_index, group in enumerate(node.children):
            replaced: list[Expression] = []
            for child in group:
                replaced.extend(self._substitute(child, arguments))
            node.set_group(group_index, replaced)
        return [node]

    def _split_placeholders(self, node: Expression, arguments: list[list[Expression]]) -> list[Expression]:
        pieces: list[Expression] = []
        position = 0
        for match in _PLACEHOLDER_PATTERN.finditer(node.name):
            if match.start() > position:
                pieces.append(self._text(node, node.name[position : match.start()], not pieces))
            number = int(match.group(1))
            if number <= len(arguments):
                pieces.extend(argument.deep_copy() for argument in arguments[number - 1])
            position = match.end()
        if position < len(node.name):
            pieces.append(self._text(node, node.name[position:], not pieces))
        return pieces

    def _text(self, source: Expression, text: str, first: bool) -> Expression:
        return self.arena.create(
            text,
            ExpressionType.PLAIN_TEXT,
            math_mode=source.math_mode,
            space_before=source.space_before if first else False,
            line=source.line,
        )

    def _brace_block(self, group: list[Expression], invocation: Expression) -> Expression:
        block = self.arena.create(BLOCK_BRACES, ExpressionType.BLOCK, math_mode=invocation.math_mode, line=invocation.line)
        block.add_group(group)
        return block

    def _release_options(self, options: ExpressionOptions) -> None:
        for option_node in options.as_expressions or ():
            self.arena.release(option_node)

    def _attach_extra_groups(
        self,
        expansion: list[Expression],
        groups: list[list[Expression]],
        options: ExpressionOptions | None,
        invocation: Expression,
        slot: tuple[Expression, int, int],
    ) -> None:
        """Hand brace groups of a parameterless invocation to its body."""
        target = find_last_command(expansion)
        if target is None:
            if expansion:
                anchor = expansion[-1]
                parent, group_index, index = anchor.parent, anchor.group_index, anchor.index_in_group + 1
            else:
                parent, group_index, index = slot
            parent.insert(group_index, index, [self._brace_block(group, invocation) for group in groups])
            if options is not None:
                self._release_options(options)
            return

        following = target.next_sibling()
        if following is None or not following.is_script:
            for group in groups:
                target.add_group(group)
            if target.options is None and options is not None:
                target.set_options(options)
            elif options is not None:
                self._release_options(options)
            return

        offset = 2
        after = following.next_sibling()
        if after is not None and after.is_script and after.name != following.name:
            offset = 3
        contents = [child for group in groups for child in group]
        target.parent.insert(target.group_index, target.index_in_group + offset, contents)
        if options is not None:
            self._release_options(options)

