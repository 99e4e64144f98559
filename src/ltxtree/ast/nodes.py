#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/ast/nodes.py
r"""Expression node classes for the LaTeX tree.

This module defines the single tree-node type, :class:`Expression`, tagged
by an :class:`ExpressionType`. A node owns an ordered list of children
groups: one group per argument slot, so ``\frac{a}{b}`` carries two groups
and an environment block carries its body as its last group.

Parent links are handles into a :class:`NodeArena` rather than object
references: ``node.parent_id`` is an integer resolved through the arena that
created the node, while ``children`` lists hold the child objects
themselves. Every mutation helper keeps the position triple
``(parent, group_index, index_in_group)`` equal to the node's actual slot.

Examples
--------
Build a tiny tree by hand:

    >>> arena = NodeArena()
    >>> frac = arena.create("frac", ExpressionType.COMMAND)
    >>> frac.add_group([arena.create("a", ExpressionType.PLAIN_TEXT)])
    >>> frac.add_group([arena.create("b", ExpressionType.PLAIN_TEXT)])
    >>> frac.children[1][0].parent is frac
    True

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ltxtree.constants import DOCUMENT_ENVIRONMENT, SCRIPT_NAMES

# Position marker for nodes held in an options expression list
OPTIONS_GROUP = -1


class ExpressionType(Enum):
    """Variant kind of an :class:`Expression`."""

    ROOT = "Root"
    PLAIN_TEXT = "PlainText"
    COMMAND = "Command"
    INLINE_MATH = "InlineMath"
    BLOCK_MATH = "BlockMath"
    BLOCK = "Block"
    COMMENT = "Comment"
    VERBATIM = "Verbatim"


@dataclass
class ExpressionOptions:
    """Contents of a command's ``[...]`` option block.

    Exactly one representation is populated: ``as_key_value`` when the
    bracket contents are a comma separated ``key=value`` list, otherwise
    ``as_expressions`` holding the lexed contents.

    Parameters
    ----------
    raw : str
        Bracket contents as read from the source
    as_key_value : dict or None
        Mapping of trimmed keys to trimmed values (``None`` when a key has no ``=``)
    as_expressions : list of Expression or None
        Lexed contents of the brackets

    """

    raw: str
    as_key_value: dict[str, str | None] | None = None
    as_expressions: list[Expression] | None = None

    @property
    def is_key_value(self) -> bool:
        """Return True when the key-value representation is populated."""
        return self.as_key_value is not None

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value stored for ``key`` in the key-value representation."""
        if self.as_key_value is None:
            return default
        return self.as_key_value.get(key, default)


class NodeArena:
    """Owner of node identities for one conversion.

    The arena hands out stable integer handles and resolves them back to
    nodes. Detached subtrees can be released so that handles of dropped
    nodes stop resolving.
    """

    def __init__(self) -> None:
        """Initialize an empty arena."""
        self._nodes: dict[int, Expression] = {}
        self._next_id = 0

    def create(
        self,
        name: str,
        kind: ExpressionType,
        *,
        math_mode: bool = False,
        space_before: bool = False,
        line: int | None = None,
        raw_values: tuple[str, ...] = (),
    ) -> Expression:
        """Create a detached node registered in this arena."""
        node = Expression(
            name=name,
            kind=kind,
            math_mode=math_mode,
            space_before=space_before,
            line=line,
            raw_values=raw_values,
            node_id=self._next_id,
            arena=self,
        )
        self._nodes[self._next_id] = node
        self._next_id += 1
        return node

    def get(self, node_id: int | None) -> Expression | None:
        """Resolve a handle, returning None for unknown or released handles."""
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def release(self, node: Expression) -> None:
        """Forget ``node`` and all of its descendants."""
        for descendant in node.walk():
            if descendant.options is not None and descendant.options.as_expressions:
                for option_node in descendant.options.as_expressions:
                    self.release(option_node)
            self._nodes.pop(descendant.node_id, None)

    def __contains__(self, node: object) -> bool:
        return isinstance(node, Expression) and self._nodes.get(node.node_id) is node

    def __len__(self) -> int:
        return len(self._nodes)


@dataclass(eq=False)
class Expression:
    """One node of the expression tree.

    Parameters
    ----------
    name : str
        Command or block identifier, or the literal payload for text,
        comment and verbatim nodes
    kind : ExpressionType
        Variant of the node
    math_mode : bool
        Whether the node was read in math mode
    options : ExpressionOptions or None
        Parsed ``[...]`` option block
    children : list of list of Expression
        Ordered children groups
    tag : Any
        Per-pass payload: block counter, label string, algorithm line info
    space_before : bool
        Whether whitespace preceded the node in the source
    line : int or None
        1-based source line the node started on
    raw_values : tuple of str
        Source text of each brace group of a command, as read
    node_id : int
        Handle assigned by the owning arena
    parent_id : int or None
        Handle of the parent node
    group_index : int
        Which children group of the parent holds this node
    index_in_group : int
        Position inside that group

    """

    name: str
    kind: ExpressionType
    math_mode: bool = False
    options: ExpressionOptions | None = None
    children: list[list[Expression]] = field(default_factory=list)
    tag: Any = None
    space_before: bool = False
    line: int | None = None
    raw_values: tuple[str, ...] = ()
    node_id: int = -1
    parent_id: int | None = None
    group_index: int = 0
    index_in_group: int = 0
    arena: NodeArena | None = field(default=None, repr=False, compare=False)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Expression | None:
        """Parent node resolved through the arena."""
        if self.arena is None:
            return None
        return self.arena.get(self.parent_id)

    @property
    def siblings(self) -> list[Expression]:
        """The children group that holds this node (empty when detached)."""
        parent = self.parent
        if parent is None or self.group_index == OPTIONS_GROUP:
            return []
        return parent.children[self.group_index]

    @property
    def is_script(self) -> bool:
        """True for a raw ``^``/``_`` script block."""
        return self.kind is ExpressionType.BLOCK and self.name in SCRIPT_NAMES

    def is_command(self, *names: str) -> bool:
        """Return True for a command node, optionally restricted to ``names``."""
        return self.kind is ExpressionType.COMMAND and (not names or self.name in names)

    def is_block(self, *names: str) -> bool:
        """Return True for a block node, optionally restricted to ``names``."""
        return self.kind is ExpressionType.BLOCK and (not names or self.name in names)

    def group(self, index: int) -> list[Expression]:
        """Return children group ``index``, or an empty list when it is missing."""
        if 0 <= index < len(self.children):
            return self.children[index]
        return []

    def next_sibling(self) -> Expression | None:
        """Return the node after this one in its group."""
        siblings = self.siblings
        if self.index_in_group + 1 < len(siblings):
            return siblings[self.index_in_group + 1]
        return None

    def previous_sibling(self) -> Expression | None:
        """Return the node before this one in its group."""
        if self.index_in_group > 0 and self.siblings:
            return self.siblings[self.index_in_group - 1]
        return None

    def ancestors(self) -> Iterator[Expression]:
        """Yield the parent chain from the nearest ancestor upward."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def iter_children(self) -> Iterator[Expression]:
        """Yield direct children across all groups in order."""
        for group in self.children:
            yield from group

    def walk(self) -> Iterator[Expression]:
        """Yield this node and every descendant in pre-order.

        Groups are snapshotted before descending, so callers may mutate
        nodes that were already yielded.
        """
        yield self
        for group in list(self.children):
            for child in list(group):
                yield from child.walk()

    def find_document(self) -> Expression | None:
        """Return the top-level ``document`` block of a root node."""
        if self.kind is not ExpressionType.ROOT or not self.children:
            return None
        for child in self.children[0]:
            if child.is_block(DOCUMENT_ENVIRONMENT):
                return child
        return None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _adopt(self, node: Expression, group_index: int, index: int) -> None:
        if node.arena is not self.arena:
            raise ValueError(f"Cannot adopt node {node!r} from a different arena")
        node.parent_id = self.node_id
        node.group_index = group_index
        node.index_in_group = index

    def renumber(self, group_index: int, start: int = 0) -> None:
        """Rewrite position bookkeeping for group ``group_index`` from ``start`` on."""
        group = self.children[group_index]
        for index in range(start, len(group)):
            self._adopt(group[index], group_index, index)

    def add_group(self, nodes: Iterable[Expression] = ()) -> list[Expression]:
        """Append a new children group holding ``nodes`` and return it."""
        self.children.append(list(nodes))
        self.renumber(len(self.children) - 1)
        return self.children[-1]

    def set_group(self, group_index: int, nodes: Iterable[Expression]) -> None:
        """Replace the contents of group ``group_index``."""
        self.children[group_index] = list(nodes)
        self.renumber(group_index)

    def remove_group(self, group_index: int) -> list[Expression]:
        """Remove a whole children group, shifting later groups down."""
        removed = self.children.pop(group_index)
        for node in removed:
            node.parent_id = None
        for index in range(group_index, len(self.children)):
            self.renumber(index)
        return removed

    def insert(self, group_index: int, index: int, nodes: Iterable[Expression]) -> None:
        """Insert ``nodes`` into group ``group_index`` before position ``index``."""
        items = list(nodes)
        group = self.children[group_index]
        group[index:index] = items
        self.renumber(group_index, index)

    def append(self, group_index: int, node: Expression) -> None:
        """Append ``node`` to group ``group_index``."""
        group = self.children[group_index]
        group.append(node)
        self._adopt(node, group_index, len(group) - 1)

    def pop(self, group_index: int, index: int) -> Expression:
        """Remove and return the child at ``(group_index, index)``."""
        node = self.children[group_index].pop(index)
        node.parent_id = None
        self.renumber(group_index, index)
        return node

    def pop_range(self, group_index: int, start: int, stop: int) -> list[Expression]:
        """Remove and return the children in ``[start, stop)`` of a group."""
        group = self.children[group_index]
        removed = group[start:stop]
        del group[start:stop]
        for node in removed:
            node.parent_id = None
        self.renumber(group_index, start)
        return removed

    def detach(self) -> Expression:
        """Remove this node from its parent and return it."""
        parent = self.parent
        if parent is not None and self.group_index != OPTIONS_GROUP:
            parent.pop(self.group_index, self.index_in_group)
        return self

    def replace_with(self, nodes: Sequence[Expression]) -> None:
        """Put ``nodes`` in this node's slot and detach this node."""
        parent = self.parent
        if parent is None:
            raise ValueError(f"Cannot replace detached node {self!r}")
        group_index, index = self.group_index, self.index_in_group
        parent.pop(group_index, index)
        parent.insert(group_index, index, nodes)

    def set_options(self, options: ExpressionOptions | None) -> None:
        """Attach an option block, adopting the nodes of its expression list."""
        self.options = options
        if options is not None and options.as_expressions:
            for index, node in enumerate(options.as_expressions):
                self._adopt(node, OPTIONS_GROUP, index)

    def set_math_mode(self, value: bool, recursive: bool = False) -> None:
        """Set the math-mode flag on this node and optionally its descendants."""
        targets = self.walk() if recursive else iter((self,))
        for node in targets:
            node.math_mode = value

    def deep_copy(self) -> Expression:
        """Return an independent copy of this subtree with fresh handles.

        The copy is detached; its descendants point at the copied parents.
        """
        if self.arena is None:
            raise ValueError("Cannot copy a node that does not belong to an arena")
        clone = self.arena.create(
            self.name,
            self.kind,
            math_mode=self.math_mode,
            space_before=self.space_before,
            line=self.line,
            raw_values=self.raw_values,
        )
        clone.tag = list(self.tag) if isinstance(self.tag, list) else self.tag
        if self.options is not None:
            clone.set_options(
                ExpressionOptions(
                    raw=self.options.raw,
                    as_key_value=dict(self.options.as_key_value) if self.options.as_key_value is not None else None,
                    as_expressions=(
                        [node.deep_copy() for node in self.options.as_expressions]
                        if self.options.as_expressions is not None
                        else None
                    ),
                )
            )
        for group in self.children:
            clone.add_group(child.deep_copy() for child in group)
        return clone

    def __repr__(self) -> str:
        return f"({self.group_index}) [{self.kind.value}] {self.name}"
