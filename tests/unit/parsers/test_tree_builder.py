"""Unit tests for the expression tree builder.

Tests cover:
- Math text segmentation and implicit multiplication markers
- Inline and display math node layout
- Math mode of script blocks, brace blocks and text arguments
- Math environments switching the mode of following nodes
- Key-value and expression option blocks
- Raw argument values, line numbers and position bookkeeping
"""

import pytest
from utils import assert_tree_consistent, names

from ltxtree.ast.nodes import OPTIONS_GROUP, ExpressionType
from ltxtree.exceptions import LexError
from ltxtree.parsers.builder import TreeBuilder, build_root, segment_math_text


@pytest.mark.unit
class TestSegmentMathText:
    """Tests for segment_math_text."""

    def test_implicit_multiplication(self):
        """Test that a number before letters or a parenthesis gets a marker."""
        assert segment_math_text("2x(y)") == ["2", "InvisibleTimes", "x", "InvisibleTimes", "(", "y", ")"]

    def test_comparison_operators_and_numbers(self):
        """Test that <= stays one symbol and digit runs stay together."""
        assert segment_math_text("a <= 10") == ["a", "<=", "10"]

    def test_placeholder_keeps_its_digit(self):
        """Test that a macro placeholder is one symbol."""
        assert segment_math_text("#1+#2") == ["#1", "+", "#2"]

    def test_whitespace_separates_symbols(self):
        """Test that whitespace splits letter runs without producing symbols."""
        assert segment_math_text("ab cd") == ["ab", "cd"]


@pytest.mark.unit
class TestMathNodes:
    """Tests for the layout of math nodes."""

    def test_inline_math_groups(self, builder):
        """Test that inline math holds its content and its raw source."""
        root = builder.build_root("$x^2$")
        math = root.children[0][0]
        assert math.kind is ExpressionType.INLINE_MATH
        assert len(math.children) == 2
        assert names(math.children[0]) == ["x", "^"]
        assert math.children[1][0].kind is ExpressionType.PLAIN_TEXT
        assert math.children[1][0].name == "x^2"

    def test_segmented_text_block(self, builder):
        """Test that multi-character math text becomes a segmented block."""
        root = builder.build_root("$2x(y)$")
        segmented = root.children[0][0].children[0][0]
        assert segmented.kind is ExpressionType.BLOCK
        assert segmented.name == "PlainText"
        assert segmented.raw_values == ("2x(y)",)
        assert names(segmented.children[0]) == ["2", "InvisibleTimes", "x", "InvisibleTimes", "(", "y", ")"]
        assert segmented.children[0][1].kind is ExpressionType.COMMAND

    def test_single_character_math_text_is_plain(self, builder):
        """Test that one-character math text stays a PlainText node."""
        root = builder.build_root("$x$")
        node = root.children[0][0].children[0][0]
        assert node.kind is ExpressionType.PLAIN_TEXT
        assert node.math_mode is True

    def test_display_math(self, builder):
        """Test that display math builds the same two groups."""
        root = builder.build_root(r"\[a\]")
        math = root.children[0][0]
        assert math.kind is ExpressionType.BLOCK_MATH
        assert math.name == "\\["
        assert names(math.children[0]) == ["a"]

    def test_script_blocks_are_math(self, builder):
        """Test that script blocks and their contents are in math mode."""
        root = builder.build_root("$x^{ab}$")
        script = root.children[0][0].children[0][1]
        assert script.is_script
        assert script.math_mode is True
        assert all(child.math_mode for child in script.children[0])

    def test_brace_block_keeps_context_mode(self, builder):
        """Test that a brace block in text stays in text mode."""
        root = builder.build_root("{ab}")
        block = root.children[0][0]
        assert block.name == "{}"
        assert block.math_mode is False
        assert names(block.children[0]) == ["ab"]

    def test_text_argument_in_math(self, builder):
        r"""Test that \text arguments are lexed as text inside math."""
        root = builder.build_root(r"$\text{a b}$")
        command = root.children[0][0].children[0][0]
        assert command.name == "text"
        assert command.math_mode is True
        assert command.children[0][0].name == "a b"
        assert command.children[0][0].math_mode is False

    def test_math_environment_switches_mode(self, builder):
        """Test that math mode applies between begin and end of a math environment."""
        root = builder.build_root(r"\begin{equation}ab\end{equation}c")
        group = root.children[0]
        assert group[0].math_mode is False
        assert group[1].kind is ExpressionType.BLOCK
        assert group[1].name == "PlainText"
        assert group[1].math_mode is True
        assert group[2].name == "end"
        assert group[3].name == "c"
        assert group[3].math_mode is False

    def test_other_environments_keep_text_mode(self, builder):
        """Test that non-math environments do not switch mode."""
        root = builder.build_root(r"\begin{itemize}ab\end{itemize}")
        assert root.children[0][1].kind is ExpressionType.PLAIN_TEXT
        assert root.children[0][1].math_mode is False


@pytest.mark.unit
class TestCommandsAndOptions:
    """Tests for command nodes."""

    def test_argument_groups_and_raw_values(self, builder):
        """Test that each brace group becomes a children group."""
        root = builder.build_root(r"\frac{a}{b}")
        frac = root.children[0][0]
        assert frac.kind is ExpressionType.COMMAND
        assert len(frac.children) == 2
        assert frac.raw_values == ("a", "b")
        assert frac.children[1][0].parent is frac

    def test_key_value_options(self, builder):
        """Test that options with = or , become a mapping."""
        root = builder.build_root(r"\includegraphics[width=3cm, draft]{figure}")
        options = root.children[0][0].options
        assert options.is_key_value
        assert options.as_key_value == {"width": "3cm", "draft": None}
        assert options.get("width") == "3cm"
        assert options.as_expressions is None

    def test_expression_options(self, builder):
        """Test that other options are lexed and adopted by the command."""
        root = builder.build_root(r"\sqrt[3]{x}")
        command = root.children[0][0]
        options = command.options
        assert options.raw == "3"
        assert not options.is_key_value
        assert names(options.as_expressions) == ["3"]
        assert options.as_expressions[0].parent is command
        assert options.as_expressions[0].group_index == OPTIONS_GROUP

    def test_comments_are_never_math(self, builder):
        """Test that comments inside math environments are text."""
        root = builder.build_root("\\begin{equation}\n% note\nx\n\\end{equation}")
        comment = root.children[0][1]
        assert comment.kind is ExpressionType.COMMENT
        assert comment.math_mode is False

    def test_line_numbers(self, builder):
        """Test that nodes keep the line they start on."""
        root = builder.build_root("a\n\n\\foo")
        assert root.children[0][-1].name == "foo"
        assert root.children[0][-1].line == 3

    def test_positions_are_consistent(self, builder):
        """Test that every built node records its slot."""
        root = builder.build_root(r"\section{A $x_1^2$} text {\bf b} \frac{1}{2}")
        assert_tree_consistent(root)

    def test_build_fragment_is_detached(self, builder):
        """Test that fragments are returned without a parent."""
        nodes = builder.build_fragment("a + b", True)
        assert nodes[0].parent is None
        assert nodes[0].name == "PlainText"


@pytest.mark.unit
class TestBuilderErrors:
    """Tests for errors raised while building."""

    def test_lex_error_names_source(self, context):
        """Test that the builder passes its source path to the reader."""
        with pytest.raises(LexError) as exc_info:
            TreeBuilder(context, "main.tex").build_root("{")
        assert "main.tex:1" in str(exc_info.value)

    def test_build_root_helper(self, context):
        """Test the module level helper."""
        root = build_root("a", context)
        assert root.kind is ExpressionType.ROOT
        assert names(root.children[0]) == ["a"]
        assert root in context.arena
