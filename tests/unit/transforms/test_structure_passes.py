"""Unit tests for metadata hoisting, environment encapsulation and tables.

Tests cover:
- Moving author, title and date before the document body
- Folding begin/end pairs into named blocks
- Errors for unbalanced environments
- Splitting tabular and eqnarray bodies into rows and cells
"""

import pytest
from utils import assert_tree_consistent, first_node, names, run_passes

from ltxtree.ast.nodes import ExpressionType
from ltxtree.ast.utils import flatten_text
from ltxtree.exceptions import TransformError


@pytest.mark.unit
class TestHoisting:
    """Tests for hoist_metadata_commands."""

    def test_metadata_moves_before_document(self):
        """Test that title and author precede the document begin."""
        root, _ = run_passes(
            r"\documentclass{article}\begin{document}\title{T}\author{A}Body\end{document}",
            "hoisting",
        )
        assert names(root.children[0]) == ["documentclass", "title", "author", "begin", "Body", "end"]
        assert_tree_consistent(root)

    def test_no_document(self):
        """Test that a fragment without a document is unchanged."""
        root, _ = run_passes(r"Text \title{T}", "hoisting")
        assert names(root.children[0]) == ["Text ", "title"]


@pytest.mark.unit
class TestEncapsulation:
    """Tests for encapsulate_environments."""

    def test_environment_becomes_block(self):
        """Test that the begin command turns into a named block."""
        root, _ = run_passes(r"\begin{itemize}\item A\end{itemize}", "encapsulation")
        block = root.children[0][0]
        assert len(root.children[0]) == 1
        assert block.kind is ExpressionType.BLOCK
        assert block.name == "itemize"
        assert len(block.children) == 1
        assert names(block.children[0]) == ["item", "A"]
        assert_tree_consistent(root)

    def test_arguments_are_kept(self):
        """Test that groups after the environment name stay before the body."""
        root, _ = run_passes(r"\begin{tabular}{cc}x\end{tabular}", "encapsulation")
        block = root.children[0][0]
        assert len(block.children) == 2
        assert flatten_text(block.children[0]) == "cc"
        assert names(block.children[1]) == ["x"]
        assert block.raw_values == ("cc",)

    def test_nested_same_name(self):
        """Test that nested environments of one name match by depth."""
        root, _ = run_passes(r"\begin{a}\begin{a}x\end{a}\end{a}", "encapsulation")
        outer = root.children[0][0]
        inner = outer.children[0][0]
        assert outer.is_block("a")
        assert inner.is_block("a")
        assert names(inner.children[0]) == ["x"]
        assert_tree_consistent(root)

    def test_math_environment_body(self):
        """Test that the body of a math environment is in math mode."""
        root, _ = run_passes(r"\begin{equation}x\end{equation}", "encapsulation")
        block = root.children[0][0]
        assert block.name == "equation"
        assert block.children[-1][0].math_mode is True

    def test_definitions_are_skipped(self):
        """Test that an environment opened inside a definition is not matched."""
        root, _ = run_passes(r"\newcommand{\x}{\begin{center}}", "encapsulation")
        assert names(root.children[0]) == ["newcommand"]

    def test_unmatched_end(self):
        """Test that an end without begin raises."""
        with pytest.raises(TransformError) as exc_info:
            run_passes(r"x\end{a}", "encapsulation")
        assert exc_info.value.transform_name == "encapsulation"

    def test_unmatched_begin(self):
        """Test that a begin without end raises."""
        with pytest.raises(TransformError, match="no matching"):
            run_passes(r"\begin{a}x", "encapsulation")


@pytest.mark.unit
class TestTables:
    """Tests for build_tables."""

    def test_rows_and_cells(self):
        """Test the grid built from a tabular body."""
        root, _ = run_passes(r"\begin{tabular}{cc}a & b \\ c & d\end{tabular}", "encapsulation", "tables")
        table = first_node(root, ExpressionType.BLOCK, "tabular")
        rows = table.children[-1]
        assert len(rows) == 2
        grid = [[flatten_text(cell.children[0]).strip() for cell in row.children[0]] for row in rows]
        assert grid == [["a", "b"], ["c", "d"]]
        assert all(row.is_block("") for row in rows)
        assert_tree_consistent(root)

    def test_hline_and_trailing_row_dropped(self):
        """Test that rules are removed and a trailing empty row is dropped."""
        root, _ = run_passes(r"\begin{tabular}{c}\hline a \\ \hline\end{tabular}", "encapsulation", "tables")
        rows = first_node(root, ExpressionType.BLOCK, "tabular").children[-1]
        assert len(rows) == 1
        assert len(rows[0].children[0]) == 1
        assert not [node for node in root.walk() if node.is_command("hline")]

    def test_empty_cells_kept(self):
        """Test that consecutive separators leave an empty cell."""
        root, _ = run_passes(r"\begin{tabular}{ccc}a & & b\end{tabular}", "encapsulation", "tables")
        cells = first_node(root, ExpressionType.BLOCK, "tabular").children[-1][0].children[0]
        assert [len(cell.children[0]) for cell in cells] == [1, 0, 1]

    def test_math_table(self):
        """Test that eqnarray rows are in math mode."""
        root, _ = run_passes(r"\begin{eqnarray}x &=& y\end{eqnarray}", "encapsulation", "tables")
        rows = first_node(root, ExpressionType.BLOCK, "eqnarray").children[-1]
        assert rows[0].math_mode is True
        assert [flatten_text(cell.children[0]) for cell in rows[0].children[0]] == ["x", "=", "y"]
