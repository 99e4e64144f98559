"""Unit tests for splicing imported files.

Tests cover:
- Replacing input and include commands with file contents
- Nested imports resolved against the importing file
- Circular imports and the depth limit
- Missing files in strict and lenient mode
- Lexing errors that name the imported file
"""

import logging

import pytest
from utils import assert_tree_consistent, names, run_passes, write_sources

from ltxtree.exceptions import LexError, MissingResourceError, TransformError
from ltxtree.options.latex import LatexOptions


def _import(text, main_path, options=None):
    return run_passes(text, "imports", options=options, source_path=main_path)


@pytest.mark.unit
class TestIncludeImports:
    """Tests for include_imports."""

    def test_input_is_replaced(self, temp_dir):
        """Test that the command is replaced by the file's nodes."""
        paths = write_sources(temp_dir, {"main.tex": "", "part.tex": r"\section{Part} Body"})
        root, _ = _import(r"Before \input{part} After", paths["main.tex"])
        assert names(root.children[0]) == ["Before ", "section", "Body", "After"]
        assert_tree_consistent(root)

    def test_include_with_suffix(self, temp_dir):
        """Test that include accepts a name with its suffix."""
        paths = write_sources(temp_dir, {"main.tex": "", "chapter.tex": "Chapter"})
        root, _ = _import(r"\include{chapter.tex}", paths["main.tex"])
        assert names(root.children[0]) == ["Chapter"]

    def test_nested_relative_import(self, temp_dir):
        """Test that nested imports resolve against the importing file."""
        paths = write_sources(
            temp_dir,
            {
                "main.tex": "",
                "parts/outer.tex": r"Outer \input{inner}",
                "parts/inner.tex": "Inner",
            },
        )
        root, _ = _import(r"\input{parts/outer}", paths["main.tex"])
        assert names(root.children[0]) == ["Outer ", "Inner"]

    def test_imported_nodes_keep_their_lines(self, temp_dir):
        """Test that line numbers refer to the imported file."""
        paths = write_sources(temp_dir, {"main.tex": "", "part.tex": "\n\n\\section{Late}"})
        root, _ = _import("\n\\input{part}", paths["main.tex"])
        assert root.children[0][0].line == 3

    def test_circular_import(self, temp_dir):
        """Test that a file importing itself indirectly is rejected."""
        paths = write_sources(temp_dir, {"main.tex": "", "a.tex": r"\input{b}", "b.tex": r"\input{a}"})
        with pytest.raises(TransformError) as exc_info:
            _import(r"\input{a}", paths["main.tex"])
        assert exc_info.value.transform_name == "imports"
        assert "Circular" in str(exc_info.value)

    def test_importing_the_main_file(self, temp_dir):
        """Test that importing the main source is circular too."""
        paths = write_sources(temp_dir, {"main.tex": r"\input{main}"})
        with pytest.raises(TransformError, match="Circular"):
            _import(r"\input{main}", paths["main.tex"])

    def test_depth_limit(self, temp_dir):
        """Test that nesting deeper than the limit raises."""
        paths = write_sources(
            temp_dir,
            {"main.tex": "", "a.tex": r"\input{b}", "b.tex": r"\input{c}", "c.tex": "C"},
        )
        with pytest.raises(TransformError, match="maximum depth"):
            _import(r"\input{a}", paths["main.tex"], LatexOptions(max_import_depth=2))

        root, _ = _import(r"\input{a}", paths["main.tex"], LatexOptions(max_import_depth=3))
        assert names(root.children[0]) == ["C"]

    def test_missing_file_strict(self, temp_dir):
        """Test that a missing import raises by default."""
        with pytest.raises(MissingResourceError) as exc_info:
            _import(r"\input{absent}", temp_dir / "main.tex")
        assert exc_info.value.resource_kind == "import"

    def test_missing_file_lenient(self, temp_dir, caplog):
        """Test that a missing import is dropped with a warning when allowed."""
        options = LatexOptions(fail_on_missing_imports=False)
        with caplog.at_level(logging.WARNING):
            root, _ = _import(r"A \input{absent} B", temp_dir / "main.tex", options)
        assert names(root.children[0]) == ["A ", "B"]
        assert "absent.tex" in caplog.text

    def test_lex_error_names_imported_file(self, temp_dir):
        """Test that a lexing error inside an import reports that file."""
        paths = write_sources(
            temp_dir,
            {"main.tex": "", "chapter.tex": "Text\n\\begin{verbatim}\nnever closed\n"},
        )
        with pytest.raises(LexError) as exc_info:
            _import(r"\input{chapter}", paths["main.tex"])
        assert exc_info.value.construct == "verbatim"
        assert "chapter.tex" in str(exc_info.value)

    def test_disabled(self, temp_dir):
        """Test that imports can be switched off."""
        root, _ = _import(r"\input{absent}", temp_dir / "main.tex", LatexOptions(include_imports=False))
        assert names(root.children[0]) == ["input"]

    def test_without_source_path(self, temp_dir, monkeypatch):
        """Test that imports resolve against the working directory without a source path."""
        write_sources(temp_dir, {"part.tex": "Part"})
        monkeypatch.chdir(temp_dir)
        root, _ = _import(r"\input{part}", None)
        assert names(root.children[0]) == ["Part"]

    def test_nested_imports_are_not_scanned(self, temp_dir):
        """Test that only top-level commands are expanded."""
        paths = write_sources(temp_dir, {"main.tex": ""})
        root, _ = _import(r"\textbf{\input{absent}}", paths["main.tex"])
        assert names(root.children[0]) == ["textbf"]
