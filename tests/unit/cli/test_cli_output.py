"""Unit tests for CLI argument mapping and output formatting.

Tests cover:
- Mapping arguments to parse options
- The plain outline, rich tree and summary table renderers
- JSON output written through write_result
"""

import argparse
import io
import json

import pytest
from rich.console import Console

from ltxtree.api import parse_latex
from ltxtree.cli import (
    build_options,
    build_rich_tree,
    build_summary_table,
    create_parser,
    format_outline,
    positive_float,
    write_result,
)


def _render(renderable) -> str:
    buffer = io.StringIO()
    Console(file=buffer, width=100, no_color=True).print(renderable)
    return buffer.getvalue()


@pytest.mark.unit
@pytest.mark.cli
class TestArguments:
    """Tests for argument parsing helpers."""

    def test_build_options(self):
        """Test that flags map onto option fields."""
        args = create_parser().parse_args(
            [
                "paper.tex",
                "--encoding",
                "auto",
                "--no-imports",
                "--no-bibliography",
                "--timeout",
                "5",
                "--localization",
                "ru",
            ]
        )
        options = build_options(args)
        assert options.encoding is None
        assert options.include_imports is False
        assert options.resolve_bibliography is False
        assert options.timeout == 5.0
        assert options.localization == "ru"

    def test_default_options(self):
        """Test the options built without flags."""
        options = build_options(create_parser().parse_args(["paper.tex"]))
        assert options.encoding == "utf-8"
        assert options.include_imports is True
        assert options.timeout == 120.0

    @pytest.mark.parametrize("value", ["0", "-1", "soon"])
    def test_positive_float_rejects(self, value):
        """Test that invalid timeouts are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            positive_float(value)

    def test_positive_float_accepts(self):
        """Test that a positive number is accepted."""
        assert positive_float("2.5") == 2.5


@pytest.mark.unit
@pytest.mark.cli
class TestRenderers:
    """Tests for the output renderers."""

    def test_outline(self):
        """Test the indented outline with group markers."""
        result = parse_latex("$x^2$")
        assert format_outline(result.root).splitlines() == [
            "[Root] ''",
            "  [Block] paragraph  tag=1",
            "    [InlineMath] $",
            "      #0",
            "        [Block] script^  tag=1",
            "          [PlainText] x",
            "          [Block] ^  tag=1",
            "            [PlainText] 2",
            "      #1",
            "        [PlainText] x^2",
        ]

    def test_rich_tree(self):
        """Test that the rich tree shows the same labels."""
        output = _render(build_rich_tree(parse_latex("$x^2$").root))
        assert "[InlineMath] $" in output
        assert "[Block] script^  tag=1" in output
        assert "#1" in output

    def test_summary_table(self):
        """Test that the summary lists node kinds and context tables."""
        result = parse_latex(r"\begin{figure}\label{f}\end{figure}")
        output = _render(build_summary_table(result))
        assert "Parse summary" in output
        assert "Command" in output
        assert "labels" in output
        assert "counter: figure" in output

    def test_write_json(self):
        """Test JSON output with the context tables."""
        result = parse_latex(r"\begin{figure}\label{f}\end{figure}")
        args = create_parser().parse_args(["paper.tex"])
        stream = io.StringIO()
        write_result(result, args, stream)
        data = json.loads(stream.getvalue())
        assert data["schema_version"] == 1
        assert data["tree"]["kind"] == "Root"
        assert data["context"]["references"] == {"f": {"kind": "figure", "number": 1}}

    def test_write_plain_tree(self):
        """Test the tree format without rich styling."""
        args = create_parser().parse_args(["paper.tex", "--format", "tree"])
        stream = io.StringIO()
        write_result(parse_latex("Hello"), args, stream)
        assert stream.getvalue().splitlines()[0] == "[Root] ''"
        assert "[PlainText] Hello" in stream.getvalue()
