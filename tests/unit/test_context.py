"""Unit tests for the conversion context.

Tests cover:
- Counters and the label reference table
- Citation lookup
- Localized titles and source directory resolution
- Text style state
- Resetting the context
"""

import logging
from pathlib import Path

import pytest

from ltxtree.ast.families import TextSize, TextStyle
from ltxtree.context import ConversionContext, LabeledReference, SectionType
from ltxtree.exceptions import UnresolvedReferenceError
from ltxtree.options.latex import LatexOptions


@pytest.mark.unit
class TestCounters:
    """Tests for next_counter."""

    def test_counters_start_at_one(self, context):
        """Test that each name has its own counter."""
        assert context.next_counter("figure") == 1
        assert context.next_counter("figure") == 2
        assert context.next_counter("table") == 1
        assert context.counters == {"figure": 2, "table": 1}


@pytest.mark.unit
class TestReferences:
    """Tests for the label reference table."""

    def test_register_and_lookup(self, context):
        """Test recording a label target."""
        assert context.register_reference("eq:1", "equation", 3) is True
        assert context.lookup_reference("eq:1") == LabeledReference(kind="equation", number=3)

    def test_first_definition_wins(self, context, caplog):
        """Test that duplicate labels are ignored with a warning."""
        context.register_reference("a", "figure", 1)
        with caplog.at_level(logging.WARNING):
            assert context.register_reference("a", "table", 2) is False
        assert context.lookup_reference("a").kind == "figure"
        assert "Duplicate label" in caplog.text

    def test_unknown_label(self, context):
        """Test that looking up an unknown label raises."""
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            context.lookup_reference("missing")
        assert exc_info.value.label == "missing"

    def test_missing_citation(self, context):
        """Test that unknown citation keys resolve to None."""
        assert context.resolve_citation("knuth84") is None


@pytest.mark.unit
class TestContextProperties:
    """Tests for derived properties."""

    def test_default_options(self):
        """Test that a context without options uses the defaults."""
        assert ConversionContext().options == LatexOptions()

    def test_localized_titles(self):
        """Test the titles for each localization."""
        english = ConversionContext()
        russian = ConversionContext(LatexOptions(localization="ru"))
        assert english.contents_title == "Contents"
        assert english.bibliography_title == "Bibliography"
        assert russian.localization == "ru"
        assert russian.contents_title == "Содержание"
        assert russian.bibliography_title == "Литература"

    def test_source_dir(self, temp_dir):
        """Test that resources resolve against the source file directory."""
        context = ConversionContext(source_path=temp_dir / "main.tex")
        assert context.source_dir == temp_dir.resolve()
        assert ConversionContext().source_dir == Path.cwd()

    def test_output_path(self):
        """Test that the output path is stored as a Path."""
        assert ConversionContext(output_path="out/doc.html").output_path == Path("out/doc.html")

    def test_css_style(self, context):
        """Test the CSS classes of the current text state."""
        assert context.current_css_style() == "normalsize"
        context.current_text_size = TextSize.LARGE
        context.current_text_style = TextStyle.BOLD | TextStyle.ITALIC
        assert context.current_css_style() == "large text_bold text_italic"


@pytest.mark.unit
def test_reset_clears_tables(context):
    """Test that reset drops every table and the arena."""
    arena = context.arena
    context.next_counter("figure")
    context.register_reference("a", "figure", 1)
    context.current_section_type = SectionType.UNNUMBERED
    context.reset()
    assert context.arena is not arena
    assert context.counters == {}
    assert context.references == {}
    assert context.section_contents == {SectionType.NUMBERED: [], SectionType.UNNUMBERED: []}
    assert context.current_section_type is SectionType.NUMBERED
    assert context.macros == {}
    assert context.bibliography == {}
