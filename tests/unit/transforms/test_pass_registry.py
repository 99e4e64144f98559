"""Unit tests for the pass registry and pass metadata."""

import pytest

from ltxtree.constants import PASS_COUNT
from ltxtree.transforms import PASSES, PassMetadata, get_pass, list_passes


@pytest.mark.unit
class TestRegistry:
    """Tests for the ordered pass registry."""

    def test_order(self):
        """Test the fixed execution order."""
        assert list_passes() == [
            "imports",
            "macros",
            "hoisting",
            "encapsulation",
            "tables",
            "scripts",
            "lists",
            "paragraphs",
            "baseless_scripts",
            "numbering",
            "labels",
            "algorithms",
            "bibliography",
        ]
        assert len(PASSES) + 1 == PASS_COUNT

    def test_get_pass(self):
        """Test looking up a pass by name."""
        metadata = get_pass("scripts")
        assert metadata.description == "Group superscripts and subscripts with their base"
        assert callable(metadata.function)

    def test_unknown_pass(self):
        """Test that an unknown name raises KeyError."""
        with pytest.raises(KeyError, match="Unknown pass"):
            get_pass("spellcheck")

    def test_writes(self):
        """Test the context tables each pass declares."""
        assert get_pass("numbering").writes == ("counters", "section_contents")
        assert get_pass("labels").writes == ("references",)
        assert get_pass("tables").writes == ()


@pytest.mark.unit
class TestPassMetadata:
    """Tests for PassMetadata validation and calling."""

    def test_empty_name(self):
        """Test that a pass needs a name."""
        with pytest.raises(ValueError):
            PassMetadata(name="", description="x", function=lambda root, context: None)

    def test_function_must_be_callable(self):
        """Test that the function is validated."""
        with pytest.raises(ValueError):
            PassMetadata(name="broken", description="x", function="not callable")

    def test_call_runs_function(self):
        """Test that calling the metadata runs the pass."""
        calls = []
        metadata = PassMetadata(name="record", description="x", function=lambda root, context: calls.append(root))
        metadata("root", "context")
        assert calls == ["root"]
