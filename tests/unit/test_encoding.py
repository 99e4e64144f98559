"""Unit tests for source decoding.

Tests cover:
- chardet based encoding detection
- Declared and detected decoding with fallbacks
- Reading files and reporting missing ones
"""

import pytest

from ltxtree.exceptions import MissingResourceError
from ltxtree.utils.encoding import decode_source, detect_encoding, read_source


@pytest.mark.unit
class TestDetectEncoding:
    """Tests for detect_encoding."""

    def test_utf8_text(self):
        """Test that UTF-8 text with non-ASCII characters is detected."""
        data = ("Это документ на русском языке. " * 20).encode("utf-8")
        detected = detect_encoding(data)
        assert detected is not None
        assert detected.lower().replace("_", "-") == "utf-8"

    def test_empty_data(self):
        """Test that nothing is detected for empty input."""
        assert detect_encoding(b"") is None

    def test_threshold(self):
        """Test that an impossible threshold rejects every guess."""
        assert detect_encoding(b"plain ascii text", confidence_threshold=1.1) is None


@pytest.mark.unit
class TestDecodeSource:
    """Tests for decode_source."""

    def test_declared_encoding(self):
        """Test decoding with a declared encoding."""
        assert decode_source("café".encode("latin-1"), "latin-1") == "café"

    def test_declared_encoding_mismatch(self):
        """Test that a wrong declared encoding raises."""
        with pytest.raises(UnicodeDecodeError):
            decode_source(b"\xff\xfe\xfa", "utf-8")

    def test_detected_encoding(self):
        """Test decoding without a declared encoding."""
        text = "Привет, мир! " * 20
        assert decode_source(text.encode("utf-8"), None) == text

    def test_ascii(self):
        """Test that ASCII input decodes unchanged."""
        assert decode_source(b"\\section{Intro}", None) == "\\section{Intro}"


@pytest.mark.unit
class TestReadSource:
    """Tests for read_source."""

    def test_read_file(self, temp_dir):
        """Test reading an existing file."""
        path = temp_dir / "main.tex"
        path.write_text("\\section{A}", encoding="utf-8")
        assert read_source(path) == "\\section{A}"

    def test_missing_file(self, temp_dir):
        """Test that a missing file raises with its kind."""
        with pytest.raises(MissingResourceError) as exc_info:
            read_source(temp_dir / "absent.tex", resource_kind="import")
        assert exc_info.value.resource_kind == "import"
        assert "absent.tex" in exc_info.value.resource_path
        assert isinstance(exc_info.value.original_error, OSError)
