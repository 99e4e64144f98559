"""Unit tests for command line logging configuration."""

import logging

import pytest

from ltxtree.logging_utils import configure_logging, resolve_level


@pytest.mark.unit
@pytest.mark.usefixtures("isolated_logging")
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level_by_name(self):
        """Test that level names are resolved."""
        root_logger = configure_logging("debug")
        assert root_logger is logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert [type(handler) for handler in root_logger.handlers] == [logging.StreamHandler]

    def test_unknown_level_falls_back_to_info(self):
        """Test the fallback for an unknown level name."""
        assert configure_logging("chatty").level == logging.INFO

    def test_log_file(self, temp_dir):
        """Test that messages are teed into the log file."""
        log_path = temp_dir / "run.log"
        root_logger = configure_logging(logging.INFO, log_file=str(log_path))
        logging.getLogger("ltxtree.test").info("hello from the test")
        for handler in root_logger.handlers:
            handler.flush()
        content = log_path.read_text(encoding="utf-8")
        assert "hello from the test" in content
        assert "Logging to file" in content

    def test_trace_format(self):
        """Test that trace mode includes logger names."""
        root_logger = configure_logging("INFO", trace_mode=True)
        assert "%(name)s" in root_logger.handlers[0].formatter._fmt

    def test_libraries_quieted(self):
        """Test that chardet and pylatexenc are not logged at debug level."""
        configure_logging("DEBUG")
        assert logging.getLogger("chardet").level == logging.WARNING
        assert logging.getLogger("pylatexenc").level == logging.WARNING

    def test_trace_keeps_library_levels(self):
        """Test that trace mode leaves library loggers alone."""
        logging.getLogger("chardet").setLevel(logging.NOTSET)
        configure_logging("DEBUG", trace_mode=True)
        assert logging.getLogger("chardet").level == logging.NOTSET

    @pytest.mark.parametrize(("name", "level"), [("warning", logging.WARNING), ("Error", logging.ERROR), (15, 15)])
    def test_resolve_level(self, name, level):
        """Test level names in any case and numeric levels."""
        assert resolve_level(name) == level
