"""Pytest configuration and shared fixtures for the ltxtree test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
import os
from pathlib import Path
from typing import Generator

import pytest
from hypothesis import Phase, Verbosity, settings
from utils import cleanup_test_dir, create_test_temp_dir

from ltxtree.context import ConversionContext
from ltxtree.logging_utils import NOISY_LIBRARIES
from ltxtree.options.latex import LatexOptions
from ltxtree.parsers.builder import TreeBuilder

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "property: Property-based tests driven by hypothesis")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files.

    Yields
    ------
    Path
        Temporary directory path that will be cleaned up after test.

    """
    temp_path = create_test_temp_dir()
    try:
        yield temp_path
    finally:
        cleanup_test_dir(temp_path)


@pytest.fixture
def context() -> ConversionContext:
    """Provide a fresh conversion context with default options."""
    return ConversionContext(LatexOptions())


@pytest.fixture
def builder(context: ConversionContext) -> TreeBuilder:
    """Provide a tree builder bound to the ``context`` fixture."""
    return TreeBuilder(context)


@pytest.fixture
def isolated_logging() -> Generator[None, None, None]:
    """Drop handlers installed by ``configure_logging`` and restore logger levels."""
    root_logger = logging.getLogger()
    library_loggers = [logging.getLogger(name) for name in NOISY_LIBRARIES]
    level = root_logger.level
    library_levels = [logger.level for logger in library_loggers]
    try:
        yield
    finally:
        for handler in list(root_logger.handlers):
            if type(handler) in (logging.StreamHandler, logging.FileHandler):
                root_logger.removeHandler(handler)
                handler.close()
        root_logger.setLevel(level)
        for library_logger, library_level in zip(library_loggers, library_levels):
            library_logger.setLevel(library_level)
