#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/parsers/__init__.py
"""Reader and tree builder for LaTeX source."""

from ltxtree.parsers.builder import TreeBuilder, build_root, segment_math_text
from ltxtree.parsers.reader import LatexReader, Token, prepare_source, tokenize

__all__ = ["LatexReader", "Token", "TreeBuilder", "build_root", "prepare_source", "segment_math_text", "tokenize"]
