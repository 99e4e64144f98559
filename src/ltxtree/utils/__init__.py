#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/utils/__init__.py
"""Helpers for files referenced by a document: decoding, paths, bibliography."""
