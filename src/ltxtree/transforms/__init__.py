#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/__init__.py
"""Rewrite passes that turn the raw tree into its final shape.

Every pass is a function ``pass(root, context)`` mutating the tree in place.
:class:`ParsePipeline` runs them in the order of :data:`PASSES`.
"""

from ltxtree.transforms.metadata import PassMetadata
from ltxtree.transforms.pipeline import ParsePipeline
from ltxtree.transforms.registry import PASSES, get_pass, list_passes

__all__ = ["PASSES", "ParsePipeline", "PassMetadata", "get_pass", "list_passes"]
