"""Options classes for the ltxtree parse pipeline."""

from ltxtree.options.base import BaseParserOptions, CloneFrozenMixin
from ltxtree.options.latex import LatexOptions

__all__ = ["BaseParserOptions", "CloneFrozenMixin", "LatexOptions"]
