#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/transforms/pipeline.py
"""Ordered execution of tree building and the rewrite passes.

A :class:`ParsePipeline` runs the fourteen steps of one conversion on a
fresh :class:`~ltxtree.context.ConversionContext`:

1. Preformat the source and build the tree
2. Apply every pass of :data:`~ltxtree.transforms.registry.PASSES` in order
3. Report each finished step to the optional progress callback

Examples
--------
    >>> from ltxtree.transforms.pipeline import ParsePipeline
    >>> root, context = ParsePipeline().run(r"\\begin{itemize}\\item A\\end{itemize}")
    >>> root.children[0][0].name
    'itemize'

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from ltxtree.ast.nodes import Expression
from ltxtree.context import ConversionContext
from ltxtree.options.latex import LatexOptions
from ltxtree.parsers.builder import TreeBuilder
from ltxtree.parsers.reader import prepare_source
from ltxtree.progress import ProgressCallback, ProgressEvent
from ltxtree.transforms.metadata import PassMetadata
from ltxtree.transforms.registry import PASSES

logger = logging.getLogger(__name__)

BUILD_STEP = "build"


class ParsePipeline:
    """Run tree building and the rewrite passes for one document at a time.

    Parameters
    ----------
    options : LatexOptions, optional
        Parse options shared by every run
    progress_callback : ProgressCallback, optional
        Receives a ``started`` event, one ``item_done`` event per step and a
        ``finished`` event; exceptions it raises are logged and ignored
    passes : sequence of PassMetadata, optional
        Passes to run; defaults to the full ordered registry

    """

    def __init__(
        self,
        options: Optional[LatexOptions] = None,
        progress_callback: Optional[ProgressCallback] = None,
        passes: Optional[tuple[PassMetadata, ...]] = None,
    ) -> None:
        """Initialize the pipeline."""
        self.options = options or LatexOptions()
        self.progress_callback = progress_callback
        self.passes = tuple(passes) if passes is not None else PASSES

    @property
    def total_steps(self) -> int:
        """Tree building plus one step per pass."""
        return 1 + len(self.passes)

    def run(
        self,
        text: str,
        source_path: str | Path | None = None,
        context: ConversionContext | None = None,
    ) -> tuple[Expression, ConversionContext]:
        """Parse ``text`` and apply every pass.

        Parameters
        ----------
        text : str
            Decoded LaTeX source
        source_path : str or Path, optional
            Path the source was read from; relative imports and the
            bibliography resolve against its directory
        context : ConversionContext, optional
            Context to fill; a new one is created when omitted

        Returns
        -------
        tuple of (Expression, ConversionContext)
            Root node and the populated context

        Raises
        ------
        LexError
            If the source leaves a construct open
        TransformError
            If a pass meets a structure it cannot reshape
        ResourceError
            If a required import or bibliography file is missing

        """
        if context is None:
            context = ConversionContext(self.options, source_path=source_path)
        total = self.total_steps
        self._emit_progress("started", "Parsing started", current=0, total=total)

        source_name = str(source_path) if source_path is not None else None
        try:
            root = TreeBuilder(context, source_name).build_root(prepare_source(text, self.options.preformat))
        except Exception as e:
            self._emit_progress("error", f"Tree building failed: {e}", 1, total, {"pass": BUILD_STEP, "error": str(e)})
            raise
        self._emit_progress("item_done", "Tree built", 1, total, {"item_type": "pass", "pass": BUILD_STEP})

        for step, metadata in enumerate(self.passes, 2):
            self._apply_pass(metadata, root, context, step, total)

        self._emit_progress("finished", "Parsing finished", current=total, total=total)
        return root, context

    def _apply_pass(
        self,
        metadata: PassMetadata,
        root: Expression,
        context: ConversionContext,
        step: int,
        total: int,
    ) -> None:
        logger.debug(f"Applying pass: {metadata.name}")
        try:
            metadata(root, context)
        except Exception as e:
            logger.debug(f"Pass {metadata.name} failed: {e}")
            self._emit_progress(
                "error", f"Pass {metadata.name} failed", step, total, {"pass": metadata.name, "error": str(e)}
            )
            # Re-raise - pass failures leave the tree unusable
            raise
        self._emit_progress(
            "item_done", metadata.description, step, total, {"item_type": "pass", "pass": metadata.name}
        )

    def _emit_progress(
        self, event_type: str, message: str, current: int = 0, total: int = 0, metadata: Optional[dict[str, Any]] = None
    ) -> None:
        """Emit a progress event if callback is configured.

        Exceptions raised by the callback are logged and never break the
        pipeline.
        """
        if self.progress_callback is None:
            return

        try:
            event = ProgressEvent(
                event_type=event_type,  # type: ignore[arg-type]
                message=message,
                current=current,
                total=total,
                metadata=metadata or {},
            )
            self.progress_callback(event)
        except Exception as e:
            # Don't let callback errors break the pipeline
            logger.warning(f"Progress callback failed: {e}", exc_info=True)
