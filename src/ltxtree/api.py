"""The major exported API functions for LaTeX parsing."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/ltxtree/api.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from ltxtree.ast.nodes import Expression
from ltxtree.context import ConversionContext
from ltxtree.exceptions import ConversionTimeoutError, InvalidOptionsError, LtxTreeError, ParsingError
from ltxtree.options.latex import LatexOptions
from ltxtree.progress import ProgressCallback
from ltxtree.transforms.pipeline import ParsePipeline
from ltxtree.utils.encoding import read_source
from ltxtree.utils.resources import GraphicsReference, find_graphics
from ltxtree.utils.timing import debug_timer

logger = logging.getLogger(__name__)

__all__ = [
    "GraphicsReference",
    "ParseResult",
    "find_graphics",
    "parse_file",
    "parse_latex",
    "parse_many",
    "parse_with_timeout",
]


@dataclass
class ParseResult:
    """Finished tree and the context the passes filled in.

    Parameters
    ----------
    root : Expression
        Root node of the rewritten tree
    context : ConversionContext
        Counters, references, section contents, macros and bibliography

    """

    root: Expression
    context: ConversionContext

    @property
    def document(self) -> Expression | None:
        """The ``document`` block, when the source has one."""
        return self.root.find_document()


def _resolve_options(options: Optional[LatexOptions], **kwargs: Any) -> LatexOptions:
    """Merge keyword overrides into the options object."""
    if options is not None and not isinstance(options, LatexOptions):
        raise InvalidOptionsError(LatexOptions, type(options))
    if kwargs and options is not None:
        return options.create_updated(**kwargs)
    if kwargs:
        return LatexOptions(**kwargs)
    return options or LatexOptions()


def parse_latex(
    text: str,
    *,
    source_path: Union[str, Path, None] = None,
    options: Optional[LatexOptions] = None,
    progress_callback: Optional[ProgressCallback] = None,
    **kwargs: Any,
) -> ParseResult:
    r"""Parse LaTeX source text into a rewritten expression tree.

    Parameters
    ----------
    text : str
        LaTeX source
    source_path : str or Path, optional
        Path the source belongs to; relative ``\input`` files and the
        bibliography resolve against its directory (the working directory
        when omitted)
    options : LatexOptions, optional
        Parse options
    progress_callback : ProgressCallback, optional
        Receives one event per pipeline step. See :mod:`ltxtree.progress`.
    kwargs : Any
        Individual options that override settings in ``options``

    Returns
    -------
    ParseResult
        Root node and populated context

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not a :class:`LatexOptions`
    LexError
        If a brace group, math span, option block or verbatim environment
        is left open
    TransformError
        If the tree has an unmatched environment or a runaway macro
    MissingResourceError
        If a required import or bibliography file is missing
    ParsingError
        If parsing fails for any other reason

    Examples
    --------
    Inspect the grouped scripts of a formula:
        >>> result = parse_latex(r"$x^2+1$")
        >>> math = result.root.children[0][0].children[0][0]
        >>> [node.name for node in math.children[0]]
        ['script^', 'PlainText']

    Skip import inclusion:
        >>> result = parse_latex(r"\input{chapter}", include_imports=False)

    """
    final_options = _resolve_options(options, **kwargs)
    pipeline = ParsePipeline(final_options, progress_callback=progress_callback)
    try:
        with debug_timer(logger, f"Parsing {source_path or '<string>'}"):
            root, context = pipeline.run(text, source_path=source_path)
    except LtxTreeError:
        raise
    except Exception as e:
        raise ParsingError(f"LaTeX parsing failed: {e!r}", parsing_stage="pipeline", original_error=e) from e
    return ParseResult(root=root, context=context)


def parse_file(
    path: Union[str, Path],
    *,
    options: Optional[LatexOptions] = None,
    progress_callback: Optional[ProgressCallback] = None,
    **kwargs: Any,
) -> ParseResult:
    """Read a LaTeX file and parse it.

    The file is decoded with ``options.encoding``; ``None`` detects the
    encoding with chardet.

    Raises
    ------
    MissingResourceError
        If the file cannot be read

    """
    final_options = _resolve_options(options, **kwargs)
    text = read_source(path, encoding=final_options.encoding)
    return parse_latex(text, source_path=path, options=final_options, progress_callback=progress_callback)


def parse_with_timeout(
    path: Union[str, Path],
    *,
    options: Optional[LatexOptions] = None,
    timeout: Optional[float] = None,
    raise_on_timeout: bool = False,
) -> ParseResult | None:
    """Parse a file on a worker thread with a bounded wait.

    Parameters
    ----------
    path : str or Path
        LaTeX file
    options : LatexOptions, optional
        Parse options
    timeout : float, optional
        Seconds to wait; defaults to ``options.timeout``
    raise_on_timeout : bool, default False
        Raise :class:`ConversionTimeoutError` instead of returning None

    Returns
    -------
    ParseResult or None
        The result, or None when the worker did not finish in time. The
        worker is abandoned, not cancelled.

    """
    final_options = _resolve_options(options)
    limit = timeout if timeout is not None else final_options.timeout
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ltxtree")
    future = executor.submit(parse_file, path, options=final_options)
    try:
        return future.result(timeout=limit)
    except FutureTimeoutError:
        logger.error(f"Parsing {path} did not finish within {limit:g} seconds")
        if raise_on_timeout:
            raise ConversionTimeoutError(limit, str(path)) from None
        return None
    finally:
        executor.shutdown(wait=False)


def parse_many(
    paths: Iterable[Union[str, Path]],
    *,
    options: Optional[LatexOptions] = None,
    max_workers: Optional[int] = None,
) -> dict[Path, ParseResult | Exception]:
    """Parse independent documents concurrently.

    Each document gets its own tree and context. Failures do not stop the
    other documents: the exception is stored as that document's result.

    Returns
    -------
    dict
        Result or exception per input path, in input order

    """
    final_options = _resolve_options(options)
    ordered = [Path(path) for path in paths]
    results: dict[Path, ParseResult | Exception] = {}
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ltxtree") as executor:
        futures = {executor.submit(parse_file, path, options=final_options): path for path in ordered}
        for future in as_completed(futures):
            path = futures[future]
            try:
                results[path] = future.result()
            except Exception as e:
                logger.warning(f"Parsing {path} failed: {e}")
                results[path] = e
    return {path: results[path] for path in ordered}
