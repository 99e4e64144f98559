"""Command line interface for ltxtree.

This module provides a simple command line interface for parsing a LaTeX
file and inspecting the rewritten tree.

Usage:
    ltxtree input.tex [options]

Examples
--------
    ltxtree paper.tex --format summary --rich
    ltxtree paper.tex -o paper.json
    ltxtree paper.tex --format tree --no-imports --timeout 30
    ltxtree --list-passes

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/ltxtree/cli.py

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import IO, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from ltxtree.api import ParseResult, parse_file, parse_with_timeout
from ltxtree.ast.nodes import Expression
from ltxtree.ast.serialization import tree_to_json
from ltxtree.ast.utils import count_kinds
from ltxtree.constants import SUPPORTED_LOCALIZATIONS
from ltxtree.exceptions import ConversionTimeoutError, LtxTreeError
from ltxtree.logging_utils import configure_logging
from ltxtree.options.latex import LatexOptions
from ltxtree.progress import ProgressEvent
from ltxtree.transforms.registry import PASSES

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_CONVERSION_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_TIMEOUT = 3


def _get_version() -> str:
    """Get the version of the ltxtree package."""
    try:
        from importlib.metadata import version

        return version("ltxtree")
    except Exception:
        return "unknown"


def positive_float(value: str) -> float:
    """Argparse type for strictly positive numbers."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"'{value}' must be positive")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ltxtree",
        description="Parse a LaTeX document into an expression tree and report its structure.",
    )
    parser.add_argument("input", nargs="?", help="LaTeX source file")
    parser.add_argument("-o", "--output", help="Write the result to this file instead of stdout")
    parser.add_argument(
        "--format",
        choices=["json", "tree", "summary"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Source encoding; 'auto' detects it (default: utf-8)",
    )
    parser.add_argument(
        "--timeout",
        type=positive_float,
        help="Abandon the conversion after this many seconds",
    )
    parser.add_argument(
        "--localization",
        choices=sorted(SUPPORTED_LOCALIZATIONS),
        default="en",
        help="Localization code for generated titles",
    )
    parser.add_argument("--no-imports", action="store_true", help="Leave \\input and \\include commands in the tree")
    parser.add_argument("--no-bibliography", action="store_true", help="Do not read the \\bibliography file")
    parser.add_argument("--rich", action="store_true", help="Enable rich terminal output with formatting")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar over the parse steps")
    parser.add_argument("--list-passes", action="store_true", help="List the rewrite passes in order and exit")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("--trace", action="store_true", help="Trace mode: timestamps and logger names in log output")
    parser.add_argument("--version", action="version", version=f"ltxtree {_get_version()}")
    return parser


def build_options(args: argparse.Namespace) -> LatexOptions:
    """Map command line arguments to parse options.

    Raises
    ------
    ValueError
        If an option value is out of range

    """
    return LatexOptions(
        encoding=None if args.encoding == "auto" else args.encoding,
        include_imports=not args.no_imports,
        resolve_bibliography=not args.no_bibliography,
        localization=args.localization,
        **({"timeout": args.timeout} if args.timeout is not None else {}),
    )


# =============================================================================
# Output formats
# =============================================================================


def _node_label(node: Expression) -> str:
    name = node.name if node.name and node.name.strip() == node.name else repr(node.name)
    label = f"[{node.kind.value}] {name}"
    if node.tag is not None:
        label += f"  tag={node.tag}"
    return label


def format_outline(root: Expression) -> str:
    """Return an indented plain-text outline of the tree."""
    lines: list[str] = []

    def visit(node: Expression, depth: int) -> None:
        lines.append("  " * depth + _node_label(node))
        for group_index, group in enumerate(node.children):
            if len(node.children) > 1:
                lines.append("  " * (depth + 1) + f"#{group_index}")
            for child in group:
                visit(child, depth + 2 if len(node.children) > 1 else depth + 1)

    visit(root, 0)
    return "\n".join(lines)


def build_rich_tree(root: Expression) -> Tree:
    """Return the tree as a rich renderable."""

    def visit(node: Expression, branch: Tree) -> None:
        for group_index, group in enumerate(node.children):
            target = branch.add(Text(f"#{group_index}", style="dim")) if len(node.children) > 1 else branch
            for child in group:
                visit(child, target.add(Text(_node_label(child))))

    tree = Tree(Text(_node_label(root)))
    visit(root, tree)
    return tree


def build_summary_table(result: ParseResult) -> Table:
    """Return node kind counts and context table sizes as a rich table."""
    table = Table(title="Parse summary")
    table.add_column("Item", style="cyan")
    table.add_column("Count", justify="right")
    for kind, count in sorted(count_kinds(result.root).items()):
        table.add_row(kind, str(count))
    table.add_section()
    context = result.context
    table.add_row("labels", str(len(context.references)))
    table.add_row("macros", str(len(context.macros)))
    table.add_row("bibliography records", str(len(context.bibliography)))
    for name, value in sorted(context.counters.items()):
        table.add_row(f"counter: {name}", str(value))
    return table


def write_result(result: ParseResult, args: argparse.Namespace, stream: IO[str]) -> None:
    """Write ``result`` in the requested format to ``stream``."""
    if args.format == "json":
        stream.write(tree_to_json(result.root, indent=2, context=result.context))
        stream.write("\n")
        return

    console = Console(file=stream, no_color=not args.rich, highlight=False)
    if args.format == "tree":
        if args.rich:
            console.print(build_rich_tree(result.root))
        else:
            stream.write(format_outline(result.root) + "\n")
        return
    console.print(build_summary_table(result))


# =============================================================================
# Entry point
# =============================================================================


def _parse(path: Path, options: LatexOptions, args: argparse.Namespace) -> Optional[ParseResult]:
    if args.timeout is not None:
        return parse_with_timeout(path, options=options, timeout=args.timeout, raise_on_timeout=True)

    if not args.progress:
        return parse_file(path, options=options)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=Console(stderr=True),
    ) as progress:
        task_id = progress.add_task(f"[cyan]Parsing {path.name}...", total=len(PASSES) + 1)

        def on_progress(event: ProgressEvent) -> None:
            if event.event_type == "item_done":
                progress.update(task_id, completed=event.current, description=f"[cyan]{event.message}")

        return parse_file(path, options=options, progress_callback=on_progress)


def main(args: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    if parsed_args.list_passes:
        for step, metadata in enumerate(PASSES, 2):
            print(f"{step:>2}. {metadata.name:<18} {metadata.description}")
        return EXIT_SUCCESS

    if not parsed_args.input:
        print("Error: Input file is required", file=sys.stderr)
        return EXIT_USAGE_ERROR

    path = Path(parsed_args.input)
    if not path.is_file():
        print(f"Error: Input file not found: {path}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        options = build_options(parsed_args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        result = _parse(path, options, parsed_args)
    except ConversionTimeoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_TIMEOUT
    except LtxTreeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONVERSION_ERROR

    if result is None:
        return EXIT_TIMEOUT

    if parsed_args.output:
        output_path = Path(parsed_args.output)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with output_path.open("w", encoding="utf-8") as handle:
                write_result(result, parsed_args, handle)
        except OSError as e:
            print(f"Error: Cannot write {output_path}: {e}", file=sys.stderr)
            return EXIT_USAGE_ERROR
        print(f"Parsed {path} -> {output_path}")
    else:
        write_result(result, parsed_args, sys.stdout)

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
