"""Test utilities for the ltxtree test suite."""

import tempfile
from pathlib import Path

from ltxtree.ast.nodes import Expression, ExpressionType
from ltxtree.ast.utils import check_positions
from ltxtree.context import ConversionContext
from ltxtree.options.latex import LatexOptions
from ltxtree.transforms import ParsePipeline, get_pass


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    import shutil
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


def write_sources(directory: Path, files: dict[str, str], encoding: str = "utf-8") -> dict[str, Path]:
    """Write every ``name -> text`` pair below ``directory`` and return the paths."""
    paths = {}
    for name, text in files.items():
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding=encoding)
        paths[name] = path
    return paths


def find_nodes(root: Expression, kind: ExpressionType, name: str | None = None) -> list[Expression]:
    """Return nodes of ``kind`` (and ``name`` when given) in pre-order."""
    return [node for node in root.walk() if node.kind is kind and (name is None or node.name == name)]


def first_node(root: Expression, kind: ExpressionType, name: str | None = None) -> Expression:
    """Return the first node of ``kind`` (and ``name``), failing the test when absent."""
    nodes = find_nodes(root, kind, name)
    assert nodes, f"no {kind.value} node named {name!r} in tree"
    return nodes[0]


def names(nodes: list[Expression]) -> list[str]:
    """Return the names of a children group."""
    return [node.name for node in nodes]


def assert_tree_consistent(root: Expression) -> None:
    """Assert that every parent link and position in the tree is correct."""
    problems = check_positions(root)
    assert not problems, "\n".join(problems)


def run_passes(
    text: str,
    *pass_names: str,
    options: LatexOptions | None = None,
    source_path: Path | None = None,
) -> tuple[Expression, ConversionContext]:
    """Build ``text`` and apply only the named passes, in the given order."""
    pipeline = ParsePipeline(options, passes=tuple(get_pass(name) for name in pass_names))
    return pipeline.run(text, source_path=source_path)
