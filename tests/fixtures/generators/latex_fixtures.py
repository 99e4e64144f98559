"""LaTeX fixture generators for tree-building and pass regression tests."""

from __future__ import annotations


def create_article_document() -> str:
    """Return an article with a macro, sections, math, a list and a table."""
    return (
        "\\documentclass{article}\n"
        "\\newcommand{\\R}{\\mathbb{R}}\n"
        "\\begin{document}\n"
        "\\title{Fixture Sample}\n"
        "\\author{Test Author}\n"
        "\\maketitle\n"
        "\\section{Introduction}\n"
        "Let $f: \\R \\to \\R$ be given by $f(x) = x^2$.\n"
        "\n"
        "\\begin{equation}\n"
        "E = mc^2 \\label{eq:energy}\n"
        "\\end{equation}\n"
        "\\section{Lists}\n"
        "\\begin{itemize}\n"
        "  \\item First item\n"
        "  \\item Second item\n"
        "\\end{itemize}\n"
        "\\subsection{Table}\n"
        "\\begin{tabular}{lr}\n"
        "Name & Score \\\\\n"
        "Alice & 95 \\\\\n"
        "\\end{tabular}\n"
        "\\section*{Acknowledgements}\n"
        "Thanks.\n"
        "\\end{document}\n"
    )


def create_algorithm_document() -> str:
    """Return Euclid's algorithm written with algpseudocode commands."""
    return (
        "\\begin{algorithmic}\n"
        "\\Procedure{Euclid}{a, b}\n"
        "\\State $r \\gets a \\bmod b$\n"
        "\\While{$r \\neq 0$}\n"
        "\\State $a \\gets b$\n"
        "\\State $b \\gets r$\n"
        "\\EndWhile\n"
        "\\State \\Return $b$\n"
        "\\EndProcedure\n"
        "\\end{algorithmic}\n"
    )


def create_bibliography_document() -> tuple[str, str]:
    """Return a document citing two works and the ``refs.bib`` it names."""
    document = (
        "\\begin{document}\n"
        "See \\cite{knuth84} and \\cite{lamport94}.\n"
        "\\bibliography{refs}\n"
        "\\end{document}\n"
    )
    bibliography = (
        "@book{knuth84,\n"
        "  author = {Donald E. Knuth},\n"
        "  title = {The {\\TeX}book},\n"
        "  year = 1984\n"
        "}\n"
        "@comment{ignored}\n"
        '@book{lamport94, author = "Leslie Lamport", title = {LaTeX: A Document Preparation System}, year = {1994}}\n'
    )
    return document, bibliography


def create_labeled_figures(count: int) -> str:
    """Return ``count`` labeled figures inside a document body."""
    figures = "".join(
        f"\\begin{{figure}}\nPicture {index}\\label{{fig:{index}}}\n\\end{{figure}}\n" for index in range(1, count + 1)
    )
    return "\\begin{document}\n" + figures + "\\end{document}\n"


def latex_to_bytes(text: str, encoding: str = "utf-8") -> bytes:
    """Encode LaTeX source for IO usage."""
    return text.encode(encoding)
