"""Import extraction for supported source languages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from parse.ast_imports import extract_imports_ast
from parse.specifiers import (
    ClassifiedSpecifier,
    ImportSpecifier,
    ParseError,
    classify_specifier,
)
from parse.treesitter_imports import extract_imports_treesitter

if TYPE_CHECKING:
    from pathlib import Path

PYTHON_SUFFIXES = frozenset({".py"})


def extract_specifiers(
    file_path: Path, namespace: str | None = None
) -> list[ImportSpecifier]:
    """Extract specifiers from a source file, choosing the parser by suffix.

    ``namespace`` only matters for Python, where ``from <namespace> import x``
    names the module in the imported name rather than the module path.
    """
    if file_path.suffix in PYTHON_SUFFIXES:
        return extract_imports_ast(file_path, namespace)
    return extract_imports_treesitter(file_path)


__all__ = [
    "PYTHON_SUFFIXES",
    "ClassifiedSpecifier",
    "ImportSpecifier",
    "ParseError",
    "classify_specifier",
    "extract_imports_ast",
    "extract_imports_treesitter",
    "extract_specifiers",
]
