"""Tree-sitter based import/export extraction for TypeScript and JavaScript."""

from __future__ import annotations

from typing import TYPE_CHECKING

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from parse.specifiers import ImportSpecifier, ParseError

if TYPE_CHECKING:
    from pathlib import Path

# Plain TypeScript rejects JSX, so everything except .ts goes through TSX.
TYPESCRIPT_SUFFIXES = frozenset({".ts", ".mts", ".cts"})

_STATEMENT_TYPES = frozenset({"import_statement", "export_statement"})

_PARSERS: dict[str, Parser] = {}


def _get_parser(suffix: str) -> Parser:
    """Initialize and return the Tree-sitter parser for a file suffix."""
    grammar = "typescript" if suffix in TYPESCRIPT_SUFFIXES else "tsx"
    parser = _PARSERS.get(grammar)
    if parser is None:
        if grammar == "typescript":
            lang = Language(tree_sitter_typescript.language_typescript())
        else:
            lang = Language(tree_sitter_typescript.language_tsx())
        parser = Parser(lang)
        _PARSERS[grammar] = parser
    return parser


def _string_value(node: Node) -> str | None:
    """Return the unquoted text of a string literal node."""
    if node.type != "string" or not node.text:
        return None
    text = node.text.decode("utf8")
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return None


def _first_error(node: Node) -> Node | None:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


def _char_column(source_bytes: bytes, start_byte: int) -> int:
    """1-based character column of a byte offset (tree-sitter counts bytes)."""
    line_start = source_bytes.rfind(b"\n", 0, start_byte) + 1
    prefix = source_bytes[line_start:start_byte]
    return len(prefix.decode("utf-8", errors="replace")) + 1


def _collect_specifiers(root: Node, source_bytes: bytes) -> list[ImportSpecifier]:
    """Walk the tree in source order and collect statement specifiers.

    Statements that contain syntax errors themselves are skipped.
    """
    specifiers: list[ImportSpecifier] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type in _STATEMENT_TYPES and not node.has_error:
            source = node.child_by_field_name("source")
            value = _string_value(source) if source is not None else None
            if source is not None and value is not None:
                specifiers.append(
                    ImportSpecifier(
                        text=value,
                        line=source.start_point[0] + 1,
                        column=_char_column(source_bytes, source.start_byte),
                    )
                )
        stack.extend(reversed(node.children))
    return specifiers


def extract_imports_treesitter(file_path: Path) -> list[ImportSpecifier]:
    """Extract import/export specifiers from a script file using Tree-sitter.

    Only ``import ... from "x"``, ``import "x"`` and ``export ... from "x"``
    statements are considered; dynamic ``import()`` and ``require()`` calls
    are not.

    Raises:
        ParseError: The file cannot be read or the syntax tree contains
            errors; in the latter case the specifiers of well-formed
            statements are attached as ``recovered``.
    """
    try:
        source_bytes = file_path.read_bytes()
    except OSError as exc:
        raise ParseError(file_path, f"cannot read file: {exc.strerror}") from exc

    tree = _get_parser(file_path.suffix).parse(source_bytes)
    root_node = tree.root_node

    specifiers = _collect_specifiers(root_node, source_bytes)

    if root_node.has_error:
        recovered = tuple(specifiers)
        error = _first_error(root_node)
        if error is None:
            raise ParseError(file_path, "syntax error", recovered)
        line = error.start_point[0] + 1
        column = _char_column(source_bytes, error.start_byte)
        raise ParseError(
            file_path, f"syntax error at line {line}, column {column}", recovered
        )

    return specifiers


__all__ = ["TYPESCRIPT_SUFFIXES", "extract_imports_treesitter"]
